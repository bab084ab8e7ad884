"""Interop planning entry point for build orchestration layers.

The caller runs Carthage beforehand, then asks for an :class:`InteropPlan`
covering every (dependency, target) pair. Each pair either resolves to the
header and framework directories to hand to the compiler and linker, along
with a freshly written ``.def`` file, or to a recorded resolution failure.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from cartbind.config import InteropConfig
from cartbind.discovery import load_xcframework, scan_build_products
from cartbind.errors import ResolutionError
from cartbind.interop import write_definition
from cartbind.manifest import XCFramework
from cartbind.models import (
    BuildProducts,
    Dependency,
    InteropBinding,
    InteropPlan,
    Platform,
    ResolutionFailure,
)
from cartbind.observability import StructuredLogger
from cartbind.targets import CompileTarget, library_for_target, require_target

HEADERS_DIR = "Headers"


def plan_interop(
    root: str | Path,
    dependencies: Iterable[Dependency | str],
    targets: Iterable[CompileTarget | str],
    *,
    config: InteropConfig | None = None,
    logger: StructuredLogger | None = None,
) -> InteropPlan:
    config = config or InteropConfig()
    logger = logger if logger is not None else StructuredLogger()
    root_path = Path(root)
    resolved_dependencies = [
        dep if isinstance(dep, Dependency) else config.dependency(dep) for dep in dependencies
    ]
    resolved_targets = [
        target if isinstance(target, CompileTarget) else CompileTarget.named(target)
        for target in targets
    ]
    apple_targets = [target for target in resolved_targets if target.family.is_apple]
    for target in resolved_targets:
        if not target.family.is_apple:
            logger.log(
                operation="skip_target",
                target=target.name,
                message="Skipping non-Apple compile target.",
                level="debug",
            )

    products = discover(root_path, config=config, logger=logger)

    bindings: list[InteropBinding] = []
    failures: list[ResolutionFailure] = []
    for dependency in resolved_dependencies:
        artifact = dependency.module_name
        try:
            bundle, xcframework = load_xcframework(artifact, products)
        except ResolutionError as exc:
            for target in apple_targets:
                failures.append(_record_failure(logger, config, artifact, target, exc))
            continue

        for target in apple_targets:
            try:
                binding = _bind(
                    root_path,
                    dependency=dependency,
                    target=target,
                    bundle=bundle,
                    xcframework=xcframework,
                    config=config,
                )
            except ResolutionError as exc:
                failures.append(_record_failure(logger, config, artifact, target, exc))
                continue
            logger.log(
                operation="bind_library",
                artifact=artifact,
                target=target.name,
                message=f"Resolved library {binding.library_identifier}.",
                extra={"def_file": str(binding.def_file), "headers": len(binding.headers)},
            )
            bindings.append(binding)

    return InteropPlan(root=root_path, bindings=tuple(bindings), failures=tuple(failures))


def discover(
    root: str | Path,
    *,
    config: InteropConfig | None = None,
    logger: StructuredLogger | None = None,
) -> BuildProducts:
    """Scan the Carthage build directory and log what was found."""
    config = config or InteropConfig()
    products = scan_build_products(root, build_dir=config.build_dir)
    if logger is None:
        return products

    logger.log(operation="discover", message="Retrieved Carthage build products.")
    for path in products.xcframework_paths:
        logger.log(operation="discover", artifact=path.stem, message=f"[XCFRAMEWORK] {path}")
    for platform in Platform:
        for path in products.frameworks_for(platform):
            logger.log(
                operation="discover",
                artifact=path.stem,
                message=f"[FRAMEWORK][{platform.value}] {path}",
            )
    return products


def _bind(
    root: Path,
    *,
    dependency: Dependency,
    target: CompileTarget,
    bundle: Path,
    xcframework: XCFramework,
    config: InteropConfig,
) -> InteropBinding:
    artifact = dependency.module_name
    platform, variant = require_target(target)
    library = library_for_target(xcframework, target, artifact=artifact)
    framework_dir = bundle / library.identifier
    headers_dir = framework_dir / library.path / HEADERS_DIR
    definition = write_definition(
        library,
        headers_dir,
        config.def_file(root, artifact=artifact, target=target.name),
        artifact_name=artifact,
    )
    return InteropBinding(
        artifact=artifact,
        target=target.name,
        platform=platform,
        variant=variant,
        library_identifier=library.identifier,
        xcframework_dir=bundle,
        framework_dir=framework_dir,
        headers_dir=headers_dir,
        def_file=definition.path,
        package_name=dependency.package_name,
        headers=definition.headers,
    )


def _record_failure(
    logger: StructuredLogger,
    config: InteropConfig,
    artifact: str,
    target: CompileTarget,
    error: ResolutionError,
) -> ResolutionFailure:
    logger.log(
        operation="resolve_library",
        artifact=artifact,
        target=target.name,
        message=error.message,
        level="error",
        extra=dict(error.context),
    )
    if config.fail_fast:
        raise error
    return ResolutionFailure.from_error(artifact=artifact, target=target.name, error=error)
