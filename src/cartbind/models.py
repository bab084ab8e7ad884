"""Core typed dataclasses for build products, dependencies and interop plans."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path

import cbor2

from cartbind.errors import ErrorCode, ResolutionError, UnsupportedTargetError

BUILD_DIR = "Carthage/Build"
FRAMEWORK_SUFFIX = ".framework"
XCFRAMEWORK_SUFFIX = ".xcframework"
MANIFEST_NAME = "Info.plist"
HEADER_SUFFIX = ".h"


class Platform(StrEnum):
    """Apple platform families an xcframework library can target."""

    IOS = "ios"
    MACOS = "macos"
    TVOS = "tvos"
    WATCHOS = "watchos"

    def matches(self, value: str | None) -> bool:
        return value is not None and value.lower() == self.value

    @classmethod
    def parse(cls, value: str | None) -> Platform | None:
        for platform in cls:
            if platform.matches(value):
                return platform
        return None


class Variant(StrEnum):
    """Build environment of a library. ``DEVICE`` has an empty token."""

    DEVICE = ""
    SIMULATOR = "simulator"

    @property
    def label(self) -> str:
        return self.value or "device"

    @classmethod
    def from_token(cls, token: str | None) -> Variant | None:
        """Map a ``SupportedPlatformVariant`` value onto a variant.

        Blank or absent tokens mean a device build. Tokens other than
        ``simulator`` (``maccatalyst`` for instance) have no variant.
        """
        if token is None or not token.strip():
            return cls.DEVICE
        if token.lower() == cls.SIMULATOR.value:
            return cls.SIMULATOR
        return None


def _empty_platform_map() -> dict[Platform, tuple[Path, ...]]:
    return {platform: () for platform in Platform}


@dataclass(frozen=True, slots=True)
class BuildProducts:
    xcframework_paths: tuple[Path, ...] = ()
    frameworks_by_platform: Mapping[Platform, tuple[Path, ...]] = field(
        default_factory=_empty_platform_map,
    )

    def frameworks_for(self, platform: Platform) -> tuple[Path, ...]:
        return self.frameworks_by_platform.get(platform, ())

    def to_payload(self) -> dict[str, object]:
        return {
            "xcframeworks": [str(path) for path in self.xcframework_paths],
            "frameworks": {
                platform.value: [str(path) for path in self.frameworks_for(platform)]
                for platform in Platform
            },
        }


@dataclass(frozen=True, slots=True)
class Dependency:
    module_name: str
    package_name: str

    @classmethod
    def named(cls, module_name: str, *, prefix: str = "carthage") -> Dependency:
        package_name = f"{prefix}.{module_name}" if prefix else module_name
        return cls(module_name=module_name, package_name=package_name)


@dataclass(frozen=True, slots=True)
class InteropBinding:
    artifact: str
    target: str
    platform: Platform
    variant: Variant
    library_identifier: str
    xcframework_dir: Path
    framework_dir: Path
    headers_dir: Path
    def_file: Path
    package_name: str
    headers: tuple[str, ...] = ()

    @property
    def compiler_opts(self) -> tuple[str, ...]:
        return (f"-F{self.framework_dir}",)

    @property
    def linker_opts(self) -> tuple[str, ...]:
        return (f"-F{self.framework_dir}",)

    def to_payload(self) -> dict[str, object]:
        return {
            "artifact": self.artifact,
            "target": self.target,
            "platform": self.platform.value,
            "variant": self.variant.label,
            "library_identifier": self.library_identifier,
            "xcframework_dir": str(self.xcframework_dir),
            "framework_dir": str(self.framework_dir),
            "headers_dir": str(self.headers_dir),
            "def_file": str(self.def_file),
            "package_name": self.package_name,
            "headers": list(self.headers),
            "compiler_opts": list(self.compiler_opts),
            "linker_opts": list(self.linker_opts),
        }


@dataclass(frozen=True, slots=True)
class ResolutionFailure:
    artifact: str
    target: str
    code: str
    message: str
    hint: str | None = None
    context: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def from_error(cls, *, artifact: str, target: str, error: ResolutionError) -> ResolutionFailure:
        return cls(
            artifact=artifact,
            target=target,
            code=error.code,
            message=error.message,
            hint=error.hint,
            context=dict(error.context),
        )

    def to_error(self) -> ResolutionError:
        if self.code == ErrorCode.UNSUPPORTED_TARGET.value:
            return UnsupportedTargetError(self.message, hint=self.hint, context=self.context)
        return ResolutionError(self.message, hint=self.hint, context=self.context)

    def to_payload(self) -> dict[str, object]:
        payload: dict[str, object] = {
            "artifact": self.artifact,
            "target": self.target,
            "code": self.code,
            "message": self.message,
            "context": dict(sorted(self.context.items())),
        }
        if self.hint is not None:
            payload["hint"] = self.hint
        return payload


@dataclass(frozen=True, slots=True)
class InteropPlan:
    """Per (artifact, target) outcome of an interop resolution run."""

    root: Path
    bindings: tuple[InteropBinding, ...] = ()
    failures: tuple[ResolutionFailure, ...] = ()
    schema_version: int = 1

    @property
    def ok(self) -> bool:
        return not self.failures

    def binding_for(self, artifact: str, target: str) -> InteropBinding | None:
        for binding in self.bindings:
            if binding.artifact == artifact and binding.target == target:
                return binding
        return None

    def failure_for(self, artifact: str, target: str) -> ResolutionFailure | None:
        for failure in self.failures:
            if failure.artifact == artifact and failure.target == target:
                return failure
        return None

    def require(self, artifact: str, target: str) -> InteropBinding:
        """Return the binding for a pair or raise the failure recorded for it."""
        binding = self.binding_for(artifact, target)
        if binding is not None:
            return binding
        failure = self.failure_for(artifact, target)
        if failure is not None:
            raise failure.to_error()
        raise ResolutionError(
            "No interop binding was planned for this artifact and target.",
            hint="Include both the dependency and the target when planning.",
            context={"artifact": artifact, "target": target},
        )

    def embed_dirs(self, target: str) -> tuple[Path, ...]:
        """Library directories whose frameworks are embedded into binaries of ``target``."""
        dirs: list[Path] = []
        for binding in self.bindings:
            if binding.target == target and binding.framework_dir not in dirs:
                dirs.append(binding.framework_dir)
        return tuple(dirs)

    def raise_for_failures(self) -> None:
        if self.failures:
            raise self.failures[0].to_error()

    def to_json(self, path: str | Path | None = None) -> str:
        encoded = json.dumps(self._payload(), indent=2, sort_keys=True) + "\n"
        if path is not None:
            Path(path).write_text(encoded, encoding="utf-8")
        return encoded

    def to_cbor(self, path: str | Path | None = None) -> bytes:
        encoded = cbor2.dumps(self._payload(), canonical=True)
        if path is not None:
            Path(path).write_bytes(encoded)
        return encoded

    def _payload(self) -> dict[str, object]:
        return {
            "schema_version": self.schema_version,
            "root": str(self.root),
            "bindings": [binding.to_payload() for binding in self.bindings],
            "failures": [failure.to_payload() for failure in self.failures],
        }
