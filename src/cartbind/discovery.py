"""Carthage build product discovery.

Walks ``Carthage/Build`` and classifies directories into xcframework bundles
and per-platform frameworks. Traversal is depth first with children visited in
name order so a fixed tree always yields the same inventory.
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from pathlib import Path

from cartbind.errors import ResolutionError
from cartbind.manifest import XCFramework, parse_manifest
from cartbind.models import (
    BUILD_DIR,
    FRAMEWORK_SUFFIX,
    MANIFEST_NAME,
    XCFRAMEWORK_SUFFIX,
    BuildProducts,
    Platform,
)


def scan_build_products(root: str | Path, *, build_dir: str | Path = BUILD_DIR) -> BuildProducts:
    """Return the xcframeworks and per-platform frameworks under ``root/build_dir``."""
    build_root = Path(root) / build_dir
    if not build_root.is_dir():
        return BuildProducts()

    xcframeworks = tuple(
        path for path in _walk_dirs(build_root) if path.suffix == XCFRAMEWORK_SUFFIX
    )
    frameworks: dict[Platform, tuple[Path, ...]] = {}
    for platform in Platform:
        platform_dir = _platform_dir(build_root, platform)
        if platform_dir is None:
            frameworks[platform] = ()
            continue
        frameworks[platform] = tuple(
            path for path in _walk_dirs(platform_dir) if path.suffix == FRAMEWORK_SUFFIX
        )
    return BuildProducts(xcframework_paths=xcframeworks, frameworks_by_platform=frameworks)


def find_xcframework(name: str, products: BuildProducts) -> Path | None:
    """Return the bundle named ``name`` (without extension), if discovered."""
    for path in products.xcframework_paths:
        if path.stem == name:
            return path
    return None


def find_framework(name: str, platform: Platform, products: BuildProducts) -> Path | None:
    for path in products.frameworks_for(platform):
        if path.stem == name:
            return path
    return None


def load_xcframework(name: str, products: BuildProducts) -> tuple[Path, XCFramework]:
    bundle = find_xcframework(name, products)
    if bundle is None:
        raise ResolutionError(
            f"No .xcframework named {name} found.",
            hint="Check the dependency name and that Carthage built it with --use-xcframeworks.",
            context={"artifact": name},
        )
    return bundle, _load_bundle(bundle, artifact=name)


def load_xcframeworks(products: BuildProducts) -> tuple[tuple[Path, XCFramework], ...]:
    return tuple(
        (bundle, _load_bundle(bundle, artifact=bundle.stem))
        for bundle in products.xcframework_paths
    )


def _load_bundle(bundle: Path, *, artifact: str) -> XCFramework:
    manifest_path = bundle / MANIFEST_NAME
    if not manifest_path.is_file():
        raise ResolutionError(
            f"The .xcframework named {artifact} has no {MANIFEST_NAME}.",
            context={"artifact": artifact, "path": str(manifest_path)},
        )
    xcframework = parse_manifest(manifest_path)
    if xcframework is None:
        raise ResolutionError(
            f"The {MANIFEST_NAME} of {artifact} is not a valid xcframework manifest.",
            hint="CFBundlePackageType and XCFrameworkFormatVersion are required.",
            context={"artifact": artifact, "path": str(manifest_path)},
        )
    return xcframework


def _platform_dir(build_root: Path, platform: Platform) -> Path | None:
    for child in sorted(build_root.iterdir()):
        if child.is_dir() and platform.matches(child.name):
            return child
    return None


def _walk_dirs(root: Path) -> Iterator[Path]:
    for dirpath, dirnames, _ in os.walk(root, onerror=_raise_unless_missing):
        dirnames.sort()
        yield Path(dirpath)


def _raise_unless_missing(error: OSError) -> None:
    if not isinstance(error, FileNotFoundError):
        raise error
