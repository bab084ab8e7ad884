"""Shared test fixtures."""

from __future__ import annotations

import plistlib
from pathlib import Path
from typing import Any

import pytest

AFNETWORKING_MANIFEST: dict[str, Any] = {
    "AvailableLibraries": [
        {
            "DebugSymbolsPath": "dSYMs",
            "LibraryIdentifier": "ios-arm64_i386_x86_64-simulator",
            "LibraryPath": "AFNetworking.framework",
            "SupportedArchitectures": ["arm64", "i386", "x86_64"],
            "SupportedPlatform": "ios",
            "SupportedPlatformVariant": "simulator",
        },
        {
            "BitcodeSymbolMapsPath": "BCSymbolMaps",
            "DebugSymbolsPath": "dSYMs",
            "LibraryIdentifier": "ios-arm64_armv7",
            "LibraryPath": "AFNetworking.framework",
            "SupportedArchitectures": ["arm64", "armv7"],
            "SupportedPlatform": "ios",
        },
    ],
    "CFBundlePackageType": "XFWK",
    "XCFrameworkFormatVersion": "1.0",
}

WIRE_SYSTEM_MANIFEST: dict[str, Any] = {
    "AvailableLibraries": [
        {
            "LibraryIdentifier": "macos-arm64_x86_64",
            "LibraryPath": "WireSystem.framework",
            "SupportedArchitectures": ["arm64", "x86_64"],
            "SupportedPlatform": "macos",
        },
        {
            "LibraryIdentifier": "ios-arm64",
            "LibraryPath": "WireSystem.framework",
            "SupportedArchitectures": ["arm64"],
            "SupportedPlatform": "ios",
        },
    ],
    "CFBundlePackageType": "XFWK",
    "XCFrameworkFormatVersion": "1.0",
}


@pytest.fixture
def afnetworking_manifest() -> dict[str, Any]:
    return AFNETWORKING_MANIFEST


@pytest.fixture
def carthage_root(tmp_path: Path) -> Path:
    """Build a small ``Carthage/Build`` tree with two xcframeworks and one framework."""
    root = tmp_path / "project"
    build = root / "Carthage" / "Build"

    afnetworking = build / "AFNetworking.xcframework"
    _dump_plist(afnetworking / "Info.plist", AFNETWORKING_MANIFEST)
    for identifier in ("ios-arm64_armv7", "ios-arm64_i386_x86_64-simulator"):
        headers = afnetworking / identifier / "AFNetworking.framework" / "Headers"
        headers.mkdir(parents=True)
        for name in ("AFNetworking.h", "AFHTTPSessionManager.h", "AFURLSessionManager.h"):
            (headers / name).write_text(f"// {name}\n", encoding="utf-8")
        (headers / "module.modulemap").write_text("framework module AFNetworking {}\n")

    wire_system = build / "WireSystem.xcframework"
    _dump_plist(wire_system / "Info.plist", WIRE_SYSTEM_MANIFEST)
    (wire_system / "ios-arm64" / "WireSystem.framework" / "Headers").mkdir(parents=True)
    (wire_system / "macos-arm64_x86_64" / "WireSystem.framework").mkdir(parents=True)

    (build / "iOS" / "WireSystem.framework").mkdir(parents=True)
    return root


def _dump_plist(path: Path, payload: dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("wb") as handle:
        plistlib.dump(payload, handle)
