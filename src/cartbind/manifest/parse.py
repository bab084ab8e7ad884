"""Info.plist decoding into the typed XCFramework model.

Invalid manifests and invalid library entries are not errors: a manifest
without the required top-level keys decodes to ``None`` and a library entry
without its required keys is skipped. Only an unreadable file raises.
"""

from __future__ import annotations

import plistlib
from collections.abc import Iterator
from pathlib import Path
from typing import Any
from xml.parsers.expat import ExpatError

from cartbind.errors import ManifestError
from cartbind.manifest.model import Library, XCFramework, normalize_architecture

KEY_PACKAGE_TYPE = "CFBundlePackageType"
KEY_FORMAT_VERSION = "XCFrameworkFormatVersion"
KEY_AVAILABLE_LIBRARIES = "AvailableLibraries"

KEY_LIBRARY_IDENTIFIER = "LibraryIdentifier"
KEY_LIBRARY_PATH = "LibraryPath"
KEY_SUPPORTED_PLATFORM = "SupportedPlatform"
KEY_SUPPORTED_PLATFORM_VARIANT = "SupportedPlatformVariant"
KEY_SUPPORTED_ARCHITECTURES = "SupportedArchitectures"
KEY_DEBUG_SYMBOLS_PATH = "DebugSymbolsPath"
KEY_BITCODE_SYMBOL_MAPS_PATH = "BitcodeSymbolMapsPath"


def parse_manifest(path: str | Path) -> XCFramework | None:
    """Read and decode an xcframework ``Info.plist``."""
    manifest_path = Path(path)
    try:
        raw = manifest_path.read_bytes()
    except OSError as exc:
        raise ManifestError(
            "Unable to read xcframework manifest.",
            hint=exc.strerror or str(exc),
            context={"path": str(manifest_path)},
        ) from exc
    return read_manifest(raw)


def read_manifest(raw: bytes) -> XCFramework | None:
    try:
        root = plistlib.loads(raw)
    except (
        plistlib.InvalidFileException,
        ExpatError,
        AttributeError,
        OverflowError,
        TypeError,
        ValueError,
    ):
        return None
    if not isinstance(root, dict):
        return None

    package_type = _string(root.get(KEY_PACKAGE_TYPE))
    format_version = _string(root.get(KEY_FORMAT_VERSION))
    if not package_type or not format_version:
        return None

    entries = root.get(KEY_AVAILABLE_LIBRARIES)
    if not isinstance(entries, list):
        entries = []
    return XCFramework(
        package_type=package_type,
        format_version=format_version,
        libraries=tuple(_iter_libraries(entries)),
    )


def _iter_libraries(entries: list[Any]) -> Iterator[Library]:
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        library = _library_from(entry)
        if library is not None:
            yield library


def _library_from(entry: dict[str, Any]) -> Library | None:
    identifier = _string(entry.get(KEY_LIBRARY_IDENTIFIER))
    path = _string(entry.get(KEY_LIBRARY_PATH))
    platform = _string(entry.get(KEY_SUPPORTED_PLATFORM))
    architectures = _architectures(entry.get(KEY_SUPPORTED_ARCHITECTURES))
    if (
        identifier is None
        or not identifier.strip()
        or path is None
        or not path.strip()
        or not platform
        or not architectures
    ):
        return None
    return Library(
        identifier=identifier,
        path=path,
        supported_platform=platform,
        supported_platform_variant=_string(entry.get(KEY_SUPPORTED_PLATFORM_VARIANT)),
        supported_architectures=architectures,
        debug_symbols_path=_string(entry.get(KEY_DEBUG_SYMBOLS_PATH)),
        bitcode_symbol_maps_path=_string(entry.get(KEY_BITCODE_SYMBOL_MAPS_PATH)),
    )


def _architectures(value: Any) -> tuple[str, ...]:
    if not isinstance(value, list):
        return ()
    tokens = (_string(item) for item in value)
    return tuple(normalize_architecture(token) for token in tokens if token is not None)


def _string(value: Any) -> str | None:
    # plist scalars other than strings are rendered the way the manifest shows them
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int | float):
        return str(value)
    return None
