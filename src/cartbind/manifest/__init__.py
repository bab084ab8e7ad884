"""XCFramework manifest model and parser exports."""

from __future__ import annotations

from cartbind.manifest.model import Library, XCFramework, normalize_architecture
from cartbind.manifest.parse import parse_manifest, read_manifest

__all__ = [
    "Library",
    "XCFramework",
    "normalize_architecture",
    "parse_manifest",
    "read_manifest",
]
