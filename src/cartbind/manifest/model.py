"""XCFramework manifest model."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import PurePosixPath

from cartbind.models import Platform, Variant

X86_64_ARCH = "x86_64"
X64_ARCH = "x64"


def normalize_architecture(token: str) -> str:
    """Rewrite ``x86_64`` to the compile-target spelling ``x64``."""
    return X64_ARCH if token == X86_64_ARCH else token


@dataclass(frozen=True, slots=True)
class Library:
    identifier: str
    path: str
    supported_platform: str
    supported_architectures: tuple[str, ...]
    supported_platform_variant: str | None = None
    debug_symbols_path: str | None = None
    bitcode_symbol_maps_path: str | None = None

    @property
    def name(self) -> str:
        return PurePosixPath(self.path).stem

    @property
    def platform(self) -> Platform | None:
        return Platform.parse(self.supported_platform)

    @property
    def variant(self) -> Variant | None:
        return Variant.from_token(self.supported_platform_variant)

    def supports(self, platform: Platform, variant: Variant, architecture: str) -> bool:
        wanted = architecture.lower()
        return (
            platform.matches(self.supported_platform)
            and any(arch.lower() == wanted for arch in self.supported_architectures)
            and self.variant is variant
        )

    def to_payload(self) -> dict[str, object]:
        return {
            "identifier": self.identifier,
            "path": self.path,
            "supported_platform": self.supported_platform,
            "supported_platform_variant": self.supported_platform_variant,
            "supported_architectures": list(self.supported_architectures),
            "debug_symbols_path": self.debug_symbols_path,
            "bitcode_symbol_maps_path": self.bitcode_symbol_maps_path,
        }


@dataclass(frozen=True, slots=True)
class XCFramework:
    package_type: str
    format_version: str
    libraries: tuple[Library, ...] = ()

    def to_payload(self) -> dict[str, object]:
        return {
            "package_type": self.package_type,
            "format_version": self.format_version,
            "libraries": [library.to_payload() for library in self.libraries],
        }
