"""Compile target resolution and xcframework library matching."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from cartbind.errors import ResolutionError, UnsupportedTargetError, ValidationError
from cartbind.manifest import Library, XCFramework
from cartbind.models import Platform, Variant


class Family(StrEnum):
    IOS = "ios"
    OSX = "osx"
    TVOS = "tvos"
    WATCHOS = "watchos"
    LINUX = "linux"
    MINGW = "mingw"
    ANDROID = "android"
    WASM = "wasm"

    @property
    def is_apple(self) -> bool:
        return self in _APPLE_FAMILIES


_APPLE_FAMILIES = frozenset({Family.IOS, Family.OSX, Family.TVOS, Family.WATCHOS})


@dataclass(frozen=True, slots=True)
class CompileTarget:
    """A native compile target such as ``ios_simulator_arm64``."""

    name: str
    family: Family
    architecture: str

    @classmethod
    def named(cls, name: str) -> CompileTarget:
        target = KNOWN_TARGETS.get(name.lower())
        if target is None:
            raise ValidationError(
                f"Unknown compile target {name!r}.",
                hint=f"Known targets: {', '.join(sorted(KNOWN_TARGETS))}.",
                context={"target": name},
            )
        return target


KNOWN_TARGETS: dict[str, CompileTarget] = {
    target.name: target
    for target in (
        CompileTarget("ios_arm32", Family.IOS, "arm32"),
        CompileTarget("ios_arm64", Family.IOS, "arm64"),
        CompileTarget("ios_x64", Family.IOS, "x64"),
        CompileTarget("ios_simulator_arm64", Family.IOS, "arm64"),
        CompileTarget("macos_x64", Family.OSX, "x64"),
        CompileTarget("macos_arm64", Family.OSX, "arm64"),
        CompileTarget("tvos_arm64", Family.TVOS, "arm64"),
        CompileTarget("tvos_x64", Family.TVOS, "x64"),
        CompileTarget("tvos_simulator_arm64", Family.TVOS, "arm64"),
        CompileTarget("watchos_arm32", Family.WATCHOS, "arm32"),
        CompileTarget("watchos_arm64", Family.WATCHOS, "arm64"),
        CompileTarget("watchos_x86", Family.WATCHOS, "x86"),
        CompileTarget("watchos_x64", Family.WATCHOS, "x64"),
        CompileTarget("watchos_simulator_arm64", Family.WATCHOS, "arm64"),
        CompileTarget("linux_x64", Family.LINUX, "x64"),
        CompileTarget("linux_arm64", Family.LINUX, "arm64"),
        CompileTarget("linux_arm32_hfp", Family.LINUX, "arm32"),
        CompileTarget("mingw_x64", Family.MINGW, "x64"),
        CompileTarget("mingw_x86", Family.MINGW, "x86"),
        CompileTarget("android_arm32", Family.ANDROID, "arm32"),
        CompileTarget("android_arm64", Family.ANDROID, "arm64"),
        CompileTarget("android_x86", Family.ANDROID, "x86"),
        CompileTarget("android_x64", Family.ANDROID, "x64"),
        CompileTarget("wasm32", Family.WASM, "wasm32"),
    )
}

# arm64 exists as both a device and a simulator slice; the target name decides.
_TARGET_TRIPLETS: dict[str, tuple[Platform, Variant]] = {
    "ios_arm32": (Platform.IOS, Variant.DEVICE),
    "ios_arm64": (Platform.IOS, Variant.DEVICE),
    "ios_simulator_arm64": (Platform.IOS, Variant.SIMULATOR),
    "ios_x64": (Platform.IOS, Variant.SIMULATOR),
    "macos_x64": (Platform.MACOS, Variant.DEVICE),
    "macos_arm64": (Platform.MACOS, Variant.DEVICE),
    "tvos_arm64": (Platform.TVOS, Variant.DEVICE),
    "tvos_simulator_arm64": (Platform.TVOS, Variant.SIMULATOR),
    "tvos_x64": (Platform.TVOS, Variant.SIMULATOR),
    "watchos_arm32": (Platform.WATCHOS, Variant.DEVICE),
    "watchos_arm64": (Platform.WATCHOS, Variant.DEVICE),
    "watchos_x64": (Platform.WATCHOS, Variant.SIMULATOR),
    "watchos_x86": (Platform.WATCHOS, Variant.SIMULATOR),
    "watchos_simulator_arm64": (Platform.WATCHOS, Variant.SIMULATOR),
}


def resolve_target(target: CompileTarget) -> tuple[Platform, Variant] | None:
    """Return the (platform, variant) pair a target builds for, if it is an Apple target."""
    if not target.family.is_apple:
        return None
    return _TARGET_TRIPLETS.get(target.name)


def require_target(target: CompileTarget) -> tuple[Platform, Variant]:
    resolved = resolve_target(target)
    if resolved is None:
        raise UnsupportedTargetError(
            f"Compile target {target.name} has no xcframework platform.",
            hint="Only iOS, macOS, tvOS and watchOS targets can consume xcframeworks.",
            context={"target": target.name, "family": target.family.value},
        )
    return resolved


def match_library(
    xcframework: XCFramework,
    platform: Platform,
    variant: Variant,
    architecture: str,
) -> Library | None:
    """Return the first library declared for the triplet.

    Manifests are not expected to declare two libraries for one triplet; when
    they do, declaration order wins.
    """
    for library in xcframework.libraries:
        if library.supports(platform, variant, architecture):
            return library
    return None


def library_for_target(
    xcframework: XCFramework,
    target: CompileTarget,
    *,
    artifact: str = "",
) -> Library:
    platform, variant = require_target(target)
    library = match_library(xcframework, platform, variant, target.architecture)
    if library is None:
        triplet = format_triplet(platform, target.architecture, variant)
        raise ResolutionError(
            f"[XCFRAMEWORK] no library supporting triplet {triplet}",
            hint="Rebuild the dependency for this platform or drop the target.",
            context={
                "artifact": artifact,
                "target": target.name,
                "platform": platform.value,
                "architecture": target.architecture.lower(),
                "variant": variant.label,
                "available": ", ".join(lib.identifier for lib in xcframework.libraries),
            },
        )
    return library


def format_triplet(platform: Platform, architecture: str, variant: Variant) -> str:
    return f"{platform.value}-{architecture.lower()}-{variant.label}"
