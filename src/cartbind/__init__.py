"""Public package entrypoint for cartbind."""

from .config import InteropConfig
from .discovery import (
    find_framework,
    find_xcframework,
    load_xcframework,
    load_xcframeworks,
    scan_build_products,
)
from .errors import (
    CartbindError,
    ErrorCode,
    InteropError,
    ManifestError,
    ResolutionError,
    UnsupportedTargetError,
    ValidationError,
)
from .interop import InteropDefinition, collect_headers, render_definition, write_definition
from .manifest import Library, XCFramework, normalize_architecture, parse_manifest, read_manifest
from .models import (
    BuildProducts,
    Dependency,
    InteropBinding,
    InteropPlan,
    Platform,
    ResolutionFailure,
    Variant,
)
from .observability import StructuredLogger
from .planner import discover, plan_interop
from .targets import (
    KNOWN_TARGETS,
    CompileTarget,
    Family,
    library_for_target,
    match_library,
    resolve_target,
)

__all__ = [
    "KNOWN_TARGETS",
    "BuildProducts",
    "CartbindError",
    "CompileTarget",
    "Dependency",
    "ErrorCode",
    "Family",
    "InteropBinding",
    "InteropConfig",
    "InteropDefinition",
    "InteropError",
    "InteropPlan",
    "Library",
    "ManifestError",
    "Platform",
    "ResolutionError",
    "ResolutionFailure",
    "StructuredLogger",
    "UnsupportedTargetError",
    "ValidationError",
    "Variant",
    "XCFramework",
    "collect_headers",
    "discover",
    "find_framework",
    "find_xcframework",
    "library_for_target",
    "load_xcframework",
    "load_xcframeworks",
    "match_library",
    "normalize_architecture",
    "parse_manifest",
    "plan_interop",
    "read_manifest",
    "render_definition",
    "resolve_target",
    "scan_build_products",
    "write_definition",
]
