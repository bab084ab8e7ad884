"""Interop resolution configuration."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from cartbind.errors import ValidationError
from cartbind.models import BUILD_DIR, Dependency


@dataclass(frozen=True, slots=True)
class InteropConfig:
    build_dir: str = BUILD_DIR
    def_output_dir: Path = field(default_factory=lambda: Path("build/carthage/defs"))
    package_prefix: str = "carthage"
    fail_fast: bool = False

    def dependency(self, name: str) -> Dependency:
        if not name:
            raise ValidationError("Dependency names must be non-empty.")
        return Dependency.named(name, prefix=self.package_prefix)

    def def_file(self, root: Path, *, artifact: str, target: str) -> Path:
        output_dir = self.def_output_dir
        if not output_dir.is_absolute():
            output_dir = root / output_dir
        return output_dir / artifact / target / f"{artifact}.def"
