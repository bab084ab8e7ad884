"""cinterop ``.def`` descriptor generation for xcframework libraries."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from cartbind.errors import InteropError
from cartbind.manifest import Library
from cartbind.models import HEADER_SUFFIX

LANGUAGE = "Objective-C"


@dataclass(frozen=True, slots=True)
class InteropDefinition:
    artifact_name: str
    headers: tuple[str, ...]
    path: Path


def collect_headers(headers_dir: str | Path, artifact_name: str) -> tuple[str, ...]:
    """Return header paths relative to ``headers_dir``, minus the umbrella header.

    Entries are paths such as ``Sub/Inner.h`` so they resolve against the
    headers directory passed to cinterop as an include dir. A missing
    directory yields no headers.
    """
    root = Path(headers_dir)
    if not root.is_dir():
        return ()
    umbrella = f"{artifact_name}{HEADER_SUFFIX}"
    headers: list[str] = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames.sort()
        for filename in sorted(filenames):
            if not filename.endswith(HEADER_SUFFIX) or filename == umbrella:
                continue
            headers.append((Path(dirpath) / filename).relative_to(root).as_posix())
    return tuple(headers)


def render_definition(artifact_name: str, headers: tuple[str, ...]) -> str:
    lines = (
        f"language = {LANGUAGE}",
        f"headers = {' '.join(headers)}".rstrip(),
        "excludeDependentModules = true",
        f"compilerOpts = -framework {artifact_name}",
        f"linkerOpts = -framework {artifact_name}",
    )
    return "\n".join(lines) + "\n"


def write_definition(
    library: Library,
    headers_dir: str | Path,
    output_file: str | Path,
    *,
    artifact_name: str | None = None,
) -> InteropDefinition:
    """Write the ``.def`` file for ``library``, replacing any previous one."""
    name = artifact_name or library.name
    headers = collect_headers(headers_dir, name)
    output_path = Path(output_file)
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(render_definition(name, headers), encoding="utf-8")
    except OSError as exc:
        raise InteropError(
            "Unable to write cinterop definition.",
            hint=exc.strerror or str(exc),
            context={"artifact": name, "path": str(output_path)},
        ) from exc
    return InteropDefinition(artifact_name=name, headers=headers, path=output_path)
