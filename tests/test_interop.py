from pathlib import Path

import pytest

from cartbind.errors import InteropError
from cartbind.interop import collect_headers, render_definition, write_definition
from cartbind.manifest import Library

LIBRARY = Library(
    identifier="ios-arm64_armv7",
    path="AFNetworking.framework",
    supported_platform="ios",
    supported_architectures=("arm64", "armv7"),
)


def test_umbrella_header_is_excluded_and_others_listed_once(tmp_path: Path) -> None:
    headers = tmp_path / "Headers"
    headers.mkdir()
    for name in ("AFNetworking.h", "AFURLSessionManager.h", "AFHTTPSessionManager.h"):
        (headers / name).write_text("", encoding="utf-8")
    (headers / "README.txt").write_text("", encoding="utf-8")
    output = tmp_path / "defs" / "AFNetworking.def"

    definition = write_definition(LIBRARY, headers, output)

    assert definition.artifact_name == "AFNetworking"
    assert definition.headers == ("AFHTTPSessionManager.h", "AFURLSessionManager.h")
    assert output.read_text(encoding="utf-8") == (
        "language = Objective-C\n"
        "headers = AFHTTPSessionManager.h AFURLSessionManager.h\n"
        "excludeDependentModules = true\n"
        "compilerOpts = -framework AFNetworking\n"
        "linkerOpts = -framework AFNetworking\n"
    )


def test_nested_headers_are_listed_relative_to_headers_dir(tmp_path: Path) -> None:
    headers = tmp_path / "Headers"
    (headers / "Sub").mkdir(parents=True)
    (headers / "Top.h").write_text("", encoding="utf-8")
    (headers / "Sub" / "Inner.h").write_text("", encoding="utf-8")
    (headers / "Sub" / "AFNetworking.h").write_text("", encoding="utf-8")

    assert collect_headers(headers, "AFNetworking") == ("Top.h", "Sub/Inner.h")


def test_missing_headers_directory_still_writes_definition(tmp_path: Path) -> None:
    output = tmp_path / "out" / "nested" / "AFNetworking.def"

    definition = write_definition(LIBRARY, tmp_path / "absent", output)

    assert definition.headers == ()
    lines = output.read_text(encoding="utf-8").splitlines()
    assert "headers =" in lines
    assert lines[0] == "language = Objective-C"


def test_existing_definition_is_overwritten(tmp_path: Path) -> None:
    output = tmp_path / "AFNetworking.def"
    output.write_text("stale\n", encoding="utf-8")

    write_definition(LIBRARY, tmp_path / "absent", output, artifact_name="Renamed")

    content = output.read_text(encoding="utf-8")
    assert "stale" not in content
    assert "linkerOpts = -framework Renamed" in content


def test_render_definition_is_deterministic() -> None:
    first = render_definition("Lib", ("A.h", "B.h"))
    second = render_definition("Lib", ("A.h", "B.h"))

    assert first == second
    assert first.splitlines()[1] == "headers = A.h B.h"


def test_unwritable_output_raises_interop_error(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")

    with pytest.raises(InteropError) as excinfo:
        write_definition(LIBRARY, tmp_path, blocker / "AFNetworking.def")

    assert excinfo.value.context["artifact"] == "AFNetworking"
