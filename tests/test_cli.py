import json
from pathlib import Path

import cbor2
import pytest

from cartbind.cli import main


def test_scan_prints_inventory(carthage_root: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["scan", str(carthage_root)]) == 0

    payload = json.loads(capsys.readouterr().out)
    assert [Path(path).name for path in payload["xcframeworks"]] == [
        "AFNetworking.xcframework",
        "WireSystem.xcframework",
    ]
    assert [Path(path).name for path in payload["frameworks"]["ios"]] == ["WireSystem.framework"]


def test_manifest_prints_model(carthage_root: Path, capsys: pytest.CaptureFixture[str]) -> None:
    plist = carthage_root / "Carthage" / "Build" / "AFNetworking.xcframework" / "Info.plist"

    assert main(["manifest", str(plist)]) == 0

    payload = json.loads(capsys.readouterr().out)
    assert payload["package_type"] == "XFWK"
    assert payload["libraries"][0]["supported_architectures"] == ["arm64", "i386", "x64"]


def test_manifest_reports_invalid_plist(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    plist = tmp_path / "Info.plist"
    plist.write_text("garbage", encoding="utf-8")

    assert main(["manifest", str(plist)]) == 1
    assert "not an xcframework manifest" in capsys.readouterr().err


def test_resolve_writes_plan_and_logs(carthage_root: Path, tmp_path: Path) -> None:
    output = tmp_path / "plan.json"
    log_file = tmp_path / "logs" / "resolve.jsonl"

    exit_code = main(
        [
            "resolve",
            str(carthage_root),
            "--dependency",
            "AFNetworking",
            "--target",
            "ios_arm64",
            "--target",
            "tvos_arm64",
            "--def-dir",
            str(tmp_path / "defs"),
            "--output",
            str(output),
            "--log-file",
            str(log_file),
        ]
    )

    assert exit_code == 1
    plan = json.loads(output.read_text(encoding="utf-8"))
    assert [binding["target"] for binding in plan["bindings"]] == ["ios_arm64"]
    assert [failure["target"] for failure in plan["failures"]] == ["tvos_arm64"]
    assert (tmp_path / "defs" / "AFNetworking" / "ios_arm64" / "AFNetworking.def").exists()
    records = [json.loads(line) for line in log_file.read_text(encoding="utf-8").splitlines()]
    assert any(record["level"] == "error" for record in records)


def test_resolve_cbor_output(carthage_root: Path, tmp_path: Path) -> None:
    output = tmp_path / "plan.cbor"

    exit_code = main(
        [
            "resolve",
            str(carthage_root),
            "--dependency",
            "WireSystem",
            "--target",
            "macos_arm64",
            "--def-dir",
            str(tmp_path / "defs"),
            "--format",
            "cbor",
            "--output",
            str(output),
        ]
    )

    assert exit_code == 0
    plan = cbor2.loads(output.read_bytes())
    assert plan["bindings"][0]["library_identifier"] == "macos-arm64_x86_64"


def test_fail_fast_prints_error_payload(
    carthage_root: Path,
    tmp_path: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    exit_code = main(
        [
            "resolve",
            str(carthage_root),
            "--dependency",
            "WireSystem",
            "--target",
            "watchos_arm64",
            "--def-dir",
            str(tmp_path / "defs"),
            "--fail-fast",
        ]
    )

    assert exit_code == 1
    payload = json.loads(capsys.readouterr().err)
    assert payload["code"] == "E_RESOLUTION"
    assert payload["context"]["variant"] == "device"


def test_unknown_target_is_reported(carthage_root: Path, capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = main(
        ["resolve", str(carthage_root), "--dependency", "WireSystem", "--target", "zx_spectrum"]
    )

    assert exit_code == 1
    assert json.loads(capsys.readouterr().err)["code"] == "E_VALIDATION"
