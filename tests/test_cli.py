"""Command-line interface behaviour."""

import json
import subprocess
import sys
from pathlib import Path

import pytest
from click.testing import CliRunner

from sidecaromatic.cli import main

from .utils import SHIM_A, intended_for, make_nifti, write_json


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def session(tmp_path: Path, monkeypatch) -> Path:
    """One session with a PEPOLAR pair and a single BOLD run on disk."""
    monkeypatch.setenv("SIDECAROMATIC_LOG_DIR", str(tmp_path / "logs"))
    ses = tmp_path / "sub-01" / "ses-01"
    zooms = (3.0, 3.0, 3.5)
    for d in ("AP", "PA"):
        stem = f"sub-01_ses-01_dir-{d}_epi"
        write_json(ses / "fmap" / f"{stem}.json", {"ShimSetting": SHIM_A})
        make_nifti(ses / "fmap" / f"{stem}.nii.gz", (4, 4, 3, 2), zooms + (6.0,))
    stem = "sub-01_ses-01_task-rest_bold"
    write_json(ses / "func" / f"{stem}.json", {"ShimSetting": SHIM_A, "TaskName": "rest"})
    make_nifti(ses / "func" / f"{stem}.nii.gz", (4, 4, 3, 5), zooms + (2.0,))
    return ses


def test_missing_argument_prints_usage(runner: CliRunner) -> None:
    """Verify exit status 1 and the usage line when SESSION is omitted."""
    result = runner.invoke(main, [])
    assert result.exit_code == 1
    assert "Usage:" in result.output


def test_not_a_directory(runner: CliRunner, tmp_path: Path) -> None:
    result = runner.invoke(main, [str(tmp_path / "sub-99")])
    assert result.exit_code == 1
    assert "is not a directory" in result.output


def test_unknown_provider(runner: CliRunner, session: Path) -> None:
    result = runner.invoke(main, [str(session), "--provider", "afni"])
    assert result.exit_code == 1
    assert "Unknown image info provider" in result.output
    assert "Usage:" in result.output


def test_full_run(runner: CliRunner, session: Path) -> None:
    result = runner.invoke(main, [str(session)])

    assert result.exit_code == 0, result.output
    bold = session / "func" / "sub-01_ses-01_task-rest_bold.json"
    assert json.loads(bold.read_text())["NumberOfVolumes"] == 5
    entry = "ses-01/func/sub-01_ses-01_task-rest_bold.nii.gz"
    for d in ("AP", "PA"):
        assert intended_for(session / "fmap" / f"sub-01_ses-01_dir-{d}_epi.json") == [entry]
    assert "2 field-map file(s) updated, 1 scan(s) assigned." in result.output
    assert entry not in result.output


def test_second_positional_turns_on_verbose(runner: CliRunner, session: Path) -> None:
    result = runner.invoke(main, [str(session), "verbose"])

    assert result.exit_code == 0, result.output
    assert "ses-01/func/sub-01_ses-01_task-rest_bold.nii.gz" in result.output


def test_version(runner: CliRunner) -> None:
    result = runner.invoke(main, ["--version"])
    assert result.exit_code == 0
    assert "version" in result.output


def test_module_entry_point(session: Path) -> None:
    """``python -m sidecaromatic.cli`` behaves like the console script."""
    proc = subprocess.run(
        [sys.executable, "-m", "sidecaromatic.cli", str(session)],
        capture_output=True,
        text=True,
    )
    assert proc.returncode == 0, proc.stderr
    assert intended_for(session / "fmap" / "sub-01_ses-01_dir-PA_epi.json") == [
        "ses-01/func/sub-01_ses-01_task-rest_bold.nii.gz"
    ]


def test_corrupt_image_is_a_warning_not_a_crash(runner: CliRunner, session: Path) -> None:
    anat = session / "anat"
    write_json(anat / "sub-01_ses-01_T1w.json", {"ShimSetting": SHIM_A})
    (anat / "sub-01_ses-01_T1w.nii.gz").write_bytes(b"garbage")

    result = runner.invoke(main, [str(session)])

    assert result.exit_code == 0, result.output
    assert intended_for(session / "fmap" / "sub-01_ses-01_dir-AP_epi.json") == [
        "ses-01/func/sub-01_ses-01_task-rest_bold.nii.gz"
    ]
