"""Tests for acq/run parsing of BIDS filenames."""

import pytest

from sidecaromatic.pipelines._entities import NO_ACQ, NO_RUN, parse_acq_and_run


@pytest.mark.parametrize(
    "name, expected",
    [
        ("sub-01_acq-highres_run-02_bold.json", ("highres", "02")),
        ("sub-01_bold.json", (NO_ACQ, NO_RUN)),
        ("sub-01_ses-01_acq-fmri_dir-AP_epi.json", ("fmri", NO_RUN)),
        ("sub-01_ses-01_run-3_magnitude1.json", (NO_ACQ, "3")),
    ],
)
def test_parse_acq_and_run(name, expected) -> None:
    """Verify labels and sentinels."""
    assert parse_acq_and_run(name) == expected


def test_last_marker_wins() -> None:
    assert parse_acq_and_run("sub-01_acq-a_run-1_acq-b_run-2_epi.json") == ("b", "2")


def test_parent_folders_are_ignored(tmp_path) -> None:
    """Only the filename is parsed, never the directories above it."""
    path = tmp_path / "sub-01_acq-x_run-9" / "sub-01_dir-PA_epi.json"
    assert parse_acq_and_run(path) == (NO_ACQ, NO_RUN)
