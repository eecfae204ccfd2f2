"""Image Info Provider that shells out to FSL (``fslnvols`` / ``fslinfo``)."""

from __future__ import annotations

import os
import shutil
import subprocess
from pathlib import Path
from typing import Sequence

import structlog

from sidecaromatic.utils.errors import StartupConfigurationError, UnreadableImage

from .base import ImageInfoProvider

log = structlog.get_logger()

_BINARIES = ("fslnvols", "fslinfo")
_GEOMETRY_KEYS = ("dim1", "dim2", "dim3", "pixdim1", "pixdim2", "pixdim3")


def find_fsl_binary(name: str) -> str | None:
    """Return the path of FSL tool *name* on ``$PATH`` or in ``$FSLDIR/bin``."""
    found = shutil.which(name)
    if found:
        return found
    fsldir = os.environ.get("FSLDIR")
    if fsldir:
        candidate = Path(fsldir) / "bin" / name
        if candidate.is_file() and os.access(candidate, os.X_OK):
            return str(candidate)
    return None


def run_cmd(cmd: Sequence[str]) -> str:
    """Run an FSL command and return its standard output.

    Raises:
        subprocess.CalledProcessError: If the command exits with a non-zero status.
    """
    cmd = [str(c) for c in cmd]
    log.debug("run-cmd", cmd=" ".join(cmd))
    env = os.environ.copy()
    env.setdefault("FSLOUTPUTTYPE", "NIFTI_GZ")
    proc = subprocess.run(cmd, capture_output=True, text=True, check=True, env=env)
    return proc.stdout


def parse_fslinfo(text: str) -> list[float]:
    """Return ``dim1..3`` and ``pixdim1..3`` from ``fslinfo`` output."""
    values: dict[str, float] = {}
    for line in text.splitlines():
        parts = line.split()
        if len(parts) >= 2 and parts[0] in _GEOMETRY_KEYS:
            values[parts[0]] = float(parts[1])
    missing = [k for k in _GEOMETRY_KEYS if k not in values]
    if missing:
        raise ValueError(f"fslinfo output lacks {', '.join(missing)}")
    return [values[k] for k in _GEOMETRY_KEYS]


class FslProvider(ImageInfoProvider):
    """Query image headers through the FSL command-line tools."""

    name = "fsl"

    def __init__(self) -> None:
        self._bin = {b: find_fsl_binary(b) or b for b in _BINARIES}

    @classmethod
    def check_available(cls) -> None:
        missing = [b for b in _BINARIES if find_fsl_binary(b) is None]
        if missing:
            raise StartupConfigurationError(
                "Image info provider 'fsl' needs "
                + ", ".join(missing)
                + " on PATH (or FSLDIR set)"
            )

    def _query(self, tool: str, image: Path) -> str:
        try:
            return run_cmd([self._bin[tool], image])
        except subprocess.CalledProcessError as exc:
            reason = (exc.stderr or "").strip() or f"{tool} exited with {exc.returncode}"
            raise UnreadableImage(image, reason) from exc

    def volume_count(self, image: Path) -> int:
        out = self._query("fslnvols", image).strip()
        try:
            return int(out)
        except ValueError as exc:
            raise UnreadableImage(image, f"fslnvols printed {out!r}") from exc

    def dims_and_voxel_sizes(self, image: Path) -> Sequence[float]:
        try:
            return parse_fslinfo(self._query("fslinfo", image))
        except ValueError as exc:
            raise UnreadableImage(image, str(exc)) from exc
