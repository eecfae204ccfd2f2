"""Test helpers for sidecaromatic modules."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, Sequence

import nibabel as nib
import numpy as np

from sidecaromatic.providers.base import ImageInfoProvider

DEFAULT_GEOMETRY = (64.0, 64.0, 36.0, 3.0, 3.0, 3.5)
SHIM_A = [1, 2, 3, 4, 5, 6, 7, 8]
SHIM_B = [1, 2, 3, 4, 5, 6, 7, 9]


def write_json(path: Path, meta: dict, *, indent: int | str = 2) -> Path:
    """Write *meta* the way heudiconv/dcm2niix do (pretty-printed + newline)."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(meta, indent=indent) + "\n")
    return path


def make_pair(folder: Path, stem: str, meta: dict | None = None, *, image: bool = True) -> Path:
    """Create ``<stem>.json`` (and an empty ``<stem>.nii.gz``) inside *folder*.

    Returns:
        Path to the JSON sidecar.
    """
    sidecar = write_json(folder / f"{stem}.json", meta if meta is not None else {})
    if image:
        (folder / f"{stem}.nii.gz").touch()
    return sidecar


def make_nifti(path: Path, shape: Sequence[int], zooms: Sequence[float]) -> Path:
    """Write a tiny NIfTI with the given *shape* and voxel sizes."""
    path.parent.mkdir(parents=True, exist_ok=True)
    img = nib.Nifti1Image(np.zeros(tuple(shape), dtype=np.uint8), np.eye(4))
    img.header.set_zooms(tuple(zooms))
    nib.save(img, path)
    return path


def intended_for(sidecar: Path) -> list[str] | None:
    """Return the IntendedFor list of *sidecar* (None when absent)."""
    return json.loads(sidecar.read_text()).get("IntendedFor")


class FakeProvider(ImageInfoProvider):
    """Provider answering from dictionaries keyed by image filename."""

    name = "fake"

    def __init__(
        self,
        geometry: Dict[str, Sequence[float]] | None = None,
        volumes: Dict[str, int] | None = None,
    ) -> None:
        self._geometry = dict(geometry or {})
        self._volumes = dict(volumes or {})
        self.calls: list[str] = []

    def volume_count(self, image: Path) -> int:
        self.calls.append(f"nvols:{image.name}")
        return self._volumes.get(image.name, 1)

    def dims_and_voxel_sizes(self, image: Path) -> Sequence[float]:
        self.calls.append(f"info:{image.name}")
        return self._geometry.get(image.name, DEFAULT_GEOMETRY)
