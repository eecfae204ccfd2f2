"""Image Info Provider backed by *nibabel* (the default)."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

import nibabel as nib
from nibabel.filebasedimages import ImageFileError

from sidecaromatic.utils.errors import UnreadableImage

from .base import ImageInfoProvider


def _pad(values: Sequence[float], n: int = 3, fill: float = 1.0) -> list[float]:
    """Return the first *n* of *values*, padded with *fill* like ``fslinfo``."""
    out = [float(v) for v in values[:n]]
    out.extend([fill] * (n - len(out)))
    return out


def _load(image: Path):
    """Open *image*; header problems become :class:`UnreadableImage`."""
    try:
        return nib.load(image)
    except (ImageFileError, OSError, EOFError) as exc:
        raise UnreadableImage(image, str(exc)) from exc


class NibabelProvider(ImageInfoProvider):
    """Read NIfTI headers in-process with :mod:`nibabel`."""

    name = "nibabel"

    def volume_count(self, image: Path) -> int:
        img = _load(image)
        return int(img.shape[3]) if len(img.shape) >= 4 else 1

    def dims_and_voxel_sizes(self, image: Path) -> Sequence[float]:
        hdr = _load(image).header
        return _pad(hdr.get_data_shape()) + _pad(hdr.get_zooms())
