"""Image Info Providers: volume counts and geometry of NIfTI images."""

from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import ROUND_DOWN, Decimal
from pathlib import Path
from typing import Sequence, Tuple

# Geometry values keep three decimals, truncated like ``bc`` with ``scale=3``.
_QUANTUM = Decimal("0.001")


def quantize(value: float) -> str:
    """Return *value* truncated to three decimals as a fixed-point string."""
    return str(Decimal(str(value)).quantize(_QUANTUM, rounding=ROUND_DOWN))


class ImageInfoProvider(ABC):
    """Abstract source of header information for NIfTI images.

    Concrete providers wrap one backend (a Python reader, a command-line
    toolbox, …). The interface is intentionally small so that new backends
    can be added without touching the pipelines.
    """

    #: Name used in the YAML configuration and on the CLI.
    name: str = ""

    @classmethod
    def check_available(cls) -> None:
        """Raise :class:`StartupConfigurationError` when the backend is unusable."""

    @abstractmethod
    def volume_count(self, image: Path) -> int:
        """Return the number of volumes in *image* (``1`` for 3-D images).

        Raises:
            UnreadableImage: When the header cannot be read.
        """
        raise NotImplementedError

    @abstractmethod
    def dims_and_voxel_sizes(self, image: Path) -> Sequence[float]:
        """Return ``dim1..3`` followed by ``pixdim1..3`` of *image*."""
        raise NotImplementedError

    def geometry(self, image: Path) -> Tuple[str, ...]:
        """Return the normalised geometry signature of *image*.

        Each of the six values is truncated to three decimals, so images whose
        voxel sizes differ only from the fourth decimal on compare equal.
        """
        return tuple(quantize(v) for v in self.dims_and_voxel_sizes(image))
