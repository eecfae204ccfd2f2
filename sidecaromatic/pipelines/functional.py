"""Write ``NumberOfVolumes`` into functional sidecars."""

from __future__ import annotations

import logging
from typing import Iterable

from sidecaromatic.io.sidecar import write_scalar_field
from sidecaromatic.pipelines.types import Scan
from sidecaromatic.providers.base import ImageInfoProvider
from sidecaromatic.utils.errors import InvalidDocument, MissingPairedImage, UnreadableImage

log = logging.getLogger(__name__)


def annotate_volume_count(
    scan: Scan,
    provider: ImageInfoProvider,
    *,
    field: str = "NumberOfVolumes",
) -> int:
    """Store the volume count of *scan*'s image in its sidecar.

    Returns:
        The number of volumes written.

    Raises:
        MissingPairedImage: When *scan* has no image.
        UnreadableImage: When the image header cannot be read.
        InvalidDocument: When the sidecar cannot be edited.
    """
    if scan.image is None:
        raise MissingPairedImage(scan.sidecar)
    n_vols = provider.volume_count(scan.image)
    write_scalar_field(scan.sidecar, field, n_vols)
    return n_vols


def annotate_volume_counts(
    scans: Iterable[Scan],
    provider: ImageInfoProvider,
    *,
    field: str = "NumberOfVolumes",
) -> int:
    """Annotate every scan independently; return how many succeeded."""
    done = 0
    for scan in scans:
        try:
            n_vols = annotate_volume_count(scan, provider, field=field)
        except (MissingPairedImage, UnreadableImage, InvalidDocument) as exc:
            log.warning("%s – %s not written", exc, field)
            continue
        log.debug("%s: %s=%d", scan.sidecar.name, field, n_vols)
        done += 1
    return done


__all__ = ["annotate_volume_count", "annotate_volume_counts"]
