"""Populate ``IntendedFor`` in ``fmap/*.json`` from shim and geometry matches.

Association rules
-----------------
1. A field map and a scan belong together when they share the same
   ``ShimSetting`` token *and* the same geometry (three dimensions plus three
   voxel sizes, truncated to three decimals). Both comparisons are exact.
2. Field maps are visited in listing order. Each scan can be claimed by one
   field-map group only: the first matching group wins, later groups with
   identical parameters are left without assignments.
3. A field map is rarely a single file (AP/PA pair, magnitude/phase set, …).
   Once a group has matches, every other field-map file with the same
   ``acq``/``run`` labels *and* its own matching signature receives the very
   same list.
4. Phase reconstructions never start a group of their own but are updated as
   siblings under rule 3.
5. A field map without matches is left untouched: no empty ``IntendedFor``
   is written.

Entries are POSIX paths relative to the subject folder, e.g.
``ses-01/func/sub-01_ses-01_task-rest_bold.nii.gz``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Generic, Iterator, List, Optional, Tuple, TypeVar

from sidecaromatic.config.schema import ConfigSchema
from sidecaromatic.io.sidecar import read_field, write_list_field
from sidecaromatic.pipelines.types import Scan, SessionLayout
from sidecaromatic.providers.base import ImageInfoProvider
from sidecaromatic.utils.errors import InvalidDocument, MissingPairedImage, UnreadableImage

log = logging.getLogger(__name__)

T = TypeVar("T")


# ─────────────────────────────────────────────────────────────────────────────
# Value objects
# ─────────────────────────────────────────────────────────────────────────────
@dataclass(frozen=True)
class Signature:
    """Equality key shared by a field map and the scans it covers."""

    shim: str
    geometry: Tuple[str, ...]


@dataclass
class AssociationResult:
    """Outcome of :func:`associate_fieldmaps` for one session.

    Attributes:
        intended_for: Field-map sidecar → entries matched for its group.
        added:        Field-map sidecar → entries newly written to disk.
        unassigned:   Groupable field maps that matched no scan.
        claimed:      Image paths (subject-relative) that found a field map.
    """

    intended_for: Dict[Path, List[str]] = field(default_factory=dict)
    added: Dict[Path, List[str]] = field(default_factory=dict)
    unassigned: List[Path] = field(default_factory=list)
    claimed: List[str] = field(default_factory=list)


class _WorkingSet(Generic[T]):
    """Ordered items with an explicit *claimed* marker per index.

    Items are never removed; claiming flips a flag so indices stay stable
    while the engine walks the list.
    """

    def __init__(self, items: List[T]) -> None:
        self._items = list(items)
        self._claimed = [False] * len(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def claim(self, idx: int) -> None:
        self._claimed[idx] = True

    def unclaimed(self) -> Iterator[Tuple[int, T]]:
        """Yield ``(index, item)`` for items not claimed at the time of the step."""
        for idx in range(len(self._items)):
            if not self._claimed[idx]:
                yield idx, self._items[idx]


# ─────────────────────────────────────────────────────────────────────────────
# Signature helpers
# ─────────────────────────────────────────────────────────────────────────────
class _SignatureReader:
    """Compute (and memoise per sidecar) the signature of a scan."""

    def __init__(self, provider: ImageInfoProvider, shim_field: str) -> None:
        self._provider = provider
        self._shim_field = shim_field
        self._cache: Dict[Path, Optional[Signature]] = {}

    def __call__(self, scan: Scan) -> Optional[Signature]:
        if scan.sidecar not in self._cache:
            self._cache[scan.sidecar] = self._compute(scan)
        return self._cache[scan.sidecar]

    def _compute(self, scan: Scan) -> Optional[Signature]:
        try:
            if scan.image is None:
                raise MissingPairedImage(scan.sidecar)
            geometry = self._provider.geometry(scan.image)
        except (MissingPairedImage, UnreadableImage) as exc:
            log.warning("%s – no geometry, never matched", exc)
            return None
        shim = read_field(scan.sidecar, self._shim_field)
        return Signature(shim=shim, geometry=geometry)


def _relative_entry(image: Path, prefix: Path) -> str:
    """Return *image* relative to the subject folder as a POSIX string."""
    try:
        return image.relative_to(prefix).as_posix()
    except ValueError:
        return image.as_posix()


# ─────────────────────────────────────────────────────────────────────────────
# Engine steps
# ─────────────────────────────────────────────────────────────────────────────
def _claim_matches(
    sig: Signature,
    others: _WorkingSet[Scan],
    signature_of: _SignatureReader,
    prefix: Path,
) -> List[str]:
    """Claim every unclaimed scan in *others* whose signature equals *sig*."""
    matched: list[str] = []
    for idx, scan in others.unclaimed():
        if scan.image is None or signature_of(scan) != sig:
            continue
        matched.append(_relative_entry(scan.image, prefix))
        others.claim(idx)
        log.debug("  %s ↳ %s", scan.sidecar.name, matched[-1])
    return matched


def _write_group(
    ref: Scan,
    sig: Signature,
    matched: List[str],
    fieldmaps: _WorkingSet[Scan],
    signature_of: _SignatureReader,
    field_name: str,
    result: AssociationResult,
) -> None:
    """Write *matched* to every unclaimed sibling of *ref* (itself included)."""
    key = ref.acq_and_run
    for idx, fm in fieldmaps.unclaimed():
        if fm.acq_and_run != key:
            continue
        # Siblings are re-verified on their own header, never inherited.
        if signature_of(fm) != sig:
            log.debug("%s shares acq/run with %s but not its signature",
                      fm.sidecar.name, ref.sidecar.name)
            continue
        fieldmaps.claim(idx)
        try:
            added = write_list_field(fm.sidecar, field_name, matched)
        except InvalidDocument as exc:
            log.warning("%s – skipped", exc)
            continue
        result.intended_for[fm.sidecar] = list(matched)
        result.added[fm.sidecar] = added


def associate_fieldmaps(
    layout: SessionLayout,
    provider: ImageInfoProvider,
    *,
    cfg: ConfigSchema,
) -> AssociationResult:
    """Fill the ``IntendedFor`` lists of the field maps in *layout*.

    Args:
        layout: Discovered session (field maps and other scans).
        provider: Image Info Provider used for geometry.
        cfg: Validated configuration (field names, shim key).

    Returns:
        An :class:`AssociationResult` describing what was matched and written.
    """
    fm_cfg = cfg.fieldmap
    signature_of = _SignatureReader(provider, fm_cfg.shim_field)
    fieldmaps: _WorkingSet[Scan] = _WorkingSet(layout.fieldmaps)
    others: _WorkingSet[Scan] = _WorkingSet(layout.others)
    result = AssociationResult()

    for _, fmap in fieldmaps.unclaimed():
        if not fmap.groupable:
            continue

        sig = signature_of(fmap)
        if sig is None:
            continue
        log.debug("%s: shim=%r geometry=%s", fmap.sidecar.name, sig.shim, sig.geometry)

        matched = _claim_matches(sig, others, signature_of, layout.subject_prefix)
        if not matched:
            log.info("%s: no scan with matching shim/geometry", fmap.sidecar.name)
            result.unassigned.append(fmap.sidecar)
            continue

        result.claimed.extend(matched)
        _write_group(
            fmap,
            sig,
            matched,
            fieldmaps,
            signature_of,
            fm_cfg.intended_for_field,
            result,
        )

    return result


__all__ = ["associate_fieldmaps", "AssociationResult", "Signature"]
