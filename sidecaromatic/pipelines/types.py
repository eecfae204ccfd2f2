"""
Typed, immutable value objects that circulate between pipeline stages.

Every class inherits from :class:`pydantic.BaseModel` with ``frozen=True``
to guarantee hash-ability and prevent accidental mutation once the objects
have been created. The discovery helpers at the bottom build them from a
session folder on disk.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Tuple

from pydantic import BaseModel

from sidecaromatic.config.schema import ConfigSchema
from sidecaromatic.pipelines._entities import parse_acq_and_run

_IMAGE_EXTS = (".nii.gz", ".nii")


def find_paired_image(sidecar: Path) -> Optional[Path]:
    """Return the NIfTI image sharing *sidecar*'s stem, or *None*."""
    stem = sidecar.name[: -len(".json")] if sidecar.name.endswith(".json") else sidecar.stem
    for ext in _IMAGE_EXTS:
        cand = sidecar.with_name(stem + ext)
        if cand.is_file():
            return cand
    return None


class Scan(BaseModel, frozen=True):
    """One acquisition: a JSON sidecar and (when present) its image.

    Attributes
    ----------
    sidecar
        Absolute path to the ``*.json`` document.
    image
        Paired ``*.nii[.gz]`` file, *None* when missing on disk.
    groupable
        ``False`` for phase reconstructions in ``fmap/`` which must not start
        a field-map group of their own.
    """

    sidecar: Path
    image: Optional[Path] = None
    groupable: bool = True

    @property
    def acq_and_run(self) -> Tuple[str, str]:
        """``(acq, run)`` labels parsed from the sidecar filename."""
        return parse_acq_and_run(self.sidecar.name)


class SessionLayout(BaseModel, frozen=True):
    """Everything discovered under one subject or session folder.

    Attributes
    ----------
    session
        Folder that was scanned (``sub-XX`` or ``sub-XX/ses-YY``).
    subject_prefix
        Folder IntendedFor entries are made relative to.
    dataset_root
        Parent of the subject folder; home of ``task-*_bold.json``.
    functional
        Functional runs (``func/*_bold.json``).
    fieldmaps
        Every sidecar in the field-map folder, in listing order.
    others
        Every other sidecar of the session, in listing order.
    """

    session: Path
    subject_prefix: Path
    dataset_root: Path
    functional: List[Scan] = []
    fieldmaps: List[Scan] = []
    others: List[Scan] = []


def subject_prefix(session: Path) -> Path:
    """Return the subject-level folder for *session*.

    ``…/sub-01/ses-02`` yields ``…/sub-01``; a folder that is not a ``ses-``
    level is its own prefix.
    """
    return session.parent if session.name.startswith("ses-") else session


def discover_session(session: Path, cfg: ConfigSchema) -> SessionLayout:
    """Enumerate the sidecars of *session* according to *cfg*.

    Args:
        session: Subject or session directory.
        cfg: Validated configuration.

    Returns:
        A :class:`SessionLayout` whose lists are sorted by path.
    """
    session = session.expanduser().resolve()
    prefix = subject_prefix(session)
    fm = cfg.fieldmap
    fn = cfg.functional

    func_dir = session / fn.folder
    functional = [
        Scan(sidecar=p, image=find_paired_image(p))
        for p in sorted(func_dir.glob(f"*{fn.suffix}.json"))
        if p.is_file()
    ]

    fmap_dir = session / fm.folder
    fieldmaps = [
        Scan(sidecar=p, image=find_paired_image(p), groupable=not fm.is_phase(p.name))
        for p in sorted(fmap_dir.glob("*.json"))
        if p.is_file()
    ]

    others: list[Scan] = []
    for p in sorted(session.glob("*/*.json")):
        if not p.is_file() or p.parent.name == fm.folder:
            continue
        if not fm.include_sbref and p.name.endswith("_sbref.json"):
            continue
        others.append(Scan(sidecar=p, image=find_paired_image(p)))

    return SessionLayout(
        session=session,
        subject_prefix=prefix,
        dataset_root=prefix.parent,
        functional=functional,
        fieldmaps=fieldmaps,
        others=others,
    )


__all__ = [
    "Scan",
    "SessionLayout",
    "discover_session",
    "find_paired_image",
    "subject_prefix",
]
