"""
Filename entity helpers.

Only two entities matter when pairing field-map files: ``acq`` and ``run``.
They are read from the file *name* alone (never from parent folders), so a
magnitude/phase pair or an AP/PA pair of the same acquisition yields the same
key.

Nothing in this file performs I/O.
"""

from __future__ import annotations

from pathlib import Path
from typing import Tuple

# Sentinels used when a filename carries no such entity.
NO_ACQ = "NONE"
NO_RUN = "00"


def _entity_after(name: str, marker: str) -> str | None:
    """Return the text following the *last* ``marker`` up to the next ``_``."""
    idx = name.rfind(marker)
    if idx == -1:
        return None
    return name[idx + len(marker):].split("_", 1)[0]


def parse_acq_and_run(filename: str | Path) -> Tuple[str, str]:
    """Return the ``(acq, run)`` labels embedded in *filename*.

    >>> parse_acq_and_run("sub-01_acq-highres_run-02_bold.json")
    ('highres', '02')
    >>> parse_acq_and_run("sub-01_bold.json")
    ('NONE', '00')
    """
    name = Path(filename).name
    acq = _entity_after(name, "_acq-")
    run = _entity_after(name, "_run-")
    return (NO_ACQ if acq is None else acq, NO_RUN if run is None else run)


__all__ = ["parse_acq_and_run", "NO_ACQ", "NO_RUN"]
