"""
Public façade for the *pipelines* sub-package.

* **Discovery** – :func:`discover_session`, :class:`SessionLayout`, :class:`Scan`
* **Passes** – :func:`annotate_volume_counts`, :func:`associate_fieldmaps`,
  :func:`fix_task_placeholders`
* **Driver** – :func:`process_session`

Importing from ``sidecaromatic.pipelines`` rather than individual modules keeps
call-sites stable even when underlying filenames change.
"""

from __future__ import annotations

from ._entities import parse_acq_and_run
from .fieldmap import AssociationResult, associate_fieldmaps
from .functional import annotate_volume_counts
from .session import SessionReport, process_session
from .tasks import fix_task_placeholders
from .types import Scan, SessionLayout, discover_session, subject_prefix

__all__: list[str] = [
    "parse_acq_and_run",
    "Scan",
    "SessionLayout",
    "discover_session",
    "subject_prefix",
    "annotate_volume_counts",
    "associate_fieldmaps",
    "AssociationResult",
    "fix_task_placeholders",
    "process_session",
    "SessionReport",
]
