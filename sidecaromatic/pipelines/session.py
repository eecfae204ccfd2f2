"""Run every sidecar pass over one subject/session folder.

Order of the passes
-------------------
1. ``NumberOfVolumes`` for each functional run.
2. ``IntendedFor`` for the field maps.
3. ``TaskName`` placeholder fix in the dataset-level ``task-*_bold.json``.

Each pass handles its own per-file failures; only configuration problems
(raised before this module is reached) stop a run.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from sidecaromatic.config.schema import ConfigSchema
from sidecaromatic.pipelines.fieldmap import AssociationResult, associate_fieldmaps
from sidecaromatic.pipelines.functional import annotate_volume_counts
from sidecaromatic.pipelines.tasks import fix_task_placeholders
from sidecaromatic.pipelines.types import SessionLayout, discover_session
from sidecaromatic.providers.base import ImageInfoProvider

log = logging.getLogger(__name__)


@dataclass
class SessionReport:
    """Counters surfaced by the CLI after a run."""

    layout: SessionLayout
    volumes_annotated: int = 0
    association: AssociationResult = field(default_factory=AssociationResult)
    tasks_fixed: List[Path] = field(default_factory=list)

    @property
    def fieldmaps_updated(self) -> int:
        return len(self.association.intended_for)


def process_session(
    session: Path,
    provider: ImageInfoProvider,
    cfg: ConfigSchema,
) -> SessionReport:
    """Complete the JSON sidecars of *session*.

    Args:
        session: ``sub-XX`` or ``sub-XX/ses-YY`` directory.
        provider: Image Info Provider chosen at startup.
        cfg: Validated configuration.

    Returns:
        A :class:`SessionReport` with per-pass counts.
    """
    layout = discover_session(session, cfg)
    log.debug("subject prefix: %s", layout.subject_prefix)
    log.debug("functional: %s", [s.sidecar.name for s in layout.functional])
    log.debug("fieldmaps: %s", [s.sidecar.name for s in layout.fieldmaps])
    log.debug("others: %s", [s.sidecar.name for s in layout.others])

    report = SessionReport(layout=layout)

    log.info("Adding '%s' to the functional runs in %s",
             cfg.functional.volumes_field, layout.session)
    report.volumes_annotated = annotate_volume_counts(
        layout.functional, provider, field=cfg.functional.volumes_field
    )

    log.info("Adding '%s' to the fieldmap runs in %s",
             cfg.fieldmap.intended_for_field, layout.session)
    report.association = associate_fieldmaps(layout, provider, cfg=cfg)

    report.tasks_fixed = fix_task_placeholders(layout.dataset_root, cfg.tasks)
    return report


__all__ = ["process_session", "SessionReport"]
