"""Replace heudiconv's ``TaskName`` placeholder in task-level JSONs.

heudiconv seeds ``task-<label>_bold.json`` with
``"TaskName": "TODO: full task name for <label>"``. The label itself is a
valid task name, so the placeholder is reduced to it.

Every matching file below the dataset root is visited, except those inside
``sub-*`` folders, which hold per-scan sidecars only.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator, List

from sidecaromatic.config.schema import TaskSettings
from sidecaromatic.io.sidecar import load_sidecar, write_scalar_field
from sidecaromatic.utils.errors import InvalidDocument

log = logging.getLogger(__name__)


def _task_documents(dataset_root: Path, pattern: str) -> Iterator[Path]:
    """Yield files matching *pattern* under *dataset_root*, outside ``sub-*``."""
    for path in sorted(dataset_root.rglob(pattern)):
        folders = path.relative_to(dataset_root).parts[:-1]
        if any(part.startswith("sub-") for part in folders):
            continue
        if path.is_file():
            yield path


def fix_task_placeholders(dataset_root: Path, settings: TaskSettings) -> List[Path]:
    """Fix the placeholder in every task JSON of the dataset at *dataset_root*.

    Returns:
        Files that were rewritten.
    """
    fixed: list[Path] = []
    for path in _task_documents(dataset_root, settings.pattern):
        try:
            value = load_sidecar(path).get(settings.field)
            if not isinstance(value, str) or not value.startswith(settings.placeholder_prefix):
                continue
            name = value[len(settings.placeholder_prefix):].strip()
            if name and write_scalar_field(path, settings.field, name):
                fixed.append(path)
        except InvalidDocument as exc:
            log.warning("%s – skipped", exc)
    return fixed


__all__ = ["fix_task_placeholders"]
