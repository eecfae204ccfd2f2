"""
Pydantic models that mirror the YAML configuration consumed by *sidecaromatic*.

The classes define a strongly-typed representation of the configuration file
so that the rest of the codebase works with validated objects instead of
ad-hoc dictionaries.
"""

from __future__ import annotations

import re
from typing import List

from pydantic import BaseModel, Field, field_validator


class ImageInfoSettings(BaseModel):
    """Which Image Info Provider answers volume-count and geometry queries."""

    provider: str = Field("nibabel", description="Registered provider name")

    @field_validator("provider")
    @classmethod
    def _lower(cls, v: str) -> str:
        return v.strip().lower()


class FieldmapSettings(BaseModel):
    """Rules for the IntendedFor association.

    Attributes:
        folder:             Session sub-folder holding field maps.
        intended_for_field: List-valued key written to each field-map sidecar.
        shim_field:         Key compared (as an opaque token) between scans.
        phase_patterns:     Regular expressions; matching field-map files never
                            start a group but may still be updated as siblings.
        include_sbref:      Keep ``*_sbref.json`` scans among the candidates.
    """

    folder: str = "fmap"
    intended_for_field: str = "IntendedFor"
    shim_field: str = "ShimSetting"
    phase_patterns: List[str] = Field(
        default_factory=lambda: [
            r"_part-phase_",
            r"_phase[12]?\.json$",
            r"_phasediff\.json$",
        ]
    )
    include_sbref: bool = True

    @field_validator("phase_patterns")
    @classmethod
    def _patterns_compile(cls, v: List[str]) -> List[str]:
        for pat in v:
            try:
                re.compile(pat)
            except re.error as exc:
                raise ValueError(f"Bad phase pattern {pat!r}: {exc}") from exc
        return v

    def is_phase(self, filename: str) -> bool:
        """Return ``True`` when *filename* matches one of :attr:`phase_patterns`."""
        return any(re.search(p, filename) for p in self.phase_patterns)


class FunctionalSettings(BaseModel):
    """Where functional runs live and which key receives the volume count."""

    folder: str = "func"
    suffix: str = "_bold"
    volumes_field: str = "NumberOfVolumes"


class TaskSettings(BaseModel):
    """Placeholder written by heudiconv into dataset-level ``task-*_bold.json``."""

    pattern: str = "task-*_bold.json"
    field: str = "TaskName"
    placeholder_prefix: str = "TODO: full task name for "


class ConfigSchema(BaseModel):
    """Root model for the merged YAML document."""

    version: str = "1.0"
    image_info: ImageInfoSettings = Field(default_factory=ImageInfoSettings)
    fieldmap: FieldmapSettings = Field(default_factory=FieldmapSettings)
    functional: FunctionalSettings = Field(default_factory=FunctionalSettings)
    tasks: TaskSettings = Field(default_factory=TaskSettings)
