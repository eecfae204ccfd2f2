"""
YAML configuration loader.

Locates, reads and validates ``sidecaromatic.yaml`` before returning a
:class:`sidecaromatic.config.schema.ConfigSchema` instance.

Search precedence (first match wins)
1. An explicit path argument (``--config`` on the CLI).
2. ``<dataset>/code/config/sidecaromatic.yaml`` – project-local override.
3. The packaged default shipped inside the wheel.

All resolution logic is concentrated here so the rest of *sidecaromatic*
treats configuration as an already-validated object.
"""

from __future__ import annotations

from importlib.resources import as_file, files
from pathlib import Path
from typing import Optional

import yaml
from pydantic import ValidationError

from sidecaromatic.utils.errors import StartupConfigurationError

from .schema import ConfigSchema

CONFIG_NAME = "sidecaromatic.yaml"

_DEFAULT_CONFIG = files("sidecaromatic.resources") / "default_config.yaml"


def _dataset_local(root: Optional[Path]) -> Optional[Path]:
    """Return ``<root>/code/config/sidecaromatic.yaml`` or *None*."""
    if root is None:
        return None
    return root / "code" / "config" / CONFIG_NAME


def _first_existing(*candidates: Optional[Path]) -> Optional[Path]:
    """Return the first path in *candidates* that exists on disk."""
    for p in candidates:
        if p is not None and p.exists():
            return p
    return None


def _load_yaml(path: Path) -> dict:
    """Read a YAML mapping; an empty file yields an empty dict."""
    try:
        data = yaml.safe_load(path.read_text()) or {}
    except yaml.YAMLError as exc:
        raise StartupConfigurationError(f"Cannot parse {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise StartupConfigurationError(f"{path} must contain a YAML mapping")
    return data


def load_config(
    *,
    config_path: Optional[str | Path] = None,
    dataset_root: Optional[str | Path] = None,
) -> ConfigSchema:
    """Return a fully validated :class:`ConfigSchema`.

    Args:
        config_path: Explicit YAML path. ``None`` triggers the search sequence
            described in the module doc-string.
        dataset_root: Root of the BIDS dataset, used for the project-local
            override.

    Raises:
        StartupConfigurationError: When an explicit path does not exist or the
            YAML fails validation.
    """
    explicit = Path(config_path).expanduser().resolve() if config_path else None
    root = Path(dataset_root).expanduser().resolve() if dataset_root else None

    if explicit is not None and not explicit.exists():
        raise StartupConfigurationError(f"Configuration file {explicit} not found")

    resolved = _first_existing(explicit, _dataset_local(root))
    if resolved is None:
        with as_file(_DEFAULT_CONFIG) as p:
            data = _load_yaml(p)
    else:
        data = _load_yaml(resolved)

    try:
        return ConfigSchema(**data)
    except ValidationError as exc:
        raise StartupConfigurationError(f"Invalid configuration – {exc}") from exc
