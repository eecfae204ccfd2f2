"""
Configuration package façade.

Exports the small, stable surface that external callers rely on:

* :func:`load_config` – Locate, parse and validate ``sidecaromatic.yaml``.
* :class:`ConfigSchema` – Pydantic model of the validated configuration.
"""

from .loader import load_config  # noqa: F401
from .schema import ConfigSchema  # noqa: F401

__all__: list[str] = ["load_config", "ConfigSchema"]
