"""Image Info Providers.

The provider is chosen once at startup, from the configuration or the
``--provider`` CLI option, and injected into the pipelines.
"""

from __future__ import annotations

from typing import Dict, Type

from sidecaromatic.utils.errors import StartupConfigurationError

from .base import ImageInfoProvider
from .fsl import FslProvider
from .nifti import NibabelProvider

PROVIDERS: Dict[str, Type[ImageInfoProvider]] = {
    NibabelProvider.name: NibabelProvider,
    FslProvider.name: FslProvider,
}


def get_provider(name: str) -> ImageInfoProvider:
    """Return a ready-to-use provider registered under *name*.

    Raises:
        StartupConfigurationError: For an unknown *name* or when the backend
            is not available on this machine.
    """
    cls = PROVIDERS.get((name or "").strip().lower())
    if cls is None:
        raise StartupConfigurationError(
            f"Unknown image info provider {name!r} "
            f"(choose from: {', '.join(sorted(PROVIDERS))})"
        )
    cls.check_available()
    return cls()


__all__ = [
    "ImageInfoProvider",
    "NibabelProvider",
    "FslProvider",
    "PROVIDERS",
    "get_provider",
]
