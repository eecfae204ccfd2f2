"""Custom exceptions used across the sidecar post-processing pipeline.

Only :class:`StartupConfigurationError` is fatal. The remaining classes mark
problems local to one document and are logged by the pipelines, which then
carry on with the rest of the session.
"""

from __future__ import annotations

from pathlib import Path


class SidecarError(RuntimeError):
    """Base class for every error raised by *sidecaromatic*."""

    pass


class StartupConfigurationError(SidecarError):
    """Raised when no usable Image Info Provider or configuration is available."""

    pass


class InvalidDocument(SidecarError):
    """Raised when a JSON sidecar carries no recognisable field structure."""

    def __init__(self, path: Path, reason: str = "") -> None:
        self.path = Path(path)
        self.reason = reason
        msg = f"Invalid json file {self.path}"
        super().__init__(f"{msg} ({reason})" if reason else msg)


class DuplicateAssociation(SidecarError):
    """Raised when an IntendedFor candidate is already listed in a field map."""

    def __init__(self, entry: str, path: Path) -> None:
        self.entry = entry
        self.path = Path(path)
        super().__init__(f'"{entry}" was already included in {self.path.name}')


class MissingPairedImage(SidecarError):
    """Raised when a JSON sidecar has no NIfTI image next to it."""

    def __init__(self, sidecar: Path) -> None:
        self.sidecar = Path(sidecar)
        super().__init__(f"No image found for {self.sidecar}")


class UnreadableImage(SidecarError):
    """Raised when an image exists but its header cannot be read."""

    def __init__(self, image: Path, reason: str = "") -> None:
        self.image = Path(image)
        self.reason = reason
        msg = f"Cannot read image {self.image}"
        super().__init__(f"{msg} ({reason})" if reason else msg)


__all__ = [
    "SidecarError",
    "StartupConfigurationError",
    "InvalidDocument",
    "DuplicateAssociation",
    "MissingPairedImage",
    "UnreadableImage",
]
