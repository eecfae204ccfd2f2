"""
sidecaromatic package initialisation.

1. **Expose the version string**
   ``sidecaromatic.__version__`` is resolved at import-time from the installed
   distribution metadata.

2. **Re-export the public helpers**
   :func:`sidecaromatic.config.load_config` and
   :func:`sidecaromatic.pipelines.process_session` are available at the top
   level so call-sites can simply do::

       from sidecaromatic import load_config, process_session
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__: str = version("sidecaromatic")
except PackageNotFoundError:
    # Source tree without an installed wheel.
    __version__ = "0.0.0"

from .config import load_config  # noqa: E402
from .pipelines import process_session  # noqa: E402

__all__: list[str] = ["load_config", "process_session", "__version__"]
