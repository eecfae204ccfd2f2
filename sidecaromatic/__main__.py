"""
Module entry-point that makes the package runnable with

    python -m sidecaromatic

The behaviour is identical to the *sidecaromatic-cli* console script.
"""

from sidecaromatic.cli import main

if __name__ == "__main__":  # pragma: no cover
    main()
