"""Expose the Click command behind the ``sidecaromatic-cli`` script.

The module:

* declares a single Click *command* called :pyfunc:`main`;
* wires the positional session argument and the global flags (verbosity,
  configuration override, provider choice, log mirror);
* sets up logging via :pyfunc:`sidecaromatic.utils.logging.setup_logging`;
* loads the YAML configuration and selects the Image Info Provider once;
* runs :pyfunc:`sidecaromatic.pipelines.process_session` and prints counts.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

import click
import structlog

from sidecaromatic import __version__
from sidecaromatic.config import load_config
from sidecaromatic.pipelines import process_session, subject_prefix
from sidecaromatic.providers import get_provider
from sidecaromatic.utils.display import (
    echo_banner,
    echo_section,
    echo_session,
    echo_success,
)
from sidecaromatic.utils.errors import StartupConfigurationError
from sidecaromatic.utils.logging import setup_logging

log = structlog.get_logger()

# ─────────────────────────────────────────────────────────────────────────────
# Context settings: “-h/--help” and default values in the automatic help text.
# ─────────────────────────────────────────────────────────────────────────────
_CTX: Dict[str, Any] = dict(
    help_option_names=["-h", "--help"],
    show_default=True,
    max_content_width=120,
)

_FALSY = {"", "0", "false", "no", "off"}


def _truthy(token: str | None) -> bool:
    """Interpret the optional second positional argument."""
    return token is not None and token.strip().lower() not in _FALSY


@click.command(
    context_settings=_CTX,
    help="""\b
sidecaromatic-cli – complete BIDS JSON sidecars for one session.

\b
  1) NumberOfVolumes in func/*_bold.json
  2) IntendedFor in fmap/*.json (shim + geometry matching)
  3) TaskName placeholder in task-*_bold.json

SESSION is a sub-XX/ses-YY folder (or sub-XX when there are no sessions).
Any second argument (e.g. "verbose") turns on verbose output.
""",
)
@click.version_option(__version__)
@click.argument("session", required=False, type=click.Path(path_type=Path))
@click.argument("verbose_arg", metavar="[VERBOSE]", required=False)
@click.option("-v", "--verbose", is_flag=True, help="INFO-level console output.")
@click.option("--debug", is_flag=True, help="DEBUG-level console output.")
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="YAML configuration overriding the dataset/packaged defaults.",
)
@click.option(
    "--provider",
    help="Image info provider (nibabel or fsl); overrides the configuration.",
)
@click.option(
    "--save-logfile",
    type=click.Path(dir_okay=False, writable=True, path_type=Path),
    help="Mirror console output into this plain-text file.",
)
@click.pass_context
def main(  # noqa: D401
    ctx: click.Context,
    session: Path | None,
    verbose_arg: str | None,
    verbose: bool,
    debug: bool,
    config_path: Path | None,
    provider: str | None,
    save_logfile: Path | None,
) -> None:
    """Root command executed by *sidecaromatic-cli*.

    Raises:
        click.ClickException: When the session folder is missing or no Image
            Info Provider can be configured (exit code 1).
    """
    if session is None:
        click.echo(ctx.get_usage(), err=True)
        click.echo("Error: missing SESSION folder.", err=True)
        ctx.exit(1)

    session = session.expanduser().resolve()
    if not session.is_dir():
        raise click.ClickException(f"{session} is not a directory\n\n{ctx.get_usage()}")

    verbose = verbose or _truthy(verbose_arg)
    dataset_root = subject_prefix(session).parent

    setup_logging(
        dataset_root=dataset_root,
        verbose=verbose,
        debug=debug,
        extra_text_log=save_logfile,
    )

    try:
        cfg = load_config(config_path=config_path, dataset_root=dataset_root)
        provider_name = provider or cfg.image_info.provider
        info = get_provider(provider_name)
    except StartupConfigurationError as exc:
        raise click.ClickException(f"{exc}\n\n{ctx.get_usage()}") from exc
    log.debug("startup", session=str(session), provider=provider_name)

    echo_banner("sidecaromatic")
    sub = subject_prefix(session).name
    echo_session(sub, session.name if session.name != sub else None)

    report = process_session(session, info, cfg)

    echo_section(cfg.functional.volumes_field)
    click.echo(
        f"  {report.volumes_annotated}/{len(report.layout.functional)} functional run(s) annotated"
    )

    echo_section(cfg.fieldmap.intended_for_field)
    assoc = report.association
    for fmap, entries in assoc.intended_for.items():
        click.echo(f"  {fmap.name}: {len(entries)} target(s)")
        if verbose:
            for entry in entries:
                click.echo(f"      {entry}")
    for fmap in assoc.unassigned:
        click.echo(f"  {fmap.name}: no matching scans")

    if report.tasks_fixed:
        echo_section(cfg.tasks.field)
        for path in report.tasks_fixed:
            click.echo(f"  {path.name}")

    echo_success(
        f"{report.fieldmaps_updated} field-map file(s) updated, "
        f"{len(assoc.claimed)} scan(s) assigned."
    )


cli = main
__all__: list[str] = ["main"]
