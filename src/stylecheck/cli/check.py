"""CLI command: stylecheck check -- lint stylesheets against the style guide."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click

from stylecheck.config import CheckConfig, ConfigError, find_config
from stylecheck.report import FORMATS, exit_code, render
from stylecheck.runner import run_check
from stylecheck.validation import ALL_RULES


def _parse_severities(values: tuple[str, ...]) -> dict[str, str] | None:
    if not values:
        return None
    overrides: dict[str, str] = {}
    for value in values:
        rule_id, sep, level = value.partition("=")
        if not sep or not rule_id or not level:
            raise click.BadParameter(
                f"{value!r} is not RULE=LEVEL.", param_hint="'--severity'"
            )
        overrides[rule_id.strip()] = level.strip()
    return overrides


def _load_config(
    config_file: str | None,
    enable: tuple[str, ...],
    disable: tuple[str, ...],
    severities: tuple[str, ...],
    tab_width: str | None,
    jobs: int | None,
    show_source: bool | None,
) -> CheckConfig:
    """File configuration (explicit, or ./.stylecheck.json) overridden by options."""
    path = Path(config_file) if config_file else find_config(Path.cwd())
    base = CheckConfig.load(path) if path else CheckConfig()
    return base.merged(
        enabled=frozenset(enable) if enable else None,
        disabled=frozenset(disable) if disable else None,
        severity_overrides=_parse_severities(severities),
        tab_width=int(tab_width) if tab_width else None,
        jobs=jobs,
        show_source=show_source,
    )


@click.command()
@click.argument("paths", nargs=-1, type=click.Path())
@click.option(
    "--format",
    "fmt",
    type=click.Choice(FORMATS),
    default="human",
    show_default=True,
    help="Report rendering.",
)
@click.option(
    "--config",
    "config_file",
    type=click.Path(exists=True, dir_okay=False),
    help="JSON configuration file (default: ./.stylecheck.json when present).",
)
@click.option("--enable", multiple=True, metavar="RULE", help="Run only these rules.")
@click.option("--disable", multiple=True, metavar="RULE", help="Skip these rules.")
@click.option(
    "--severity",
    "severities",
    multiple=True,
    metavar="RULE=LEVEL",
    help="Override a rule's severity (error or warning).",
)
@click.option(
    "--tab-width",
    type=click.Choice(["2", "4"]),
    default=None,
    help="Display width of tabs in source excerpts.",
)
@click.option("--jobs", "-j", type=click.IntRange(min=1), default=None, help="Worker threads.")
@click.option(
    "--show-source/--no-show-source",
    default=None,
    help="Print the offending source line under each finding.",
)
@click.option("--list-rules", is_flag=True, help="List available rules and exit.")
@click.option("--verbose", "-v", is_flag=True, help="Log progress to stderr.")
def check(
    paths: tuple[str, ...],
    fmt: str,
    config_file: str | None,
    enable: tuple[str, ...],
    disable: tuple[str, ...],
    severities: tuple[str, ...],
    tab_width: str | None,
    jobs: int | None,
    show_source: bool | None,
    list_rules: bool,
    verbose: bool,
) -> None:
    """Check stylesheet files or directories against the style guide.

    Prints one line per violation and exits with code 0 if no errors are
    found, 1 if there are errors or files that could not be parsed, and 2
    if no input could be read at all.
    """
    if list_rules:
        for rule in ALL_RULES:
            click.echo(f"{rule.id:<27} {rule.severity.value:<8} {rule.description}")
        sys.exit(0)

    if not paths:
        raise click.UsageError("Give at least one file or directory to check.")

    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            stream=sys.stderr,
            format="%(levelname)s %(name)s: %(message)s",
        )

    try:
        config = _load_config(
            config_file, enable, disable, severities, tab_width, jobs, show_source
        )
    except ConfigError as exc:
        raise click.UsageError(str(exc)) from exc

    report = run_check(paths, config)
    click.echo(render(report, fmt, tab_width=config.tab_width), nl=False)
    sys.exit(exit_code(report))
