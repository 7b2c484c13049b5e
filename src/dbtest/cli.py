# src/dbtest/cli.py
"""dbtest Command Line Interface.

Inspect the assertion fixtures a test run would load:

    dbtest validate                       # load everything, report counts
    dbtest list --rule-type=db --database=mysql
    dbtest show select_1
    dbtest rule-types

The asserts root comes from ``--root`` or, failing that, from the settings
resource search path (``--settings`` file and DBTEST_* variables).
"""

from __future__ import annotations

import json
from enum import StrEnum
from pathlib import Path
from typing import Annotated

import typer
from dynaconf.vendor.ruamel.yaml.parser import ParserError as YamlParserError
from dynaconf.vendor.ruamel.yaml.scanner import ScannerError as YamlScannerError
from pydantic import ValidationError

from dbtest import __version__
from dbtest.asserts.loader import AssertLoader
from dbtest.contracts.asserts import AssertDefinition
from dbtest.contracts.errors import AssertLoadError
from dbtest.core.config import load_settings

app = typer.Typer(
    name="dbtest",
    help="dbtest: SQL assertion fixtures for database integration tests.",
    no_args_is_help=True,
)

SettingsOption = Annotated[
    Path | None,
    typer.Option(
        "--settings",
        "-s",
        help="Path to settings YAML file.",
    ),
]
RootOption = Annotated[
    Path | None,
    typer.Option(
        "--root",
        "-r",
        help="Asserts root directory (skips the resource search path).",
    ),
]


class OutputFormat(StrEnum):
    CONSOLE = "console"
    JSON = "json"


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"dbtest version {__version__}")
        raise typer.Exit()


def _load_dotenv(env_file: Path | None = None) -> bool:
    """Load environment variables from .env file.

    Raises:
        typer.Exit: If explicit env_file path doesn't exist.
    """
    from dotenv import load_dotenv

    if env_file is not None:
        if not env_file.exists():
            typer.secho(
                f"Error: .env file not found: {env_file}",
                fg=typer.colors.RED,
                err=True,
            )
            raise typer.Exit(1)
        return load_dotenv(env_file, override=False)

    return load_dotenv(override=False)


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    no_dotenv: bool = typer.Option(
        False,
        "--no-dotenv",
        help="Skip loading .env file.",
    ),
    env_file: Path | None = typer.Option(
        None,
        "--env-file",
        help="Path to .env file (skips automatic search).",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose/debug logging.",
    ),
    json_logs: bool = typer.Option(
        False,
        "--json-logs",
        help="Output structured JSON logs (for machine processing).",
    ),
) -> None:
    """dbtest: SQL assertion fixtures for database integration tests."""
    from dbtest.core.logging import configure_cli_logging

    configure_cli_logging(verbose=verbose, json_output=json_logs)

    if not no_dotenv:
        _load_dotenv(env_file=env_file)
    elif env_file is not None:
        typer.secho(
            "Warning: --env-file ignored because --no-dotenv is set.",
            fg=typer.colors.YELLOW,
            err=True,
        )


def _build_loader(settings_path: Path | None, root: Path | None) -> AssertLoader:
    """Load settings and assertions, turning every failure into exit code 1."""
    try:
        settings = load_settings(settings_path.expanduser() if settings_path is not None else None)
    except (YamlParserError, YamlScannerError) as e:
        typer.echo(f"YAML syntax error in {settings_path}: {e.problem}", err=True)
        raise typer.Exit(1) from None
    except FileNotFoundError:
        typer.echo(f"Error: Settings file not found: {settings_path}", err=True)
        raise typer.Exit(1) from None
    except ValidationError as e:
        typer.echo("Configuration errors:", err=True)
        for error in e.errors():
            loc = ".".join(str(x) for x in error["loc"])
            typer.echo(f"  - {loc}: {error['msg']}", err=True)
        raise typer.Exit(1) from None

    try:
        if root is not None:
            return AssertLoader(
                root,
                file_prefix=settings.file_prefix,
                file_suffix=settings.file_suffix,
                duplicate_ids=settings.duplicate_ids,
            )
        return AssertLoader.from_settings(settings)
    except AssertLoadError as e:
        typer.echo(f"Error loading assertions: {e}", err=True)
        raise typer.Exit(1) from None


def _to_json(entry: AssertDefinition) -> dict[str, object]:
    return {"kind": entry.kind.value, **entry.model_dump(mode="json")}


@app.command()
def validate(
    settings: SettingsOption = None,
    root: RootOption = None,
) -> None:
    """Load every assertion file and report what was found."""
    loader = _build_loader(settings, root)
    typer.echo(f"Assertions valid: {len(loader)} cases under {loader.root}")
    for kind, count in loader.index.count_by_kind().items():
        typer.echo(f"  {kind.value}: {count}")
    typer.echo(f"  rule types: {', '.join(sorted(loader.rule_types)) or '(none)'}")


@app.command("list")
def list_assertions(
    settings: SettingsOption = None,
    root: RootOption = None,
    rule_type: Annotated[
        str | None,
        typer.Option("--rule-type", help="Only cases that run under this rule type."),
    ] = None,
    database: Annotated[
        str | None,
        typer.Option("--database", "-d", help="Only cases that run on this database."),
    ] = None,
    output_format: Annotated[
        OutputFormat,
        typer.Option("--format", "-f", help="Output format."),
    ] = OutputFormat.CONSOLE,
) -> None:
    """List assertion case ids."""
    loader = _build_loader(settings, root)
    entries = loader.index.select(rule_type=rule_type, database_type=database)
    if output_format is OutputFormat.JSON:
        typer.echo(json.dumps([_to_json(entry) for entry in entries], indent=2))
        return
    for entry in entries:
        typer.echo(f"{entry.id}\t{entry.kind.value}\t{entry.path}")


@app.command()
def show(
    assert_id: Annotated[str, typer.Argument(help="Assertion case id.")],
    settings: SettingsOption = None,
    root: RootOption = None,
) -> None:
    """Show one assertion case as JSON."""
    loader = _build_loader(settings, root)
    entry = loader.get_assertion(assert_id)
    if entry is None:
        typer.echo(f"No assertion with id '{assert_id}'", err=True)
        raise typer.Exit(1)
    typer.echo(json.dumps(_to_json(entry), indent=2))


@app.command("rule-types")
def rule_types(
    settings: SettingsOption = None,
    root: RootOption = None,
) -> None:
    """List every sharding rule type referenced by the assertions."""
    loader = _build_loader(settings, root)
    for rule_type in sorted(loader.rule_types):
        typer.echo(rule_type)


if __name__ == "__main__":
    app()
