from __future__ import annotations

from dataclasses import asdict, dataclass, field, replace
from pathlib import Path
from typing import NoReturn, Optional
import logging

import portalocker
import typer

from tscat import hash as tshash
from tscat import merge as tsmerge
from tscat import snapshot
from tscat import stats as tsstats
from tscat import ts_utils
from tscat import validate as tsvalidate
from tscat.config import Config, load_config, load_config_from_root
from tscat.constants import SEVERITY_ORDER, LocationMode, Severity
from tscat.convert import convert_path
from tscat.translator import Translator
from tscat.ts_model import Catalog, TsFormatError, parse_ts_bytes, parse_ts_path
from tscat.ts_writer import CatalogChangedError, render_ts_bytes, save_ts

LOCATION_MODES = (LocationMode.ABSOLUTE, LocationMode.RELATIVE, LocationMode.NONE)


def _exit_with_error(message: str, code: int = 1) -> NoReturn:
    """Print error message to stderr and exit with given code."""
    typer.secho(f"Error: {message}", fg="red", err=True)
    raise typer.Exit(code)


app = typer.Typer(add_completion=False, no_args_is_help=True)


@dataclass
class CLIState:
    root: Path
    config: Config = field(default_factory=Config)


def _require_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if isinstance(state, CLIState):
        return state
    return CLIState(root=Path.cwd())


def _resolve_paths(state: CLIState, paths: Optional[list[Path]]) -> list[Path]:
    resolved = ts_utils.iter_ts_paths(state.root, paths)
    if not resolved:
        _exit_with_error("No .ts catalogs found.")
    return resolved


def _load_catalog(path: Path):
    try:
        return parse_ts_path(path)
    except (OSError, TsFormatError) as exc:
        _exit_with_error(str(exc))


def _with_source_language(catalog: Catalog, config: Config) -> Catalog:
    if catalog.source_language or not config.source_language:
        return catalog
    return replace(catalog, source_language=config.source_language)


def _check_location_mode(mode: str) -> str:
    if mode not in LOCATION_MODES:
        _exit_with_error(f"unsupported location mode: {mode} (expected one of {', '.join(LOCATION_MODES)})")
    return mode


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v"),
    config_path: Optional[Path] = typer.Option(None, "--config"),
) -> None:
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")
    root = Path.cwd()
    try:
        config = load_config(config_path) if config_path else load_config_from_root(root)
    except Exception as exc:
        _exit_with_error(f"Invalid configuration: {exc}")
    ctx.obj = CLIState(root=root, config=config)


def _format_issue(path: Path, issue: tsvalidate.Issue) -> str:
    label = issue.source if not issue.comment else f"{issue.source} ({issue.comment})"
    return f"{path}: {issue.severity} {issue.code} [{issue.context}] {label!r}: {issue.message}"


@app.command()
def validate(
    ctx: typer.Context,
    paths: Optional[list[Path]] = typer.Argument(None),
    fail_on: Optional[str] = typer.Option(None, "--fail-on"),
    as_json: bool = typer.Option(False, "--json"),
) -> None:
    state = _require_state(ctx)
    threshold = fail_on or state.config.validation.fail_on
    if threshold not in SEVERITY_ORDER:
        _exit_with_error(f"unsupported severity: {threshold}")
    failed = False
    payload: list[dict] = []
    for path in _resolve_paths(state, paths):
        catalog = _load_catalog(path)
        issues = tsvalidate.validate_catalog(catalog, state.config)
        if tsvalidate.has_failures(issues, threshold):
            failed = True
        if as_json:
            payload.append({"file": str(path), "issues": [asdict(issue) for issue in issues]})
            continue
        for issue in issues:
            line = _format_issue(path, issue)
            if issue.severity == Severity.ERROR:
                typer.secho(line, fg="red")
            else:
                typer.echo(line)
    if as_json:
        typer.echo(tshash.canonical_json(payload))
    if failed:
        raise typer.Exit(1)
    if not as_json:
        typer.echo("Validation passed.")


@app.command()
def stats(
    ctx: typer.Context,
    paths: Optional[list[Path]] = typer.Argument(None),
) -> None:
    state = _require_state(ctx)
    for path in _resolve_paths(state, paths):
        summary = tsstats.catalog_stats(_load_catalog(path))
        typer.echo(f"{path.name}: {tsstats.format_stats(summary)}")


@app.command()
def lookup(
    path: Path = typer.Argument(...),
    source: str = typer.Argument(...),
    context: str = typer.Option(..., "--context"),
    comment: str = typer.Option("", "--comment"),
    count: int = typer.Option(-1, "-n", "--count"),
) -> None:
    translator = Translator(_load_catalog(path))
    if translator.lookup(context, source, comment) is None:
        typer.secho(f"Warning: no message for [{context}] {source!r}; using source text.", err=True)
    typer.echo(translator.translate(context, source, comment, n=count))


@app.command()
def merge(
    ctx: typer.Context,
    existing: Path = typer.Argument(...),
    template: Path = typer.Argument(...),
    no_obsolete: bool = typer.Option(False, "--no-obsolete"),
    out: Optional[Path] = typer.Option(None, "--out"),
) -> None:
    state = _require_state(ctx)
    config = state.config
    extracted = _load_catalog(template)
    try:
        locked = snapshot.locked_read_file(existing)
        current = parse_ts_bytes(locked.bytes)
    except portalocker.exceptions.LockException:
        _exit_with_error(f"{existing} is locked by another process.")
    except (OSError, TsFormatError) as exc:
        _exit_with_error(f"Merge failed: {exc}")

    keep_obsolete = config.keep_obsolete and not no_obsolete
    result = tsmerge.merge_catalogs(current, extracted, keep_obsolete=keep_obsolete)
    target = out or existing
    try:
        save_ts(
            _with_source_language(result.catalog, config),
            target,
            locations=config.locations,
            version=config.ts_version,
            expected_sha256=locked.sha256 if out is None else None,
        )
    except portalocker.exceptions.LockException:
        _exit_with_error(f"{target} is locked by another process.")
    except CatalogChangedError as exc:
        _exit_with_error(str(exc))
    typer.echo(
        f"Merged {target.name}: {result.same} kept, {result.new} new, "
        f"{result.carried_over} carried over, {result.obsolete} obsolete, "
        f"{result.dropped} dropped."
    )


@app.command()
def convert(
    ctx: typer.Context,
    src: Path = typer.Argument(...),
    dst: Path = typer.Argument(...),
) -> None:
    state = _require_state(ctx)
    try:
        catalog = convert_path(src, dst, locations=state.config.locations)
    except (OSError, ValueError) as exc:
        _exit_with_error(f"Convert failed: {exc}")
    typer.echo(f"Converted {catalog.message_count} messages to {dst}.")


@app.command("format")
def format_catalog(
    ctx: typer.Context,
    paths: Optional[list[Path]] = typer.Argument(None),
    locations: Optional[str] = typer.Option(None, "--locations"),
) -> None:
    state = _require_state(ctx)
    mode = _check_location_mode(locations or state.config.locations)
    for path in _resolve_paths(state, paths):
        try:
            locked = snapshot.locked_read_file(path)
            catalog = _with_source_language(parse_ts_bytes(locked.bytes), state.config)
            version = state.config.ts_version
            rendered = render_ts_bytes(catalog, locations=mode, version=version)
            if tshash.sha256_hex_bytes(rendered) == locked.sha256:
                typer.echo(f"Already formatted {path.name}.")
                continue
            save_ts(
                catalog,
                path,
                locations=mode,
                version=version,
                expected_sha256=locked.sha256,
            )
        except portalocker.exceptions.LockException:
            _exit_with_error(f"{path} is locked by another process.")
        except (OSError, TsFormatError, CatalogChangedError) as exc:
            _exit_with_error(str(exc))
        typer.echo(f"Formatted {path.name}.")
