"""CLI adapter for ``lib_blog_config`` built on ``lib_cli_exit_tools``.

Purpose
-------
Expose the blog configuration service on the command line so operators can
point the tool at a Hugo blog, inspect the completed ``params.yml``, and apply
partial updates (with an automatic backup) without writing Python code.

Contents
--------
* :data:`CLICK_CONTEXT_SETTINGS` – shared Click settings ensuring ``-h`` works.
* :func:`cli` – root command wiring traceback handling and ``--blog-path``.
* :func:`cli_info` – prints distribution metadata for quick diagnostics.
* :func:`cli_path` group – ``show``/``set``/``clear`` the remembered blog path.
* :func:`cli_read_config` – prints the completed configuration as JSON.
* :func:`cli_update_config` – merges ``--json``/``--set`` updates into the file.
* :func:`cli_backups` – lists existing backups, newest first.
* :func:`main` – entry point used by ``console_scripts`` registration.

System Role
-----------
Outermost layer, standing in for the HTTP route layer: it invokes
:class:`lib_blog_config.core.ConfigService` and maps result status codes to
exit codes (``0`` success, ``1`` for 400-class failures, ``2`` for 500-class
failures). ``lib_cli_exit_tools`` centralises exception printing.
"""

from __future__ import annotations

import json
import sys
from importlib import metadata
from pathlib import Path
from typing import Any, Final, Optional, Sequence

import lib_cli_exit_tools
import rich_click as click
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .adapters.document.yaml_document import to_plain
from .adapters.settings.json_store import JsonSettingsStore
from .core import ConfigService, StaticBlogPath

CLICK_CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}
_TRACEBACK_SUMMARY_LIMIT: Final[int] = 500
_TRACEBACK_VERBOSE_LIMIT: Final[int] = 10_000
_DISTRIBUTION: Final[str] = "lib_blog_config"


def _resolve_version() -> str:
    """Return the installed package version, ``"0.0.0"`` when not installed."""

    try:
        return metadata.version(_DISTRIBUTION)
    except metadata.PackageNotFoundError:
        return "0.0.0"


def _exit_code(status_code: int) -> int:
    """Map a service status code onto a process exit code.

    Examples
    --------
    >>> [_exit_code(code) for code in (200, 400, 500)]
    [0, 1, 2]
    """

    if status_code < 400:
        return 0
    return 1 if status_code < 500 else 2


def _settings_store() -> JsonSettingsStore:
    return JsonSettingsStore()


def _service(ctx: click.Context) -> ConfigService:
    """Build the service, honouring a ``--blog-path`` given to the root command."""

    override = ctx.obj.get("blog_path") if ctx.obj else None
    if override is not None:
        return ConfigService(StaticBlogPath(str(override)))
    return ConfigService(_settings_store())


def _echo_json(payload: Any, indent: Optional[int] = 2) -> None:
    click.echo(json.dumps(payload, indent=indent, ensure_ascii=False, default=str))


@click.group(
    help="Read and update a Hugo blog's params.yml without losing comments",
    context_settings=CLICK_CONTEXT_SETTINGS,
    invoke_without_command=False,
)
@click.version_option(
    version=_resolve_version(),
    prog_name=_DISTRIBUTION,
    message="lib_blog_config version %(version)s",
)
@click.option(
    "--traceback/--no-traceback",
    is_flag=True,
    default=False,
    help="Show full Python traceback on errors",
)
@click.option(
    "--blog-path",
    type=click.Path(path_type=Path, file_okay=False, dir_okay=True, resolve_path=True),
    default=None,
    help="Blog root to use instead of the remembered one",
)
@click.pass_context
def cli(ctx: click.Context, traceback: bool, blog_path: Optional[Path]) -> None:
    """Root command configuring traceback handling for all subcommands.

    Side Effects
        Mutates ``lib_cli_exit_tools.config.traceback`` and
        ``lib_cli_exit_tools.config.traceback_force_color``.
    """

    ctx.ensure_object(dict)
    ctx.obj["traceback"] = traceback
    ctx.obj["blog_path"] = blog_path
    lib_cli_exit_tools.config.traceback = traceback
    lib_cli_exit_tools.config.traceback_force_color = traceback


@cli.command("info", context_settings=CLICK_CONTEXT_SETTINGS)
def cli_info() -> None:
    """Print basic distribution metadata so users can confirm installation."""

    try:
        meta = metadata.metadata(_DISTRIBUTION)
    except metadata.PackageNotFoundError:
        click.echo(f"{_DISTRIBUTION} (metadata unavailable)")
        return
    click.echo(f"Info for {meta.get('Name', _DISTRIBUTION)}:")
    click.echo(f"  Version         : {meta.get('Version', _resolve_version())}")
    click.echo(f"  Requires-Python : {meta.get('Requires-Python', '>=3.10')}")
    summary = meta.get("Summary")
    if summary:
        click.echo(f"  Summary         : {summary}")
    for entry in meta.get_all("Project-URL") or []:
        click.echo(f"  {entry}")


@cli.group("path", context_settings=CLICK_CONTEXT_SETTINGS)
def cli_path() -> None:
    """Show or change the remembered blog path."""


@cli_path.command("show", context_settings=CLICK_CONTEXT_SETTINGS)
def cli_path_show() -> None:
    """Print the remembered blog path and where it is stored."""

    store = _settings_store()
    _echo_json(
        {
            "blogPath": store.get_blog_path(),
            "lastUpdated": store.last_updated(),
            "settingsFile": str(store.settings_path),
        }
    )


@cli_path.command("set", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("blog_path", type=click.Path(path_type=Path))
@click.pass_context
def cli_path_set(ctx: click.Context, blog_path: Path) -> None:
    """Validate BLOG_PATH as a Hugo blog and remember it."""

    validation = _settings_store().set_blog_path(blog_path)
    if not validation.valid:
        click.echo(validation.message(str(blog_path)), err=True)
        ctx.exit(1)
    click.echo(str(blog_path.expanduser().resolve()))


@cli_path.command("clear", context_settings=CLICK_CONTEXT_SETTINGS)
def cli_path_clear() -> None:
    """Forget the remembered blog path."""

    _settings_store().clear_blog_path()
    click.echo("Blog path cleared")


@cli.command("read", context_settings=CLICK_CONTEXT_SETTINGS)
@click.option(
    "--indent",
    type=int,
    default=None,
    help="Pretty-print JSON output with the provided indent size",
)
@click.option(
    "--origins/--no-origins",
    default=False,
    help="Include whether each leaf came from the file or a default",
)
@click.pass_context
def cli_read_config(ctx: click.Context, indent: Optional[int], origins: bool) -> None:
    """Print the completed configuration (file values over defaults) as JSON."""

    result = _service(ctx).read_config()
    if not result.success or result.config is None:
        _echo_json(result.to_payload(), indent=indent)
        ctx.exit(_exit_code(result.status_code))
    if origins:
        payload = {"config": result.config.as_dict(), "origins": result.config.origins()}
        click.echo(json.dumps(payload, indent=indent, separators=(",", ":"), ensure_ascii=False, default=str))
        return
    click.echo(result.config.to_json(indent=indent))


@cli.command("update", context_settings=CLICK_CONTEXT_SETTINGS)
@click.option("--json", "raw_json", default=None, help="Partial configuration as a JSON object")
@click.option(
    "--set",
    "assignments",
    multiple=True,
    help="dotted.key=value pair (repeatable); the value is read as a YAML scalar",
)
@click.pass_context
def cli_update_config(ctx: click.Context, raw_json: Optional[str], assignments: Sequence[str]) -> None:
    """Back up params.yml, merge the update, and rewrite it preserving comments.

    Top-level groups merge one level deep: ``--set footer.since=2021`` keeps the
    other footer fields, while ``--set footer.icon.url=x`` replaces the whole
    ``footer.icon`` block.
    """

    if raw_json is None and not assignments:
        raise click.UsageError("Provide --json or at least one --set")
    updates: Any = _parse_json(raw_json) if raw_json is not None else {}
    if assignments and isinstance(updates, dict):
        for assignment in assignments:
            _assign(updates, *_split_assignment(assignment))
    result = _service(ctx).update_config(updates)
    _echo_json(result.to_payload())
    if not result.success:
        ctx.exit(_exit_code(result.status_code))


@cli.command("backups", context_settings=CLICK_CONTEXT_SETTINGS)
@click.pass_context
def cli_backups(ctx: click.Context) -> None:
    """List backups of params.yml, newest first."""

    service = _service(ctx)
    if service.params_path() is None:
        click.echo("Blog path not configured", err=True)
        ctx.exit(1)
    _echo_json([str(path) for path in service.list_backups()])


def _parse_json(raw: str) -> Any:
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise click.BadParameter(f"not valid JSON: {exc}", param_hint="--json") from exc


def _split_assignment(assignment: str) -> tuple[list[str], Any]:
    """Split ``a.b=value`` into ``(["a", "b"], parsed value)``.

    Examples
    --------
    >>> _split_assignment("footer.since=2021")
    (['footer', 'since'], 2021)
    >>> _split_assignment("animation.enable=false")
    (['animation', 'enable'], False)
    """

    key, separator, raw_value = assignment.partition("=")
    parts = [part for part in key.strip().split(".") if part]
    if not separator or not parts:
        raise click.BadParameter(f"expected dotted.key=value, got {assignment!r}", param_hint="--set")
    return parts, _parse_scalar(raw_value)


def _parse_scalar(raw: str) -> Any:
    if not raw.strip():
        return ""
    try:
        return to_plain(YAML(typ="safe", pure=True).load(raw))
    except YAMLError:
        return raw


def _assign(target: dict[str, Any], parts: list[str], value: Any) -> None:
    """Place *value* at the dotted *parts* path inside *target*.

    Examples
    --------
    >>> data = {}
    >>> _assign(data, ["author", "name"], "B")
    >>> data
    {'author': {'name': 'B'}}
    """

    cursor = target
    for part in parts[:-1]:
        child = cursor.get(part)
        if not isinstance(child, dict):
            child = cursor[part] = {}
        cursor = child
    cursor[parts[-1]] = value


def main(argv: Optional[Sequence[str]] = None, *, restore_traceback: bool = True) -> int:
    """Execute the CLI with shared exit handling and return the exit code."""

    previous_traceback = getattr(lib_cli_exit_tools.config, "traceback", False)
    previous_force_color = getattr(lib_cli_exit_tools.config, "traceback_force_color", False)
    try:
        try:
            return lib_cli_exit_tools.run_cli(
                cli,
                argv=list(argv) if argv is not None else None,
                prog_name=_DISTRIBUTION,
            )
        except BaseException as exc:  # noqa: BLE001 - funnel through shared printers
            lib_cli_exit_tools.print_exception_message(
                trace_back=lib_cli_exit_tools.config.traceback,
                length_limit=(
                    _TRACEBACK_VERBOSE_LIMIT if lib_cli_exit_tools.config.traceback else _TRACEBACK_SUMMARY_LIMIT
                ),
            )
            return lib_cli_exit_tools.get_system_exit_code(exc)
    finally:
        if restore_traceback:
            lib_cli_exit_tools.config.traceback = previous_traceback
            lib_cli_exit_tools.config.traceback_force_color = previous_force_color


if __name__ == "__main__":  # pragma: no cover - exercised via console entry point
    raise SystemExit(main(sys.argv[1:]))
