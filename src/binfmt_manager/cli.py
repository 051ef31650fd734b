"""CLI entry point for binfmt-manager."""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

import typer
from pydantic import ValidationError

from binfmt_manager.commands import BinfmtManager
from binfmt_manager.config import FailurePolicy, ManagerConfig
from binfmt_manager.errors import BinfmtError
from binfmt_manager.lister import render_report
from binfmt_manager.result import BatchReport
from binfmt_manager.store import EntryStore, ProcfsEntryStore

PROG_NAME = "binfmt-manager"

USAGE = f"""\
Usage: {PROG_NAME} command [args,]

Manage binfmt_misc entries

COMMANDS:
	list			list binfmts enabled in kernel
	register <binfmt|file>	register binfmt with the kernel
	unregister <binfmt>	unregister given binfmt with the kernel
	unregister-all		unregister all binfmts with the kernel
	enable <binfmt>		enable given binfmt with the kernel
	disable <binfmt>	disable given binfmt with the kernel
	reload			reload all configured binfmts
	help			show this help text"""

COMMANDS = frozenset(
    {"list", "register", "unregister", "unregister-all", "enable", "disable", "reload"}
)

# Global options that consume the following argument.
_VALUE_OPTIONS = frozenset({"--config", "-c", "--root", "--config-dir"})

app = typer.Typer(
    name=PROG_NAME,
    help="Manage binfmt_misc entries.",
    no_args_is_help=False,
    add_completion=False,
)


def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
        force=True,
    )


@dataclass
class CliState:
    """Settings resolved by the global callback, shared with subcommands."""

    config: ManagerConfig


def build_store(config: ManagerConfig) -> EntryStore:
    return ProcfsEntryStore(root=config.binfmt_root, kernel_module=config.kernel_module)


def _manager(ctx: typer.Context, keep_going: bool = False) -> BinfmtManager:
    config = ctx.ensure_object(CliState).config
    policy = FailurePolicy.CONTINUE if keep_going else config.failure_policy
    return BinfmtManager(
        build_store(config),
        config_dir=config.config_dir,
        failure_policy=policy,
    )


@contextmanager
def _fatal_errors() -> Iterator[None]:
    """Turn manager errors into a one-line message and exit status 1."""
    try:
        yield
    except BinfmtError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(e.exit_code)
    except OSError as e:
        typer.echo(f"{e.filename or PROG_NAME}: {e.strerror or e}", err=True)
        raise typer.Exit(1)


def _report_batch(report: BatchReport) -> None:
    for failure in report.failures:
        typer.echo(f"{failure.action} {failure.target}: {failure.error}", err=True)
    if not report.ok:
        typer.echo(
            f"{len(report.failures)} of {len(report.results)} operations failed",
            err=True,
        )
        raise typer.Exit(1)


@app.callback()
def _global_options(
    ctx: typer.Context,
    config_file: str | None = typer.Option(
        None, "--config", "-c", help="Config file path (JSON)."
    ),
    root: str | None = typer.Option(
        None, "--root", help="binfmt_misc mount point."
    ),
    config_dir: str | None = typer.Option(
        None, "--config-dir", help="Directory of binfmt definition files."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug logging."
    ),
) -> None:
    """Manage binfmt_misc entries."""
    try:
        config = ManagerConfig.load(config_file)
    except ValidationError as e:
        error = e.errors()[0]
        field = ".".join(str(part) for part in error["loc"]) or "config"
        typer.echo(f"invalid configuration: {field}: {error['msg']}", err=True)
        raise typer.Exit(1)
    except (OSError, ValueError) as e:
        typer.echo(f"{config_file}: cannot load configuration: {e}", err=True)
        raise typer.Exit(1)
    if root:
        config.binfmt_root = root
    if config_dir:
        config.config_dir = config_dir
    setup_logging(verbose or config.debug)
    ctx.obj = CliState(config=config)


@app.command("list")
def list_entries(ctx: typer.Context) -> None:
    """List binfmts enabled in kernel."""
    config = ctx.ensure_object(CliState).config
    with _fatal_errors():
        report = render_report(build_store(config))
    if report:
        typer.echo(report)


@app.command()
def register(
    ctx: typer.Context,
    item: str | None = typer.Argument(
        None, help="Definition name in the config directory, or a file path."
    ),
) -> None:
    """Register binfmt with the kernel."""
    with _fatal_errors():
        _manager(ctx).register(item)


@app.command()
def unregister(
    ctx: typer.Context,
    name: str | None = typer.Argument(None, help="Registered binfmt name."),
) -> None:
    """Unregister given binfmt with the kernel."""
    with _fatal_errors():
        _manager(ctx).unregister(name)


@app.command("unregister-all")
def unregister_all(
    ctx: typer.Context,
    keep_going: bool = typer.Option(
        False, "--keep-going", "-k", help="Continue past failing entries."
    ),
) -> None:
    """Unregister all binfmts with the kernel."""
    with _fatal_errors():
        report = _manager(ctx, keep_going).unregister_all()
    _report_batch(report)


@app.command()
def enable(
    ctx: typer.Context,
    name: str | None = typer.Argument(None, help="Registered binfmt name."),
) -> None:
    """Enable given binfmt with the kernel."""
    with _fatal_errors():
        _manager(ctx).enable(name)


@app.command()
def disable(
    ctx: typer.Context,
    name: str | None = typer.Argument(None, help="Registered binfmt name."),
) -> None:
    """Disable given binfmt with the kernel."""
    with _fatal_errors():
        _manager(ctx).disable(name)


@app.command()
def reload(
    ctx: typer.Context,
    keep_going: bool = typer.Option(
        False, "--keep-going", "-k", help="Continue past failing definitions."
    ),
) -> None:
    """Reload all configured binfmts."""
    with _fatal_errors():
        report = _manager(ctx, keep_going).reload()
    _report_batch(report)


@app.command("help")
def show_help() -> None:
    """Show this help text."""
    typer.echo(USAGE)


def _command_of(args: list[str]) -> str | None:
    """First positional argument, skipping global options and their values."""
    skip = False
    for arg in args:
        if skip:
            skip = False
            continue
        if arg in _VALUE_OPTIONS:
            skip = True
            continue
        if arg.startswith("-"):
            continue
        return arg
    return None


def main(argv: list[str] | None = None) -> None:
    args = sys.argv[1:] if argv is None else list(argv)
    command = _command_of(args)
    # No command, "help" or anything unknown prints the usage text and succeeds.
    if command not in COMMANDS and not (command is None and "--help" in args):
        typer.echo(USAGE)
        raise SystemExit(0)
    app(args=args, prog_name=PROG_NAME)


if __name__ == "__main__":
    main()
