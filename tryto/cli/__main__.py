import asyncio
import shlex
import sys
from typing import Any, Callable, Dict, List, Optional, Sequence

import click
from colorama import Fore, Style, init
from tabulate import tabulate

from tryto.core import tryto
from tryto.errors import ConfigError
from tryto.options import Options, load_options, resolve_options

RESET = Style.RESET_ALL


class CommandFailed(Exception):
    """A command exited with a non-zero status."""

    def __init__(self, argv: Sequence[str], returncode: int) -> None:
        self.argv = list(argv)
        self.returncode = returncode
        super().__init__(f"`{shlex.join(self.argv)}` exited with status {returncode}")


def command_operation(argv: Sequence[str]) -> Callable[[], Any]:
    """Wrap ``argv`` as an operation that fails on a non-zero exit status."""

    async def run_command() -> int:
        proc = await asyncio.create_subprocess_exec(*argv)
        try:
            returncode = await proc.wait()
        except asyncio.CancelledError:
            proc.kill()
            raise
        if returncode != 0:
            raise CommandFailed(argv, returncode)
        return returncode

    return run_command


def _echo_error(error: Any) -> None:
    errors = error if isinstance(error, list) else [error]
    for err in errors:
        click.echo(f"{Fore.RED}ERROR!{RESET} {err}", err=True)


def _load(config_path: Optional[str]) -> Options:
    try:
        return load_options(config_path)
    except ConfigError as e:
        click.echo(f"{Fore.RED}ERROR!{RESET} {e}", err=True)
        sys.exit(2)


@click.group()
def cli():
    init(autoreset=True)


@cli.command(context_settings=dict(ignore_unknown_options=True, allow_interspersed_args=False))
@click.option("--retry/--no-retry", default=None, help="Retry the command when it fails.")
@click.option("--retries", type=click.IntRange(min=0), default=None, help="Extra attempts; implies --retry.")
@click.option("--retry-delay", type=click.FloatRange(min=0), default=None, help="Seconds to wait between attempts.")
@click.option("--jitter", type=click.FloatRange(min=0), default=None, help="Random seconds added to the delay.")
@click.option("--timeout", "timeout_after", type=click.FloatRange(min=0, min_open=True), default=None, help="Seconds before an attempt is abandoned.")
@click.option("--fallback", "fallbacks", multiple=True, help="Command tried when the main one gave up; repeatable.")
@click.option("--config", "config_path", type=click.Path(dir_okay=False), default=None, help="pyproject.toml holding [tool.tryto].")
@click.argument("command", nargs=-1, required=True, type=click.UNPROCESSED)
def run(
    retry: Optional[bool],
    retries: Optional[int],
    retry_delay: Optional[float],
    jitter: Optional[float],
    timeout_after: Optional[float],
    fallbacks: Sequence[str],
    config_path: Optional[str],
    command: Sequence[str],
) -> None:
    """Run COMMAND with retry, timeout and fallback commands."""
    overrides: Dict[str, Any] = {}
    if retries is not None:
        overrides["retries"] = retries
        overrides["retry"] = True
    if retry is not None:
        overrides["retry"] = retry
    if retry_delay is not None:
        overrides["retry_delay"] = retry_delay
    if jitter is not None:
        overrides["jitter"] = jitter
    if timeout_after is not None:
        overrides["timeout"] = True
        overrides["timeout_after"] = timeout_after

    fallback_ops: List[Callable[[], Any]] = [command_operation(shlex.split(cmd)) for cmd in fallbacks]
    if fallback_ops:
        overrides["fallback"] = fallback_ops

    options = resolve_options(
        _load(config_path),
        on_retry=lambda attempt: click.echo(f"{Fore.YELLOW}retry {attempt}{RESET}", err=True),
        on_timeout=lambda: click.echo(f"{Fore.YELLOW}timed out{RESET}", err=True),
        on_error=_echo_error,
        **overrides,
    )

    result = asyncio.run(tryto(command_operation(list(command)), options))
    sys.exit(0 if result is not None else 1)


@cli.command()
@click.option("--config", "config_path", type=click.Path(dir_okay=False), default=None, help="pyproject.toml holding [tool.tryto].")
def config(config_path: Optional[str]) -> None:
    """Show the options a call starts from."""
    options = _load(config_path)

    bright = Style.BRIGHT
    headers = [Fore.GREEN + bright + "Option" + RESET, Fore.GREEN + bright + "Value" + RESET]
    table_data = [[Fore.CYAN + name + RESET, value] for name, value in options.project_settings().items()]
    click.echo(tabulate(table_data, headers=headers, tablefmt="grid"))


if __name__ == "__main__":
    cli()
