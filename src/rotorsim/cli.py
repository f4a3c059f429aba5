import sys
from concurrent.futures import ThreadPoolExecutor
from contextlib import nullcontext
from typing import IO, Iterable, Iterator, List, Optional, Sequence, Tuple

import click
import structlog

from rotorsim.config import build_machine, parse_config
from rotorsim.errors import RotorSimError, UsageError
from rotorsim.log_config import configure_logging
from rotorsim.machine import Machine
from rotorsim.message import GROUP_SIZE, process_messages
from rotorsim.state_queue import SnapshotQueue
from rotorsim.state_snapshot import MachineSnapshot
from rotorsim.ui import ui_loop

log = structlog.get_logger()


class DefaultRunGroup(click.Group):
    """A group that treats an unknown first argument as the CONFIG path of `run`."""

    def resolve_command(self, ctx: click.Context, args: List[str]):
        if args and self.get_command(ctx, args[0]) is None:
            args = ["run", *args]
        return super().resolve_command(ctx, args)


@click.group(cls=DefaultRunGroup, invoke_without_command=True, no_args_is_help=False)
@click.option("--verbose", "-v", is_flag=True, help="Log stepping and conversion details to stderr.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool):
    """Rotor machine simulator. `rotorsim CONFIG [INPUT [OUTPUT]]` is short for `rotorsim run`."""
    configure_logging(verbose)
    if ctx.invoked_subcommand is None:
        fail(UsageError("Expected 1 to 3 paths (CONFIG [INPUT [OUTPUT]]), got 0"))


def split_paths(paths: Sequence[str], max_paths: int) -> Tuple[str, Optional[str], Optional[str]]:
    """Return (config, input, output) from 1 to MAX_PATHS positional paths."""
    if not 1 <= len(paths) <= max_paths:
        raise UsageError(f"Expected 1 to {max_paths} paths (CONFIG [INPUT [OUTPUT]]), got {len(paths)}")
    padded = list(paths) + [None] * (3 - len(paths))
    return padded[0], padded[1], padded[2]


def open_input(path: Optional[str]):
    if path is None:
        return nullcontext(click.get_text_stream("stdin"))
    try:
        return open(path, "r", encoding="utf-8")
    except OSError:
        raise UsageError(f"could not open {path}") from None


def open_output(path: Optional[str]):
    if path is None:
        return nullcontext(None)
    try:
        return open(path, "w", encoding="utf-8")
    except OSError:
        raise UsageError(f"could not open {path}") from None


def read_lines(source: IO[str], path: Optional[str]) -> Iterator[str]:
    """Yield the lines of SOURCE, reporting undecodable bytes as a UsageError."""
    try:
        yield from source
    except UnicodeDecodeError as e:
        raise UsageError(f"{path or 'stdin'} is not valid UTF-8 ({e.reason})") from e


def load_machine(config_path: str) -> Machine:
    with open_input(config_path) as f:
        config = parse_config("".join(read_lines(f, config_path)))
    log.info("machine loaded", config=config_path, slots=config.num_rotors, pawls=config.pawls)
    return build_machine(config)


def write_lines(sink: Optional[IO[str]], lines: Iterable[str]) -> None:
    """Write LINES to SINK, or to stdout when SINK is None."""
    for line in lines:
        click.echo(line, file=sink)


def fail(error: RotorSimError):
    """Report ERROR on one line of stderr and exit with status 1."""
    click.echo(f"Error: {error}", err=True)
    sys.exit(1)


def tracer(machine: Machine, lines: List[str], group_size: int, state_queue: SnapshotQueue[MachineSnapshot]) -> List[str]:
    """Convert LINES, publishing a snapshot after every keypress."""
    # Leaving the block closes the queue so the UI can exit
    with state_queue:
        return list(process_messages(machine, lines, group_size=group_size, on_convert=state_queue.publish))


@cli.command()
@click.argument("paths", nargs=-1, metavar="CONFIG [INPUT [OUTPUT]]")
@click.option("--group-size", "-g", default=GROUP_SIZE, show_default=True, type=click.IntRange(min=1),
              help="Symbols per output group.")
def run(paths: Tuple[str, ...], group_size: int):
    """Encrypt or decrypt the messages in INPUT with the machine described in CONFIG."""
    try:
        config_path, input_path, output_path = split_paths(paths, max_paths=3)
        machine = load_machine(config_path)
        with open_input(input_path) as source, open_output(output_path) as sink:
            write_lines(sink, process_messages(machine, read_lines(source, input_path), group_size=group_size))
    except RotorSimError as e:
        fail(e)


@cli.command()
@click.argument("paths", nargs=-1, metavar="CONFIG [INPUT]")
@click.option("--group-size", "-g", default=GROUP_SIZE, show_default=True, type=click.IntRange(min=1),
              help="Symbols per output group.")
@click.option("--fps", default=30, show_default=True, type=click.IntRange(min=1), help="Display refresh rate.")
def trace(paths: Tuple[str, ...], group_size: int, fps: int):
    """Show the rotor windows live while converting INPUT, then print the result."""
    try:
        config_path, input_path, _ = split_paths(paths, max_paths=2)
        machine = load_machine(config_path)
        with open_input(input_path) as source:
            lines = list(read_lines(source, input_path))

        state_queue: SnapshotQueue[MachineSnapshot] = SnapshotQueue()
        with ThreadPoolExecutor(max_workers=1) as executor:
            future = executor.submit(tracer, machine, lines, group_size, state_queue)

            try:
                ui_loop(state_queue, refresh_per_second=fps)
            except KeyboardInterrupt:
                state_queue.close()

            output = future.result()

        write_lines(None, output)
    except RotorSimError as e:
        fail(e)


if __name__ == "__main__":
    cli()
