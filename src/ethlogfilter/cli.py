import asyncio
import sys
from collections.abc import Callable, Sequence
from typing import Any

import click
from rich.console import Console
from rich.markup import escape

from ethlogfilter.core.config import FIELDS, Config, FieldSpec, normalize_hex, parse_block_number, resolve, split_hex_values
from ethlogfilter.core.errors import EthLogFilterError
from ethlogfilter.core.use_cases.filter_logs import describe_filter
from ethlogfilter.orchestration.orchestrator import run_filter_logs
from ethlogfilter.storage.config_file import default_config_path, load
from ethlogfilter.storage.output import emit

PROG_NAME = "ethlogfilter"

err_console = Console(stderr=True)


class BlockNumber(click.ParamType):
    """Unsigned 64-bit block number, decimal or 0x-hex."""

    name = "block"

    def convert(self, value: Any, param: click.Parameter | None, ctx: click.Context | None) -> int:
        try:
            return parse_block_number(value)
        except ValueError as e:
            self.fail(str(e), param, ctx)


BLOCK_NUMBER = BlockNumber()


class GreedyOption(click.Option):
    """A `multiple=True` option that also takes every following token up to the next flag.

    `-a A B -a C` yields (A, B, C); each value goes through the normal
    append action, so repeated flags keep working.
    """

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        kwargs.setdefault("multiple", True)
        super().__init__(*args, **kwargs)

    def add_to_parser(self, parser: Any, ctx: click.Context) -> None:
        super().add_to_parser(parser, ctx)
        for name in self.opts:
            opt = parser._long_opt.get(name) or parser._short_opt.get(name)
            if opt is None:
                continue
            append = opt.process

            def process(value: Any, state: Any, _append: Any = append, _prefixes: Any = opt.prefixes) -> None:
                _append(value, state)
                while state.rargs and state.rargs[0][:1] not in _prefixes:
                    _append(state.rargs.pop(0), state)

            opt.process = process
            break


def _hex_list_callback(size: int) -> Callable[[click.Context, click.Parameter, tuple[str, ...]], list[str]]:
    def callback(ctx: click.Context, param: click.Parameter, value: tuple[str, ...]) -> list[str]:
        try:
            return [normalize_hex(v, size) for v in split_hex_values(value)]
        except ValueError as e:
            raise click.BadParameter(str(e), ctx=ctx, param=param) from e

    return callback


def _option_for(spec: FieldSpec) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Build the click option declared by one schema entry."""
    if spec.kind == "flag":
        return click.option(*spec.flags, spec.name, is_flag=True, default=False, help=spec.help)
    if spec.kind == "hex_list":
        return click.option(
            *spec.flags,
            spec.name,
            cls=GreedyOption,
            metavar=f"{spec.metavar}...",
            callback=_hex_list_callback(spec.hex_size),
            help=spec.help,
        )
    if spec.kind == "block":
        return click.option(*spec.flags, spec.name, type=BLOCK_NUMBER, default=0, metavar=spec.metavar, help=spec.help)
    return click.option(*spec.flags, spec.name, type=str, default="", metavar=spec.metavar, help=spec.help)


def config_options(f: Callable[..., Any]) -> Callable[..., Any]:
    """Attach one option per schema field, in schema order."""
    for spec in reversed(FIELDS):
        f = _option_for(spec)(f)
    return f


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@config_options
def cli(**params: Any) -> None:
    """Filter EVM event logs from a node and print them as a JSON array."""
    run(Config.model_validate(params))


def parse(argv: Sequence[str]) -> Config:
    """Parse argv into a Config; flags not given stay at their zero value.

    Raises click.UsageError (or a subclass) on malformed arguments.
    """
    with cli.make_context(PROG_NAME, list(argv)) as ctx:
        return Config.model_validate(ctx.params)


def run(cli_cfg: Config) -> None:
    """Resolve the effective config, query the node and emit the result."""
    try:
        config_path = cli_cfg.config_file_path or default_config_path()
        cfg = resolve(load(config_path), cli_cfg)

        if cfg.verbose:
            for line in describe_filter(cfg):
                click.echo(line)

        result = asyncio.run(run_filter_logs(cfg))
    except EthLogFilterError as e:
        raise click.ClickException(str(e)) from e

    warning = emit(result.payload, out=sys.stdout, output_file=cfg.output_file)
    if warning is not None:
        err_console.print(f"[yellow]warning[/]: {escape(str(warning))}")

    if cfg.verbose:
        err_console.print(f"[bold]done[/]: kept {len(result.logs)} of {result.fetched} logs")


def main() -> None:
    cli(prog_name=PROG_NAME)
