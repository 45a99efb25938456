"""
VPN Client CLI
==============

Command-line interface for the simulated VPN connection.

Commands:
    vpn-client status                       - Show the current status (and uptime when UP)
    vpn-client up                           - Bring the connection up
    vpn-client down                         - Bring the connection down
    vpn-client history [options]            - List recorded status changes

History options:
    -f, --from DATE      Only events on or after DATE (YYYY-MM-DD, UTC)
    -t, --to DATE        Only events on or before DATE (YYYY-MM-DD, UTC)
    -s, --sort ORDER     asc or desc (default: order recorded)
    -S, --status NAME    Only events with this status
"""

import click
from rich.console import Console

from vpnclient import __version__
from vpnclient.config import load_config
from vpnclient.controller import ConnectionController, create_controller
from vpnclient.errors import VpnClientError
from vpnclient.history import format_event, query
from vpnclient.log import configure_logging
from vpnclient.state import create_event_log


console = Console(highlight=False)
err_console = Console(stderr=True, highlight=False)


def say(message: str) -> None:
    """Print a line of command output"""
    console.print(message, markup=False, soft_wrap=True)


class CommandRouter(click.Group):
    """
    Click group with the vpn-client conventions:
    - no arguments prints the usage and command list
    - an unknown command is reported, not treated as a usage error
    """

    def resolve_command(self, ctx: click.Context, args: list):
        cmd_name = args[0] if args else ""
        if self.get_command(ctx, cmd_name) is None:
            say(f"Unknown command: {cmd_name}")
            ctx.exit(0)
        return super().resolve_command(ctx, args)

    def print_command_list(self) -> None:
        say("Usage: vpn-client <command> [options]")
        say("Commands:")
        for name in self.commands:
            say(f"  {name}")


@click.group(cls=CommandRouter, invoke_without_command=True)
@click.option(
    "--config", "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Path to config.yaml (default: $VPN_CLIENT_CONFIG or ./config.yaml)"
)
@click.version_option(version=__version__, prog_name="vpn-client")
@click.pass_context
def main(ctx: click.Context, config_path: str):
    """vpn-client - Simulated VPN connection control"""
    if ctx.invoked_subcommand is None:
        ctx.command.print_command_list()
        return

    ctx.ensure_object(dict)
    if "config" not in ctx.obj:
        ctx.obj["config"] = load_config(config_path)
    config = ctx.obj["config"]

    log_config = config.get("logging", {})
    configure_logging(level=log_config.get("level"), format=log_config.get("format"))

    ctx.obj.setdefault("log", create_event_log(config))


def _controller(ctx: click.Context) -> ConnectionController:
    obj = ctx.obj
    return create_controller(
        obj["config"],
        obj["log"],
        outcomes=obj.get("outcomes"),
        clock=obj.get("clock"),
        notify=say,
    )


def _fail(ctx: click.Context, error: VpnClientError) -> None:
    err_console.print(f"Error: {error}", markup=False, soft_wrap=True)
    ctx.exit(1)


@main.command()
@click.pass_context
def status(ctx: click.Context):
    """Show the current status."""
    try:
        report = _controller(ctx).status()
    except VpnClientError as e:
        _fail(ctx, e)
        return

    if report is None:
        ctx.exit(1)


@main.command()
@click.pass_context
def up(ctx: click.Context):
    """Bring the connection up."""
    try:
        _controller(ctx).up()
    except VpnClientError as e:
        _fail(ctx, e)


@main.command()
@click.pass_context
def down(ctx: click.Context):
    """Bring the connection down."""
    try:
        _controller(ctx).down()
    except VpnClientError as e:
        _fail(ctx, e)


@main.command()
@click.option("--from", "-f", "date_from", default=None, help="From date (YYYY-MM-DD)")
@click.option("--to", "-t", "date_to", default=None, help="To date (YYYY-MM-DD)")
@click.option("--sort", "-s", default=None, help="Sort by timestamp: asc or desc")
@click.option("--status", "-S", "status_name", default=None, help="Filter by status")
@click.pass_context
def history(ctx: click.Context, date_from: str, date_to: str, sort: str, status_name: str):
    """List recorded status changes."""
    try:
        events = query(
            ctx.obj["log"].load(),
            date_from=date_from,
            date_to=date_to,
            sort=sort,
            status=status_name,
        )
    except VpnClientError as e:
        _fail(ctx, e)
        return

    if not events:
        say("No events found")
        return

    for event in events:
        say(format_event(event))


if __name__ == "__main__":
    main()
