#!/usr/bin/env python3
"""
Rootless Setup CLI - Command-line interface
Click-based CLI to install, uninstall and repair developer tools without root
"""

import sys
from dataclasses import dataclass

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from rootless import __version__
from rootless.config import ConfigManager, Environment, RootlessConfig
from rootless.core.lifecycle import Lifecycle, create_lifecycle
from rootless.core.log import setup_logging
from rootless.core.report import OperationReport
from rootless.tools import build_registry, get_descriptor, tool_names

console = Console()

MENU_CHOICES = {
    '1': 'install',
    '2': 'uninstall',
    '3': 'repair',
}


@dataclass
class AppContext:
    """State shared by every command of one invocation"""
    env: Environment
    config: RootlessConfig

    def lifecycle(self, tool: str) -> Lifecycle:
        return create_lifecycle(tool, self.env, self.config)


def _run(app: AppContext, tool: str, operation: str) -> None:
    """Run one lifecycle operation, render its report and exit non-zero on failure"""
    lifecycle = app.lifecycle(tool)
    console.print(f"\n[cyan]{operation.capitalize()} {tool}...[/cyan]")
    report: OperationReport = getattr(lifecycle, operation)()
    report.render(console)
    if not report.ok:
        sys.exit(1)


tool_argument = click.argument('tool', type=click.Choice(tool_names()))


@click.group(invoke_without_command=True)
@click.option('--version', is_flag=True, help='Show version and exit')
@click.option('--debug', is_flag=True, help='Show detailed log output')
@click.pass_context
def main(ctx, version, debug):
    """
    Rootless Setup - Developer tools in your home directory

    Installs runtimes, version managers, editors and database CLIs without
    root, and keeps ~/.bashrc and ~/.zshrc in sync with them.

    Examples:
        rootless menu go          # Choose install/uninstall/repair
        rootless install uv       # Install uv and configure PATH
        rootless repair pyenv     # Reinstall pyenv from scratch
        rootless status direnv    # Show what is configured
    """
    if version:
        click.echo(f"Rootless Setup v{__version__}")
        ctx.exit(0)

    setup_logging(debug)

    # Environment overrides are read once, here
    env = Environment.from_os()
    config = ConfigManager.load_config(ConfigManager.find_config(env))
    ctx.obj = AppContext(env=env, config=config)

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@main.command()
@tool_argument
@click.pass_obj
def menu(app, tool):
    """
    Choose an operation interactively.

    Empty input selects install; anything other than 1, 2 or 3 is an error.
    """
    console.print("Choose an option:")
    console.print("1. install (default)")
    console.print("2. uninstall")
    console.print("3. repair")
    choice = click.prompt("Enter selection", default='1', show_default=True)
    choice = choice.strip() or '1'

    operation = MENU_CHOICES.get(choice)
    if operation is None:
        console.print(f"[red]Invalid choice: {escape(choice)}. Exiting.[/red]")
        sys.exit(1)

    _run(app, tool, operation)


@main.command()
@tool_argument
@click.pass_obj
def install(app, tool):
    """Install a tool and add its shell configuration"""
    _run(app, tool, 'install')


@main.command()
@tool_argument
@click.pass_obj
def uninstall(app, tool):
    """Remove a tool and its shell configuration"""
    _run(app, tool, 'uninstall')


@main.command()
@tool_argument
@click.pass_obj
def repair(app, tool):
    """Uninstall, then install a tool again"""
    _run(app, tool, 'repair')


@main.command()
@click.pass_obj
def tools(app):
    """List the tools rootless can provision"""
    # Building the registry also proves no two tools share a marker
    registry = build_registry(app.env, app.config)

    table = Table(title="Available tools")
    table.add_column("Tool", style="cyan")
    table.add_column("Title")
    table.add_column("Install root")
    table.add_column("Markers")
    for name in tool_names():
        descriptor = get_descriptor(name, app.env, app.config)
        markers = sorted({b.marker for b in registry.blocks_for(name)})
        table.add_row(
            name,
            escape(descriptor.title),
            escape(str(descriptor.install_root)),
            "\n".join(escape(m) for m in markers),
        )
    console.print(table)


@main.command()
@tool_argument
@click.pass_obj
def status(app, tool):
    """Show whether a tool is installed and which profile blocks exist"""
    state = app.lifecycle(tool).status()
    installed = "[green]installed[/green]" if state['installed'] else "[yellow]not installed[/yellow]"
    console.print(f"{tool}: {installed}")

    for path, markers in state['blocks'].items():
        if not path.exists():
            console.print(f"  [dim]{escape(str(path))} (missing, skipped)[/dim]")
            continue
        for marker, present in markers:
            mark = "[green]✓[/green]" if present else "[red]✗[/red]"
            console.print(f"  {mark} {escape(str(path))}: {escape(marker)}")


@main.command()
@click.option('--init', 'write_default', is_flag=True, help='Write the default config file')
@click.pass_obj
def config(app, write_default):
    """Show the effective configuration"""
    target = ConfigManager.find_config(app.env) or (
        app.env.config_dir / 'rootless' / ConfigManager.DEFAULT_CONFIG_NAME
    )

    if write_default:
        if target.exists():
            console.print(f"[yellow]{escape(str(target))} already exists[/yellow]")
            sys.exit(1)
        if not ConfigManager.save_config(RootlessConfig(), target):
            sys.exit(1)
        console.print(f"[green]Created {escape(str(target))}[/green]")
        return

    console.print(f"Config file: {escape(str(target))}{'' if target.exists() else ' (not found, using defaults)'}")
    console.print(f"Install base: {escape(str(app.env.install_base))}")
    console.print(f"Bin dir: {escape(str(app.env.bin_dir))}")
    console.print(f"Config dir: {escape(str(app.env.config_dir))}")
    console.print(f"HTTP timeout: {app.config.http_timeout}s")
    console.print("Profile files:")
    for profile in app.config.resolve_profiles(app.env):
        note = '' if profile.exists() else ' (missing, skipped)'
        console.print(f"  {escape(str(profile))}{note}")
    if app.config.versions:
        console.print("Pinned versions:")
        for name, pinned in sorted(app.config.versions.items()):
            console.print(f"  {name} = {escape(pinned)}")


if __name__ == '__main__':
    main()
