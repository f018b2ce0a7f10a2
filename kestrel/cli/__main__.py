"""Kestrel CLI - Main Entry Point.

Commands:
    check    - Scan a package, bootstrap it and print a summary
    tree     - Print the dependency tree
    graph    - Export the dependency graph as Graphviz DOT
    resolve  - Resolve one component and print it
"""

import logging
import sys
from typing import Optional

import click

from . import __version__, __cli_name__
from ..config import ConfigError
from ..di import DIError
from .utils.colors import (
    success, error, info, dim, bold, section, kv, table,
    _CHECK, _CROSS, _ARROW,
)

_config_option = click.option(
    '--config', '-c', 'config_path',
    type=click.Path(dir_okay=False),
    help='Configuration file (key=value lines)',
)


def _fail(message: str, exc: Exception) -> None:
    error(f"  {_CROSS} {message}: {exc}")
    sys.exit(1)


@click.group()
@click.version_option(version=__version__, prog_name=__cli_name__)
@click.option('--verbose', '-v', is_flag=True, help='Log container diagnostics')
@click.option('--quiet', '-q', is_flag=True, help='Minimal output')
@click.pass_context
def cli(ctx, verbose: bool, quiet: bool):
    """Inspect and exercise annotation-driven component packages.

    \b
    Quick start:
      kestrel check myapp
      kestrel resolve myapp english --config app.env
    """
    ctx.ensure_object(dict)
    ctx.obj['verbose'] = verbose
    ctx.obj['quiet'] = quiet

    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        )


@cli.command('check')
@click.argument('package')
@_config_option
@click.pass_context
def check(ctx, package: str, config_path: Optional[str]):
    """
    Bootstrap PACKAGE and summarize its components.

    Examples:
      kestrel check myapp
      kestrel check myapp --config app.env
    """
    from .commands.inspect import load_container, summarize

    try:
        container = load_container(package, config_path, verbose=ctx.obj['verbose'])
    except (DIError, ConfigError) as e:
        _fail("Bootstrap failed", e)

    summary = summarize(container)
    if ctx.obj['quiet']:
        click.echo(f"{summary['components']} components")
        return

    click.echo()
    section(f"Components in {package}")
    table(["Component", "Scope", "Qualifier", "Deps"], summary["rows"])
    click.echo()
    kv("Components", summary["components"])
    kv("Singletons", summary["singleton"])
    kv("Prototypes", summary["prototype"])
    kv("Qualifiers", ", ".join(summary["qualifiers"]) or "-")
    click.echo()
    success(f"  {_CHECK} Container bootstrapped, no cycles")


@cli.command('tree')
@click.argument('package')
@_config_option
@click.pass_context
def tree(ctx, package: str, config_path: Optional[str]):
    """
    Print the dependency tree of PACKAGE.

    Examples:
      kestrel tree myapp
    """
    from .commands.inspect import load_container, render_tree

    try:
        container = load_container(package, config_path, verbose=ctx.obj['verbose'])
    except (DIError, ConfigError) as e:
        _fail("Bootstrap failed", e)

    click.echo(render_tree(container))


@cli.command('graph')
@click.argument('package')
@_config_option
@click.option('--output', '-o', type=click.Path(dir_okay=False), help='Write DOT to file')
@click.pass_context
def graph(ctx, package: str, config_path: Optional[str], output: Optional[str]):
    """
    Export the dependency graph of PACKAGE as Graphviz DOT.

    Examples:
      kestrel graph myapp
      kestrel graph myapp -o deps.dot && dot -Tpng deps.dot -o deps.png
    """
    from .commands.inspect import load_container, write_dot

    try:
        container = load_container(package, config_path, verbose=ctx.obj['verbose'])
    except (DIError, ConfigError) as e:
        _fail("Bootstrap failed", e)

    dot = write_dot(container, output)
    if output:
        if not ctx.obj['quiet']:
            success(f"  {_CHECK} Wrote {output}")
    else:
        click.echo(dot)


@cli.command('resolve')
@click.argument('package')
@click.argument('target')
@_config_option
@click.pass_context
def resolve(ctx, package: str, target: str, config_path: Optional[str]):
    """
    Resolve TARGET from PACKAGE and print it.

    TARGET is a qualifier or a ``module:Class`` path.

    Examples:
      kestrel resolve myapp english
      kestrel resolve myapp myapp.services:GreetingClient
    """
    from .commands.inspect import load_container, resolve_target

    try:
        container = load_container(package, config_path, verbose=ctx.obj['verbose'])
        instance = resolve_target(container, target)
    except (DIError, ConfigError) as e:
        _fail(f"Cannot resolve {target}", e)

    if ctx.obj['quiet']:
        click.echo(repr(instance))
        return

    info(f"  {bold(target)} {_ARROW} {type(instance).__qualname__}")
    dim(f"  {instance!r}")


def main():
    """Entry point for `kestrel` command."""
    cli(obj={})


if __name__ == '__main__':
    main()
