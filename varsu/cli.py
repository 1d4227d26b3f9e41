"""
CLI commands for varsu.

Provides the `varsu` command-line interface: running the language server
and inspecting how a stylesheet's custom properties resolve per theme.
"""

import asyncio
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import click
from rich.console import Console
from rich.markdown import Markdown
from rich.markup import escape
from rich.table import Table

from config.loader import ConfigurationError, ConfigurationLoader
from config.defaults import DEFAULT_SETTINGS
from core import __version__
from core.models.config import GlobalSettings, SchemaConfig, ThemeConfig
from core.parser.base import ParseError
from core.schema.css_schema import CssSchema, normalize_property_name
from core.schema.formatting import format_hover_markdown
from core.source.fetcher import RemoteSourceFetcher

console = Console()


@click.group()
@click.version_option(version=__version__, prog_name="varsu")
@click.option(
    '--log-level',
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR'], case_sensitive=False),
    default=None,
    help='Log level (default: VARSU_LOG_LEVEL or WARNING)'
)
@click.pass_context
def main(ctx: click.Context, log_level: Optional[str]):
    """
    varsu CLI.

    Completion and hover for CSS custom properties resolved across themes.
    """
    ctx.ensure_object(dict)
    ctx.obj['log_level'] = log_level.upper() if log_level else None


@main.command()
@click.pass_context
def serve(ctx: click.Context):
    """Run the language server over stdio."""
    from varsu.lsp_server.server import start

    settings = GlobalSettings()
    if ctx.obj.get('log_level'):
        settings.log_level = ctx.obj['log_level']
    start(settings)


def _parse_themes(values: Tuple[str, ...]) -> List[ThemeConfig]:
    themes: Dict[str, ThemeConfig] = {}
    for value in values:
        name, separator, selector = value.partition('=')
        if not separator or not name.strip() or not selector.strip():
            raise click.BadParameter(f"expected NAME=SELECTOR, got {value!r}", param_hint="--theme")
        if name.strip() in themes:
            raise click.BadParameter(f"duplicate theme name {name.strip()!r}", param_hint="--theme")
        themes[name.strip()] = ThemeConfig(name=name, selector=selector)
    return list(themes.values())


def _configure_cli_logging(ctx: click.Context) -> None:
    level = ctx.obj.get('log_level') or 'WARNING'
    logging.basicConfig(
        level=getattr(logging, level),
        format=DEFAULT_SETTINGS['logging']['format'],
        stream=sys.stderr
    )


def _load_schema(
    source: Optional[str],
    theme_values: Tuple[str, ...],
    from_file: bool,
    config_path: Optional[str]
) -> CssSchema:
    """Build and load a schema from a config file, a local file or a URL"""
    if config_path:
        config = ConfigurationLoader().load_file(config_path)
    else:
        if not source:
            raise click.UsageError("SOURCE is required unless --config is given")
        themes = _parse_themes(theme_values)
        if not themes:
            raise click.UsageError("At least one --theme NAME=SELECTOR is required")

        if from_file:
            path = Path(source)
            # Local files skip URL validation; the schema is loaded from text
            config = SchemaConfig.model_construct(source_url=path.resolve().as_uri(), themes=themes)
            schema = CssSchema(config)
            schema.load_css(path.read_text(encoding='utf-8'))
            return schema

        config = SchemaConfig(sourceUrl=source, themes=themes)

    settings = GlobalSettings()
    schema = CssSchema(config, fetcher=RemoteSourceFetcher(settings.fetch_config))
    if not asyncio.run(schema.load()):
        raise click.ClickException(f"Failed to load css schema from {config.source_url}")
    return schema


def _schema_options(command):
    command = click.option(
        '--config', 'config_path',
        type=click.Path(exists=True, dir_okay=False),
        help='JSON config with sourceUrl and themes (replaces SOURCE and --theme)'
    )(command)
    command = click.option(
        '--file', 'from_file',
        is_flag=True,
        help='Treat SOURCE as a local file path instead of a URL'
    )(command)
    command = click.option(
        '--theme', '-t', 'theme_values',
        multiple=True,
        metavar='NAME=SELECTOR',
        help='Theme name and the selector of its rule block (repeatable)'
    )(command)
    return command


@main.command()
@click.argument('source', required=False)
@_schema_options
@click.option('--prefix', '-p', default='', help='Only show properties starting with this name')
@click.pass_context
def inspect(
    ctx: click.Context,
    source: Optional[str],
    theme_values: Tuple[str, ...],
    from_file: bool,
    config_path: Optional[str],
    prefix: str
):
    """Show every custom property of SOURCE with raw and resolved values per theme."""
    _configure_cli_logging(ctx)
    try:
        schema = _load_schema(source, theme_values, from_file, config_path)
    except (ConfigurationError, ParseError, OSError, ValueError) as e:
        console.print(f"[red]❌ {escape(str(e))}[/red]")
        sys.exit(1)

    property_prefix = normalize_property_name(prefix)

    for theme_name in schema.theme_names:
        graph = schema.get_graph(theme_name)

        table = Table(title=f"Theme: {escape(theme_name)}")
        table.add_column("Property", style="cyan", no_wrap=True)
        table.add_column("Value", style="white")
        table.add_column("Resolved", style="green")
        table.add_column("Description", style="dim")

        for name in graph.names_with_prefix(property_prefix):
            node = graph.nodes[name]
            metadata = node.metadata
            label = f"[strike]{name}[/strike]" if metadata.deprecated else name
            resolved = node.resolved_value if node.is_substituted else ""
            table.add_row(label, escape(node.raw_value), escape(resolved), escape(metadata.description or ""))

        console.print(table)

        for cycle in graph.circular_dependencies:
            console.print(
                f"[yellow]⚠️  Circular dependency: var({cycle.target}) "
                f"left unresolved in {cycle.source}[/yellow]"
            )


@main.command()
@click.argument('name')
@click.argument('source', required=False)
@_schema_options
@click.option('--json', 'as_json', is_flag=True, help='Print the details as JSON')
@click.pass_context
def details(
    ctx: click.Context,
    name: str,
    source: Optional[str],
    theme_values: Tuple[str, ...],
    from_file: bool,
    config_path: Optional[str],
    as_json: bool
):
    """Show hover details for property NAME across the themes of SOURCE."""
    _configure_cli_logging(ctx)
    try:
        schema = _load_schema(source, theme_values, from_file, config_path)
    except (ConfigurationError, ParseError, OSError, ValueError) as e:
        console.print(f"[red]❌ {escape(str(e))}[/red]")
        sys.exit(1)

    variable = schema.get_variable_details(name)
    if variable is None:
        console.print(f"[red]❌ {normalize_property_name(name)} is not defined in any theme[/red]")
        sys.exit(1)

    if as_json:
        console.print_json(data=variable.to_dict())
    else:
        console.print(Markdown(format_hover_markdown(variable)))


if __name__ == "__main__":
    main()
