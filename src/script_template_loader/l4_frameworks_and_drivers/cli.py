"""CLI entry point for script-template-loader."""

from __future__ import annotations

import sys

import click

from script_template_loader import __version__


def _load_config(ctx: click.Context):
    from script_template_loader.l3_interface_adapters.gateways.paths import (  # noqa: PLC0415 -- deferred: platformdirs not resolved on --help
        LOG_PATH,
    )
    from script_template_loader.l4_frameworks_and_drivers.config import (  # noqa: PLC0415 -- deferred: not needed for --help
        build_app_config,
    )
    from script_template_loader.l4_frameworks_and_drivers.logging_setup import (  # noqa: PLC0415 -- deferred: not needed for --help
        setup_logging,
    )

    try:
        raw = _config_loader().load_raw(ctx.obj['config_path'])
        config = build_app_config(raw)
    except (FileNotFoundError, ValueError) as e:
        click.echo(f'Error: {e}', err=True)
        sys.exit(1)
    setup_logging(config.logging, LOG_PATH)
    return config


def _make_container(config, **kwargs):
    from script_template_loader.l4_frameworks_and_drivers.container import (  # noqa: PLC0415 -- deferred: not needed for --help
        DependencyContainer,
    )

    return DependencyContainer(config, **kwargs)


def _config_loader():
    from script_template_loader.l4_frameworks_and_drivers.container import (  # noqa: PLC0415 -- deferred: not needed for --help
        DependencyContainer,
    )

    return DependencyContainer.config_loader()


@click.group()
@click.option(
    '-c',
    '--config',
    'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False),
    help='Path to YAML config file.',
)
@click.version_option(version=__version__)
@click.pass_context
def cli(ctx, config_path):
    """stl -- render script templates from a template directory."""
    ctx.ensure_object(dict)
    ctx.obj['config_path'] = config_path


@cli.command('list')
@click.pass_context
def list_templates(ctx):
    """Show discovered templates grouped by submenu."""
    from rich.console import Console  # noqa: PLC0415 -- deferred: rich only needed for table output
    from rich.markup import escape  # noqa: PLC0415 -- deferred: rich only needed for table output
    from rich.table import Table  # noqa: PLC0415 -- deferred: rich only needed for table output

    config = _load_config(ctx)
    container = _make_container(config)
    scan = container.registry.discover()
    console = Console()

    if not scan.descriptors:
        console.print(f'No templates found in {escape(config.templates.directory)}')
    else:
        table = Table(title=f'Templates in {escape(config.templates.directory)}')
        table.add_column('Submenu')
        table.add_column('Caption')
        table.add_column('Shortcut')
        table.add_column('Template')
        groups: dict[str, list] = {}
        for descriptor in scan.commands:
            groups.setdefault(descriptor.submenu, []).append(descriptor)
        for submenu, descriptors in groups.items():
            for descriptor in descriptors:
                table.add_row(escape(submenu), escape(descriptor.caption), descriptor.shortcut or '-', descriptor.name)
        console.print(table)
        if scan.header is not None:
            console.print(f'Header: {scan.header.name}')

    for skipped in scan.skipped:
        console.print(f'[yellow]Skipped {escape(skipped.name)}: {escape(skipped.reason)}[/yellow]')


@cli.command()
@click.pass_context
def check(ctx):
    """Load every template into a dry host and report problems."""
    config = _load_config(ctx)
    container = _make_container(config)
    container.registry.discover()
    report = container.registry.load_all()

    click.echo(f'Registered: {len(report.registered)}')
    for conflict in report.conflicts:
        click.echo(f"Conflict: {conflict.name} {conflict.kind} '{conflict.value}' already used by {conflict.owner}")
    for caption in report.failures:
        click.echo(f'Failed: {caption}')
    for skipped in report.skipped:
        click.echo(f'Skipped: {skipped.name} ({skipped.reason})')
    container.registry.unload_all()
    if not report.ok:
        sys.exit(1)


@cli.command()
@click.argument('name')
@click.option('--hook-name', default=None, help='Hook name to use instead of the one in the snapshot.')
@click.option(
    '--context',
    'snapshot_path',
    default=None,
    type=click.Path(dir_okay=False),
    help='Target snapshot YAML (defaults to the configured snapshot path).',
)
@click.option('-o', '--output', 'output', default=None, type=click.Path(dir_okay=False), help='Write to this file.')
@click.option('--clipboard', is_flag=True, default=False, help='Copy the result to the clipboard.')
@click.option('--replace', is_flag=True, default=False, help='Replace the target contents instead of appending.')
@click.pass_context
def render(ctx, name, hook_name, snapshot_path, output, clipboard, replace):
    """Render template NAME (template name or caption)."""
    from script_template_loader.l1_entities.errors import TemplateError  # noqa: PLC0415 -- deferred: not needed for --help
    from script_template_loader.l1_entities.render_mode import RenderMode  # noqa: PLC0415 -- deferred: not needed for --help
    from script_template_loader.l2_use_cases.render_template_use_case import (  # noqa: PLC0415 -- deferred: not needed for --help
        apply_rendered,
    )
    from script_template_loader.l3_interface_adapters.gateways.script_buffers import (  # noqa: PLC0415 -- deferred: pyperclip not loaded on --help
        ClipboardScriptBuffer,
        FileScriptBuffer,
    )

    if output and clipboard:
        click.echo('Error: --output and --clipboard are mutually exclusive', err=True)
        sys.exit(1)

    config = _load_config(ctx)
    container = _make_container(config, hook_name=hook_name, snapshot_path=snapshot_path)
    scan = container.registry.discover()
    descriptor = scan.find(name)
    if descriptor is None:
        click.echo(f'Error: Template not found: {name}', err=True)
        sys.exit(1)

    try:
        text = container.renderer.execute(descriptor)
    except (TemplateError, OSError) as e:
        click.echo(f'Error: {e}', err=True)
        sys.exit(1)

    mode = RenderMode.REPLACE if replace else RenderMode.APPEND
    if output:
        apply_rendered(FileScriptBuffer(output), text, mode)
        click.echo(f'Wrote {descriptor.name} to {output}', err=True)
    elif clipboard:
        apply_rendered(ClipboardScriptBuffer(), text, mode)
        click.echo(f'Copied {descriptor.name} to clipboard', err=True)
    else:
        click.echo(text, nl=False)


@cli.group('config')
def config_group():
    """Inspect or reset the configuration file."""


@config_group.command('show')
@click.pass_context
def config_show(ctx):
    """Print the effective configuration as YAML."""
    import yaml  # noqa: PLC0415 -- deferred: yaml stack not loaded on --help

    config = _load_config(ctx)
    click.echo(yaml.safe_dump(config.model_dump(), sort_keys=False, allow_unicode=True), nl=False)


@config_group.command('reset')
@click.confirmation_option(prompt='Overwrite the configuration file with defaults?')
@click.pass_context
def config_reset(ctx):
    """Write the default configuration to the config file."""
    from script_template_loader.l4_frameworks_and_drivers.config import (  # noqa: PLC0415 -- deferred: not needed for --help
        default_app_config,
    )

    try:
        path = _config_loader().save(default_app_config(), ctx.obj['config_path'])
    except OSError as e:
        click.echo(f'Error: {e}', err=True)
        sys.exit(1)
    click.echo(f'Configuration reset: {path}')
