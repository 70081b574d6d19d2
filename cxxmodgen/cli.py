from pathlib import Path
from typing import Annotated

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from cxxmodgen.codegen.codegen import Codegen, generate_all
from cxxmodgen.config import InternalLinkageMode, UnitConfig, get_config
from cxxmodgen.exceptions import CxxModGenError
from cxxmodgen.log import configure_logging

console = Console(soft_wrap=True)
app = typer.Typer(
    name='cxxmodgen',
    help='Generate C++20 module wrappers for existing headers',
    no_args_is_help=True,
)


def _print_files(paths) -> None:
    console.print('[dim]Generated files:[/dim]')
    for path in paths:
        console.print(f'  - {escape(str(path))}')


@app.command()
def generate(
    source: Annotated[
        Path, typer.Argument(help='The original header the records were taken from')
    ],
    records: Annotated[
        Path,
        typer.Option(
            '--records', '-r', help='Declaration records (JSON, JSON Lines or YAML)'
        ),
    ],
    name: Annotated[
        str | None,
        typer.Option('--name', help='Module name (default: base name of SOURCE)'),
    ] = None,
    output: Annotated[
        Path | None,
        typer.Option('--output', '-o', help='Output directory (default: cwd)'),
    ] = None,
    namespace: Annotated[
        str,
        typer.Option(
            '--namespace', help='Only export symbols whose qualified name contains this'
        ),
    ] = '',
    internal_header: Annotated[
        bool,
        typer.Option(
            '--internal-header/--skip-internal',
            help='Collect internal-linkage declarations into a header instead of skipping them',
        ),
    ] = False,
    verbose: Annotated[
        bool, typer.Option('--verbose', '-v', help='Log every routed declaration')
    ] = False,
) -> None:
    """Generate the module wrapper for a single source file.

    Examples:
        cxxmodgen generate include/a.h -r a.decls.jsonl
        cxxmodgen generate include/a.h -r a.json --name lib.a -o modules --namespace lib::
    """
    configure_logging(verbose)

    settings = {
        'source': source,
        'records': records,
        'module_name': name,
        'filter': namespace,
        'internal_linkage': (
            InternalLinkageMode.HEADER if internal_header else InternalLinkageMode.SKIP
        ),
    }
    if output is not None:
        settings['output_dir'] = output

    try:
        unit = UnitConfig(**settings)
        artifacts = Codegen(unit).generate()
    except (CxxModGenError, ValidationError) as e:
        console.print(f'[red]Error:[/red] {escape(str(e))}')
        raise typer.Exit(1)

    console.print(
        f'Successfully generated module [bold]{escape(artifacts.module_name)}[/bold]'
    )
    _print_files(artifacts.paths)


@app.command()
def run(
    config: Annotated[
        str | None,
        typer.Option(
            '--config', '-c', help='Path to configuration file (YAML or JSON)'
        ),
    ] = None,
    verbose: Annotated[
        bool, typer.Option('--verbose', '-v', help='Log every routed declaration')
    ] = False,
) -> None:
    """Generate module wrappers for every unit in a configuration file.

    If no config file is specified, looks for cxxmodgen.yaml, cxxmodgen.yml or
    a [tool.cxxmodgen] table in pyproject.toml in the current directory.

    Examples:
        cxxmodgen run
        cxxmodgen run --config modules.yaml
    """
    configure_logging(verbose)

    try:
        generator_config = get_config(config)
    except CxxModGenError as e:
        console.print(f'[red]Error:[/red] {escape(str(e))}')
        raise typer.Exit(1)

    failed = 0
    for result in generate_all(generator_config):
        if result.ok:
            console.print(
                f'Successfully generated module [bold]{escape(result.artifacts.module_name)}[/bold]'
            )
            _print_files(result.artifacts.paths)
        else:
            failed += 1
            console.print(
                f'[red]Error:[/red] {escape(str(result.unit.source))}: {escape(str(result.error))}'
            )

    if failed:
        console.print(f'[red]{failed} of {len(generator_config.units)} unit(s) failed[/red]')
        raise typer.Exit(1)


@app.command()
def version() -> None:
    """Show the version of cxxmodgen."""
    from cxxmodgen import __version__

    console.print(f'cxxmodgen version: {__version__}')


if __name__ == '__main__':
    app()
