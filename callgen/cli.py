import logging
from pathlib import Path
from typing import Annotated

import typer
import yaml
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from callgen import __version__
from callgen.catalog import load_catalog
from callgen.codegen.codegen import Codegen
from callgen.codegen.grouping import plan_catalog
from callgen.config import DEFAULT_FILENAMES, create_default_config, get_config
from callgen.exceptions import CallgenError

console = Console()
app = typer.Typer(
    name='callgen',
    help='Generate typed request builders from an endpoint catalog',
    no_args_is_help=True,
)


@app.callback()
def main(
    verbose: Annotated[
        bool, typer.Option('--verbose', '-v', help='Enable debug logging')
    ] = False,
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format='%(message)s',
        handlers=[RichHandler(console=console, show_path=False)],
    )


@app.command()
def generate(
    config: Annotated[
        str | None,
        typer.Option(
            '--config', '-c', help='Path to configuration file (YAML or JSON)'
        ),
    ] = None,
) -> None:
    """Generate client packages from configuration.

    If no config file is specified, callgen.yaml in the current directory
    or [tool.callgen] in pyproject.toml is used.

    Examples:
        callgen generate
        callgen generate --config my-config.yaml
    """
    try:
        codegen_config = get_config(config)

        for document_config in codegen_config.documents:
            with Progress(
                SpinnerColumn(),
                TextColumn('[progress.description]{task.description}'),
                console=console,
            ) as progress:
                task = progress.add_task(
                    f'Generating code for {document_config.source} '
                    f'in {document_config.output}...',
                    total=None,
                )

                files = Codegen(document_config).generate()

                progress.update(
                    task,
                    description=(
                        f'Code generation completed for {document_config.source}!'
                    ),
                )

            console.print('[dim]Generated files:[/dim]')
            for file in files:
                console.print(f'  - {file}')

        console.print('[green]Successfully generated code[/green]')
    except CallgenError as e:
        console.print(f'[red]Error:[/red] {e}')
        raise typer.Exit(1)


@app.command()
def validate(
    catalog: Annotated[str, typer.Argument(help='Path or URL of the endpoint catalog')],
) -> None:
    """Load and plan a catalog without writing anything."""
    try:
        plan = plan_catalog(load_catalog(catalog))
    except CallgenError as e:
        console.print(f'[red]Invalid catalog:[/red] {e}')
        raise typer.Exit(1)

    table = Table(title=f'Endpoints in {catalog}')
    table.add_column('Unit')
    table.add_column('Groups')
    table.add_column('Endpoints', justify='right')
    for unit, plans in plan.units.items():
        groups = ', '.join(sorted({p.group for p in plans}))
        table.add_row(unit, groups, str(len(plans)))
    console.print(table)
    console.print(
        f'[green]Catalog is valid:[/green] {len(plan.endpoints)} endpoints, '
        f'{len(plan.services)} services'
    )


@app.command()
def init(
    source: Annotated[str, typer.Option(help='Path or URL of the catalog')],
    output: Annotated[str, typer.Option(help='Output directory')],
    path: Annotated[
        str, typer.Option('--path', '-p', help='Where to write the configuration')
    ] = DEFAULT_FILENAMES[0],
) -> None:
    """Write a minimal configuration file."""
    target = Path(path)
    if target.exists():
        console.print(f'[red]Error:[/red] {target} already exists')
        raise typer.Exit(1)
    target.write_text(yaml.safe_dump(create_default_config(source, output)))
    console.print(f'[green]Wrote {target}[/green]')


@app.command()
def version() -> None:
    """Show the version of callgen."""
    console.print(f'callgen version: {__version__}')


if __name__ == '__main__':
    app()
