import logging
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn

from slackgen.codegen.codegen import Codegen
from slackgen.config import DocumentConfig, get_config
from slackgen.exceptions import ModuleGenerationError, SlackgenError

console = Console()
app = typer.Typer(
    name='slackgen',
    help='Generate typed Python bindings from Slack Web API method schemas',
    no_args_is_help=True,
)


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format='%(message)s',
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


@app.command()
def generate(
    config: Annotated[
        str | None,
        typer.Option(
            '--config', '-c', help='Path to configuration file (YAML or JSON)'
        ),
    ] = None,
    verbose: Annotated[
        bool, typer.Option('--verbose', '-v', help='Log every generated method and type')
    ] = False,
) -> None:
    """Generate Python bindings from configuration.

    If no config file is specified, will look for slackgen.yaml in the
    current directory or [tool.slackgen] in pyproject.toml.

    Examples:
        slackgen generate
        slackgen generate --config my-config.yaml
        slackgen generate -c config.json -v
    """
    _setup_logging(verbose)

    try:
        codegen_config = get_config(config)

        for document_config in codegen_config.documents:
            with Progress(
                SpinnerColumn(),
                TextColumn('[progress.description]{task.description}'),
                console=console,
            ) as progress:
                task = progress.add_task(
                    f'Generating code for {document_config.source} in {document_config.output}...',
                    total=None,
                )

                written = Codegen(document_config).generate()

                progress.update(
                    task, description=f'Code generation completed for {document_config.source}!'
                )
            console.print('[dim]Generated files:[/dim]')
            for path in written:
                console.print(f'  - {escape(str(path))}')

    except ModuleGenerationError as e:
        _print_method_errors(e)
        raise typer.Exit(1)
    except SlackgenError as e:
        console.print(f'[red]Error:[/red] {escape(e.message)}')
        raise typer.Exit(1)


@app.command()
def check(
    source: Annotated[
        str, typer.Argument(help='Module document, method directory or URL to check')
    ],
) -> None:
    """Generate bindings in memory and report every schema error."""
    _setup_logging(False)

    codegen = Codegen(DocumentConfig(source=source, output='.'))
    try:
        modules = codegen.load()
    except SlackgenError as e:
        console.print(f'[red]Error:[/red] {escape(e.message)}')
        raise typer.Exit(1)

    failed = False
    for module in modules:
        try:
            codegen.emitter.emit(module)
        except ModuleGenerationError as e:
            _print_method_errors(e)
            failed = True
        else:
            console.print(f'[green]ok[/green] {module.name} ({len(module.methods)} methods)')

    if failed:
        raise typer.Exit(1)


def _print_method_errors(error: ModuleGenerationError) -> None:
    console.print(f'[red]Error:[/red] module {error.module_name} has schema errors')
    for method_error in error.errors:
        console.print(f'  - {escape(method_error.message)}')


@app.command()
def version() -> None:
    """Show the version of slackgen."""
    from slackgen import __version__

    console.print(f'slackgen version: {__version__}')


if __name__ == '__main__':
    app()
