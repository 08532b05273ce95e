"""Command line entry point for rosbridge-codegen using Cyclopts."""

import logging
import sys
from pathlib import Path
from typing import Annotated

from cyclopts import App, Parameter
from rich.console import Console
from rich.logging import RichHandler

from rosbridge_codegen.config import GeneratorConfig
from rosbridge_codegen.exceptions import CodegenError
from rosbridge_codegen.loader import load_schemas
from rosbridge_codegen.writer import Writer

logger = logging.getLogger(__name__)

console = Console()
error_console = Console(stderr=True)

app = App(
    name="rosbridge-codegen",
    help="Generate typed rosbridge client bindings from ROS message, service and action schemas.",
    help_format="rich",
)


def _configure_logging(*, verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=error_console, rich_tracebacks=True)],
        force=True,
    )


@app.command
def generate(
    schemas: Path,
    *,
    output: Annotated[Path, Parameter(name=["-o", "--output"])],
    prefix: Annotated[str, Parameter(name=["-p", "--prefix"])] = "",
    skip_existing: Annotated[bool, Parameter(name=["--skip-existing"])] = False,
    verbose: Annotated[bool, Parameter(name=["-v", "--verbose"])] = False,
) -> None:
    """Generate bindings for every schema in a JSON schema document.

    Parameters
    ----------
    schemas
        JSON file with the parsed message, service and action schemas.
    output
        Directory the generated modules are written to.
    prefix
        Dotted package prefix for the generated classes.
    skip_existing
        Keep classes that already exist in the output directory instead of regenerating them.
    verbose
        Enable debug logging.
    """
    _configure_logging(verbose=verbose)
    config = GeneratorConfig(package_prefix=prefix, skip_existing=skip_existing)

    try:
        writer = Writer(output, config)
        written = writer.write_all(load_schemas(schemas))
    except (CodegenError, OSError) as e:
        logger.error("Generation failed: %s", e)
        sys.exit(1)

    console.print(
        f"[green]Wrote {len(written)} module(s)[/green] to [bold]{output}[/bold]"
        + (f", skipped {len(writer.session.skipped)}" if writer.session.skipped else "")
    )


if __name__ == "__main__":
    app()
