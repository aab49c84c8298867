"""Command-line interface for techlist."""

import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape

from . import __version__
from .config import Config
from .core.errors import ConfigurationError, TechlistError
from .core.loader import read_lines
from .core.reporting import build_summary_table, write_statements
from .pipeline import generate
from .utils.logging_setup import get_logger, log_operation, setup_logging

logger = get_logger(__name__)

err_console = Console(stderr=True)


def load_config(config_path: Optional[Path]) -> Config:
    """Load the explicit config file, or search from the working directory."""
    if config_path:
        config = Config.from_file(config_path)
    else:
        config = Config.find_and_load(Path.cwd())
    config.apply_environment_overrides()
    return config


@click.command(name="techlist")
@click.argument("input_file", type=click.Path(dir_okay=False, path_type=Path))
@click.argument("output_file", required=False, type=click.Path(dir_okay=False, path_type=Path))
@click.option(
    "--limit",
    "-l",
    type=int,
    default=None,
    help="Maximum positional mismatch distance for similar names (default: 2)"
)
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Path to configuration file"
)
@click.option(
    "--strip-whitespace",
    is_flag=True,
    help="Trim surrounding whitespace from each line before deduplicating"
)
@click.option(
    "--log-dir",
    type=click.Path(file_okay=False, path_type=Path),
    help="Also write a rotating log file to this directory"
)
@click.option("--quiet", "-q", is_flag=True, help="Do not echo statements to stdout")
@click.option("--summary", is_flag=True, help="Show a table of names flagged for review")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.version_option(__version__, prog_name="techlist")
def main(input_file, output_file, limit, config_path, strip_whitespace, log_dir, quiet, summary,
         verbose):
    """Generate SQL inserts for the technology names in INPUT_FILE.

    Names are deduplicated case-insensitively; duplicates and near-duplicate
    spellings get a review comment. Statements are written to OUTPUT_FILE
    (default: build/insert-technologies.sql) sorted by lowercase name.
    """
    try:
        config = load_config(config_path)

        # Command-line flags override file and environment values
        if output_file:
            config.set("output.path", str(output_file))
        if limit is not None:
            config.set("similarity.limit", limit)
        if strip_whitespace:
            config.set("input.strip_whitespace", True)
        if quiet:
            config.set("output.echo", False)
        if log_dir:
            config.set("logging.dir", str(log_dir))

        try:
            setup_logging(
                level="DEBUG" if verbose else config.get("logging.level", "WARNING"),
                log_dir=config.log_dir(),
                json_format=bool(config.get("logging.json", True)),
            )
        except (ValueError, OSError) as e:
            raise ConfigurationError(str(e)) from e
        log_operation(logger, "cli_main", input=str(input_file))

        similarity_limit = config.similarity_limit()
        lines = read_lines(input_file, encoding=config.get("input.encoding", "utf-8"))
        result = generate(
            lines,
            limit=similarity_limit,
            strip_whitespace=bool(config.get("input.strip_whitespace")),
        )

        for diagnostic in result.diagnostics:
            click.echo(diagnostic, err=True)

        destination = write_statements(result.statements, config.output_path())
    except TechlistError as e:
        logger.debug(f"Run failed: {e}")
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        sys.exit(e.exit_code)

    if config.get("output.echo", True):
        for statement in result.statements:
            click.echo(statement)

    if summary:
        if result.registry.flagged():
            err_console.print(build_summary_table(result.registry))
        err_console.print(
            f"{len(result.registry)} technologies, "
            f"{len(result.registry.duplicated())} with multiple occurrences, "
            f"{len(result.pairs)} similar pairs -> {escape(str(destination))}"
        )


if __name__ == "__main__":
    main()
