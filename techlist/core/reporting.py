"""SQL statement rendering and output writing."""

from pathlib import Path
from typing import Iterable, List, Union

from rich.table import Table
from rich import box

from .errors import OutputWriteError
from .records import TechnologyRecord
from .registry import TechnologyRegistry
from ..utils.logging_setup import get_logger

logger = get_logger(__name__)

INSERT_TEMPLATE = "insert into technology (name) values ('{name}');"
MULTIPLE_OCCURRENCES_COMMENT = " -- you should review this name, multiple occurrences were found"
SIMILAR_TECHNOLOGIES_COMMENT = " -- similar technologies found: "


class StatementFormatter:
    """Renders technology records as SQL insert statements.

    Names are inserted verbatim; quotes are not escaped.
    """

    def render(self, record: TechnologyRecord) -> str:
        """Render one record to a single-line insert statement with review comments."""
        statement = INSERT_TEMPLATE.format(name=record.original_name)
        if record.has_multiple_occurrences:
            statement += MULTIPLE_OCCURRENCES_COMMENT
        if record.similar_names:
            statement += SIMILAR_TECHNOLOGIES_COMMENT + ", ".join(sorted(record.similar_names))
        return statement

    def render_all(self, registry: TechnologyRegistry) -> List[str]:
        """Render every record in sorted-key order."""
        return [self.render(record) for record in registry.records()]


def render(record: TechnologyRecord) -> str:
    return StatementFormatter().render(record)


def write_statements(statements: Iterable[str], destination: Union[str, Path]) -> Path:
    """Write statements to ``destination``, one per line, replacing prior content.

    Missing parent directories are created.

    Raises:
        OutputWriteError: If the destination cannot be written
    """
    destination = Path(destination)
    count = 0
    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
        with open(destination, "w", encoding="utf-8") as f:
            for statement in statements:
                f.write(f"{statement}\n")
                count += 1
    except OSError as e:
        raise OutputWriteError(f"Cannot write output file {destination}: {e}") from e

    logger.info(f"Wrote {count} statements to {destination}")
    return destination


def build_summary_table(registry: TechnologyRegistry) -> Table:
    """Table of records flagged for manual review."""
    table = Table(title="Technologies to review", box=box.ROUNDED)
    table.add_column("Name", style="cyan")
    table.add_column("Occurrences", justify="right")
    table.add_column("Similar names", style="yellow")

    for record in registry.flagged():
        occurrences = str(record.occurrences)
        if record.has_multiple_occurrences:
            occurrences = f"[red]{occurrences}[/red]"
        table.add_row(
            record.original_name,
            occurrences,
            ", ".join(sorted(record.similar_names)) or "-",
        )
    return table
