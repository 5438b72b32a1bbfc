"""Report runner.

Runs the registered queries in report order against one store snapshot
and one reference date, then renders, exports or returns the results.
"""

import logging
import time
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path
from typing import Any

import polars as pl

from delivery_analytics.config import Settings, settings as default_settings
from delivery_analytics.data.store import DataStore
from delivery_analytics.queries.definitions import ALL_QUERIES, QueryDefinition, get_query

logger = logging.getLogger(__name__)


@dataclass
class ReportResult:
    """Output of one report query."""

    definition: QueryDefinition
    frame: pl.DataFrame
    elapsed_ms: float = 0.0

    @property
    def name(self) -> str:
        return self.definition.name

    @property
    def label(self) -> str:
        return self.definition.label


class ReportRunner:
    """Runs report queries over a store snapshot."""

    def __init__(
        self,
        store: DataStore,
        now: date | datetime | None = None,
        settings: Settings | None = None,
    ):
        """Initialize the runner.

        Args:
            store: The data snapshot every query reads.
            now: Reference time for relative windows. Defaults to
                settings.reference_date, then today.
            settings: Supplies query parameters. Defaults to the module settings.
        """
        self.store = store
        self.settings = settings or default_settings
        self.now = now or self.settings.reference_date or date.today()

    def parameters_for(self, definition: QueryDefinition) -> dict[str, Any]:
        return {
            keyword: getattr(self.settings, attribute)
            for keyword, attribute in definition.parameters
        }

    def run_query(self, key: str | int) -> ReportResult:
        """Run a single query by name or number."""
        definition = get_query(key)
        kwargs = self.parameters_for(definition)

        started = time.perf_counter()
        frame = definition(self.store, self.now, **kwargs)
        elapsed_ms = (time.perf_counter() - started) * 1000

        logger.debug("%s: %d rows in %.1f ms", definition.name, frame.height, elapsed_ms)
        return ReportResult(definition=definition, frame=frame, elapsed_ms=elapsed_ms)

    def run_all(self, keys: list[str | int] | None = None) -> list[ReportResult]:
        """Run the given queries (all by default), in report order."""
        if keys:
            selected = {definition.name: definition for definition in map(get_query, keys)}
            definitions = sorted(selected.values(), key=lambda definition: definition.number)
        else:
            definitions = ALL_QUERIES

        logger.info("Running %d reports as of %s", len(definitions), self.now)
        return [self.run_query(definition.name) for definition in definitions]


def render(results: list[ReportResult]) -> str:
    """Render results as labelled text tables, one per report."""
    sections = []
    with pl.Config(tbl_rows=-1, tbl_hide_dataframe_shape=True, tbl_hide_column_data_types=True):
        for result in results:
            sections.append(f"{result.label}\n{result.frame}")
    return "\n\n".join(sections)


def export_csv(results: list[ReportResult], output_dir: Path | str) -> list[Path]:
    """Write one CSV per report (q01_active_customers.csv, ...)."""
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    paths = []
    for result in results:
        path = output_dir / f"q{result.definition.number:02d}_{result.name}.csv"
        result.frame.write_csv(path)
        paths.append(path)
    return paths


def to_records(results: list[ReportResult]) -> dict[str, list[dict[str, Any]]]:
    """Structured output keyed by query name."""
    return {result.name: result.frame.to_dicts() for result in results}


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the business reports."""
    import argparse
    import sys

    from delivery_analytics.data.loader import load_store

    parser = argparse.ArgumentParser(
        description="Run the food-delivery business reports"
    )
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=None,
        help="Directory with customers.csv, restaurants.csv, riders.csv, deliveries.csv, orders.csv",
    )
    parser.add_argument(
        "--db",
        type=Path,
        default=None,
        help="SQLite database with the five tables (overrides --data-dir)",
    )
    parser.add_argument(
        "--as-of",
        type=date.fromisoformat,
        default=None,
        help="Reference date YYYY-MM-DD (default: today)",
    )
    parser.add_argument(
        "--query",
        action="append",
        default=None,
        help="Run only this query (name or number); repeatable",
    )
    parser.add_argument(
        "--export-dir",
        type=Path,
        default=None,
        help="Also write one CSV per report to this directory (default: DELIVERY_ANALYTICS_EXPORT_DIR)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log progress",
    )

    args = parser.parse_args(argv)

    for key in args.query or []:
        try:
            get_query(key)
        except KeyError:
            parser.error(f"unknown query: {key}")

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    overrides = {}
    if args.data_dir is not None:
        overrides["data_dir"] = args.data_dir
    if args.db is not None:
        overrides["sqlite_db_path"] = args.db
    if args.as_of is not None:
        overrides["reference_date"] = args.as_of
    if args.export_dir is not None:
        overrides["export_dir"] = args.export_dir
    run_settings = default_settings.model_copy(update=overrides)

    try:
        store = load_store(run_settings)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}")
        sys.exit(1)

    runner = ReportRunner(store, settings=run_settings)
    results = runner.run_all(args.query)

    print(render(results))

    if run_settings.export_dir is not None:
        paths = export_csv(results, run_settings.export_dir)
        print(f"\nExported {len(paths)} report(s) to {run_settings.export_dir}")


if __name__ == "__main__":
    main()
