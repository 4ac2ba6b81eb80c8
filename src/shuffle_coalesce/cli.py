# src/shuffle_coalesce/cli.py
"""shuffle-coalesce Command Line Interface.

Diagnostic front end: runs the coalescing planner over a statistics file
and shows the split points a scheduler would receive.
"""

import json
from pathlib import Path
from typing import Any

import typer
from pydantic import ValidationError

from shuffle_coalesce import __version__
from shuffle_coalesce.contracts import (
    CoalescePlan,
    InvariantViolation,
    PartitionRange,
    StatisticsFormatError,
)
from shuffle_coalesce.core.config import (
    CoalesceSettings,
    ShuffleCoalesceSettings,
    load_settings,
)
from shuffle_coalesce.core.logging import configure_logging
from shuffle_coalesce.core.statistics_io import load_statistics
from shuffle_coalesce.engine.planner import CoalescePlanner

app = typer.Typer(
    name="shuffle-coalesce",
    help="shuffle-coalesce: merge small shuffle partitions into target-sized ones.",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"shuffle-coalesce version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """shuffle-coalesce: merge small shuffle partitions into target-sized ones."""
    pass


def _load_config(settings: str | None) -> ShuffleCoalesceSettings:
    """Load settings from file, or defaults when no file is given.

    Exits with status 1 on a missing file or invalid values.
    """
    if settings is None:
        return ShuffleCoalesceSettings()

    try:
        return load_settings(Path(settings))
    except FileNotFoundError:
        typer.echo(f"Error: Settings file not found: {settings}", err=True)
        raise typer.Exit(1) from None
    except ValidationError as e:
        _echo_validation_errors(e)
        raise typer.Exit(1) from None


def _echo_validation_errors(error: ValidationError) -> None:
    typer.echo("Configuration errors:", err=True)
    for item in error.errors():
        loc = ".".join(str(x) for x in item["loc"])
        typer.echo(f"  - {loc}: {item['msg']}", err=True)


def _plan_to_dict(plan: CoalescePlan) -> dict[str, Any]:
    return {
        "split_points": plan.split_points,
        "first_index": plan.partition_range.first_index,
        "last_index": plan.partition_range.last_index,
        "advisory_target_size": plan.advisory_target_size,
        "target_size": plan.target_size,
        "partitions": [
            {
                "start": spec.start_reducer_index,
                "end": spec.end_reducer_index,
                "data_size": spec.data_size,
            }
            for spec in plan.specs
        ],
    }


@app.command()
def plan(
    input_path: str = typer.Option(
        ...,
        "--input",
        "-i",
        help="Path to map output statistics (YAML or JSON).",
    ),
    settings: str | None = typer.Option(
        None,
        "--settings",
        "-s",
        help="Path to settings YAML file.",
    ),
    first: int | None = typer.Option(
        None,
        "--first",
        help="First partition index to coalesce (inclusive, default 0).",
    ),
    last: int | None = typer.Option(
        None,
        "--last",
        help="Partition index to stop at (exclusive, default all partitions).",
    ),
    target: str | None = typer.Option(
        None,
        "--target",
        "-t",
        help="Advisory target size, e.g. 64MB (overrides settings).",
    ),
    min_partitions: int | None = typer.Option(
        None,
        "--min-partitions",
        "-m",
        help="Minimum number of coalesced partitions (overrides settings).",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output as JSON.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show log output.",
    ),
) -> None:
    """Compute coalesced partitions for a set of shuffle statistics."""
    config = _load_config(settings)
    configure_logging(
        json_output=config.logging.json_output,
        level=config.logging.level if verbose else "WARNING",
    )

    overrides: dict[str, Any] = {}
    if target is not None:
        overrides["advisory_partition_size_bytes"] = target
    if min_partitions is not None:
        overrides["min_partition_num"] = min_partitions
    try:
        coalesce_settings = CoalesceSettings(
            **{**config.coalesce.model_dump(), **overrides}
        )
    except ValidationError as e:
        _echo_validation_errors(e)
        raise typer.Exit(1) from None

    try:
        statistics = load_statistics(Path(input_path))
    except FileNotFoundError:
        typer.echo(f"Error: Statistics file not found: {input_path}", err=True)
        raise typer.Exit(1) from None
    except StatisticsFormatError as e:
        typer.echo(f"Statistics error: {e}", err=True)
        raise typer.Exit(1) from None

    partition_range = None
    if first is not None or last is not None:
        partition_range = PartitionRange(
            first if first is not None else 0,
            last if last is not None else statistics[0].num_partitions,
        )

    try:
        result = CoalescePlanner(coalesce_settings).plan(statistics, partition_range)
    except InvariantViolation as e:
        typer.echo(f"Inconsistent shuffles: {e}", err=True)
        raise typer.Exit(1) from None
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None

    if json_output:
        typer.echo(json.dumps(_plan_to_dict(result), indent=2))
        return

    typer.echo(
        f"Coalesced {len(result.partition_range)} partitions into {result.num_partitions}"
    )
    typer.echo(
        f"  Target size: {result.target_size} bytes "
        f"(advisory {result.advisory_target_size})"
    )
    typer.echo(f"  Split points: {result.split_points}")
    for spec in result.specs:
        typer.echo(
            f"  [{spec.start_reducer_index}, {spec.end_reducer_index}): "
            f"{spec.data_size} bytes"
        )


@app.command()
def validate(
    settings: str = typer.Option(
        ...,
        "--settings",
        "-s",
        help="Path to settings YAML file.",
    ),
) -> None:
    """Validate a settings file without planning."""
    config = _load_config(settings)

    min_partition_num = config.coalesce.min_partition_num
    typer.echo(f"Configuration valid: {Path(settings).name}")
    typer.echo(f"  Coalescing: {'enabled' if config.coalesce.enabled else 'disabled'}")
    typer.echo(f"  Advisory size: {config.coalesce.advisory_partition_size_bytes} bytes")
    typer.echo(
        f"  Min partitions: {min_partition_num if min_partition_num is not None else 'default (1)'}"
    )


if __name__ == "__main__":
    app()
