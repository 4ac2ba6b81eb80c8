"""Loading map output statistics from YAML or JSON documents.

Document shape:
    shuffles:
      - shuffle_id: 0
        bytes_by_partition_id: [104857600, 20971520, ...]
      - bytes_by_partition_id: [...]   # shuffle_id defaults to list position

JSON is accepted as-is since it is a subset of YAML.
"""

from pathlib import Path
from typing import Any

import yaml

from shuffle_coalesce.contracts import MapOutputStatistics, StatisticsFormatError


def parse_statistics(document: Any) -> list[MapOutputStatistics]:
    """Convert a parsed statistics document into MapOutputStatistics.

    Raises:
        StatisticsFormatError: If the document does not match the expected shape
    """
    if not isinstance(document, dict) or "shuffles" not in document:
        raise StatisticsFormatError("Statistics document must be a mapping with a 'shuffles' list")

    shuffles = document["shuffles"]
    if not isinstance(shuffles, list) or not shuffles:
        raise StatisticsFormatError("'shuffles' must be a non-empty list")

    statistics = []
    for position, entry in enumerate(shuffles):
        if not isinstance(entry, dict):
            raise StatisticsFormatError(f"shuffles[{position}] must be a mapping")

        sizes = entry.get("bytes_by_partition_id")
        if not isinstance(sizes, list):
            raise StatisticsFormatError(
                f"shuffles[{position}].bytes_by_partition_id must be a list of byte sizes"
            )
        if not all(isinstance(s, int) and not isinstance(s, bool) for s in sizes):
            raise StatisticsFormatError(
                f"shuffles[{position}].bytes_by_partition_id must contain only integers"
            )

        shuffle_id = entry.get("shuffle_id", position)
        if not isinstance(shuffle_id, int) or isinstance(shuffle_id, bool):
            raise StatisticsFormatError(f"shuffles[{position}].shuffle_id must be an integer")

        try:
            statistics.append(MapOutputStatistics.from_sizes(shuffle_id, sizes))
        except ValueError as e:
            raise StatisticsFormatError(f"shuffles[{position}]: {e}") from e

    return statistics


def load_statistics(path: Path) -> list[MapOutputStatistics]:
    """Read map output statistics from a YAML or JSON file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        StatisticsFormatError: If the file is not valid YAML or has the wrong shape
    """
    if not path.exists():
        raise FileNotFoundError(f"Statistics file not found: {path}")

    try:
        document = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise StatisticsFormatError(f"Could not parse {path.name}: {e}") from e
    return parse_statistics(document)
