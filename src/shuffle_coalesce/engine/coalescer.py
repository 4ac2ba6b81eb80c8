"""PartitionCoalescer: packs contiguous shuffle partitions into target-sized groups.

Partitions with the same index across all participating shuffles are
read together by one downstream task, so their sizes add up. A single
greedy pass over the index range starts a new coalesced partition
whenever adding the next index would exceed the target size.

Example with two shuffles and a 128 MiB target:
    shuffle 1: [100, 20, 100, 10, 30] MiB
    shuffle 2: [ 10, 10,  70,  5,  5] MiB
    combined:  [110, 30, 170, 15, 35] MiB
    split points [0, 1, 2, 3] -> [0, 1), [1, 2), [2, 3), [3, 5)

A partition larger than the target is never split; it simply forms
a coalesced partition on its own.
"""

from collections.abc import Sequence

from shuffle_coalesce.contracts import (
    CoalescedPartitionSpec,
    InvariantViolation,
    MapOutputStatistics,
    PartitionRange,
)
from shuffle_coalesce.core.logging import get_logger

logger = get_logger(__name__)

# Lower bound on the target size so that empty input still yields one partition.
MIN_TARGET_SIZE = 16


def _check_partition_counts(statistics: Sequence[MapOutputStatistics]) -> int:
    """Return the shared partition count, or raise if shuffles disagree.

    No statistics at all means there is no single shared count either.
    """
    distinct_counts = list(dict.fromkeys(s.num_partitions for s in statistics))
    if len(distinct_counts) != 1:
        raise InvariantViolation(distinct_counts)
    return distinct_counts[0]


def compute_target_size(
    statistics: Sequence[MapOutputStatistics],
    advisory_target_size: int,
    min_num_partitions: int = 1,
) -> int:
    """Pick the size the packing loop will honor.

    The advisory size is lowered when honoring it would produce fewer
    than ``min_num_partitions`` coalesced partitions. Sizes are summed
    over every partition of every shuffle, not just the requested range.

    Args:
        statistics: Map output statistics of every participating shuffle
        advisory_target_size: Bytes the caller would like per partition
        min_num_partitions: Lower bound on the number of coalesced partitions

    Returns:
        Effective target size in bytes, never below MIN_TARGET_SIZE
        unless the advisory size itself is smaller
    """
    if advisory_target_size <= 0:
        raise ValueError(f"advisory_target_size must be positive, got {advisory_target_size}")
    if min_num_partitions <= 0:
        raise ValueError(f"min_num_partitions must be positive, got {min_num_partitions}")

    total_size = sum(s.total_bytes for s in statistics)
    # Integer ceiling division
    max_target_size = max(-(-total_size // min_num_partitions), MIN_TARGET_SIZE)
    return min(max_target_size, advisory_target_size)


def combined_partition_sizes(statistics: Sequence[MapOutputStatistics]) -> list[int]:
    """Sum the size of each partition index across all shuffles."""
    num_partitions = _check_partition_counts(statistics)
    return [
        sum(s.bytes_by_partition_id[i] for s in statistics)
        for i in range(num_partitions)
    ]


def coalesce_partitions(
    statistics: Sequence[MapOutputStatistics],
    first_index: int,
    last_index: int,
    advisory_target_size: int,
    min_num_partitions: int = 1,
) -> list[int]:
    """Coalesce partitions ``[first_index, last_index)`` from one or more shuffles.

    Args:
        statistics: Map output statistics, all with the same partition count
        first_index: First partition index to coalesce (inclusive)
        last_index: Partition index to stop at (exclusive)
        advisory_target_size: Soft upper bound in bytes per coalesced partition
        min_num_partitions: Lower bound on the number of coalesced partitions

    Returns:
        Split points: start index of each coalesced partition, strictly
        increasing, first element ``first_index``. [0, 2, 3] with
        last_index 5 means [0, 2), [2, 3), [3, 5).

    Raises:
        InvariantViolation: If the shuffles report different partition counts,
            or no statistics are given
        ValueError: If the range does not fit the shuffles or sizes are not positive
    """
    split_points, _ = coalesce_partitions_with_target(
        statistics, first_index, last_index, advisory_target_size, min_num_partitions
    )
    return split_points


def coalesce_partitions_with_target(
    statistics: Sequence[MapOutputStatistics],
    first_index: int,
    last_index: int,
    advisory_target_size: int,
    min_num_partitions: int = 1,
) -> tuple[list[int], int]:
    """Same as coalesce_partitions, also returning the target size it honored."""
    num_partitions = _check_partition_counts(statistics)
    PartitionRange(first_index, last_index).validate_against(num_partitions)

    target_size = compute_target_size(statistics, advisory_target_size, min_num_partitions)
    logger.info(
        "Coalescing target size chosen",
        advisory_target_size=advisory_target_size,
        target_size=target_size,
    )

    split_points = [first_index]
    coalesced_size = 0
    for i in range(first_index, last_index):
        size_at_i = sum(s.bytes_by_partition_id[i] for s in statistics)

        # The first index always opens the first group, however large it is
        if i > first_index and coalesced_size + size_at_i > target_size:
            split_points.append(i)
            coalesced_size = size_at_i
        else:
            coalesced_size += size_at_i

    return split_points, target_size


def split_points_to_specs(
    split_points: Sequence[int],
    last_index: int,
    sizes: Sequence[int] | None = None,
) -> list[CoalescedPartitionSpec]:
    """Rebuild coalesced partition boundaries from split points.

    Consecutive split points form one partition each; the final one
    runs up to ``last_index``.

    Args:
        split_points: Output of coalesce_partitions
        last_index: Exclusive end of the coalesced range
        sizes: Combined size per original partition index, to fill data_size
    """
    ends = [*split_points[1:], last_index]
    specs = []
    for start, end in zip(split_points, ends, strict=True):
        data_size = sum(sizes[start:end]) if sizes is not None else None
        specs.append(CoalescedPartitionSpec(start, end, data_size))
    return specs
