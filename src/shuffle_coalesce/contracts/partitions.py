"""Partition index ranges and coalescing outcomes.

These types answer: "Which original shuffle partitions does each
downstream reduce task read?"

All ranges are half-open: start inclusive, end exclusive.
"""

from collections.abc import Iterator
from dataclasses import dataclass, field


@dataclass(frozen=True)
class PartitionRange:
    """Half-open range ``[first_index, last_index)`` of shuffle partition indices."""

    first_index: int
    last_index: int

    def validate_against(self, num_partitions: int) -> None:
        """Check the range fits inside a shuffle with ``num_partitions`` partitions.

        Raises:
            ValueError: If the range is reversed or falls outside ``[0, num_partitions]``
        """
        if not 0 <= self.first_index <= self.last_index <= num_partitions:
            raise ValueError(
                f"Partition range [{self.first_index}, {self.last_index}) is not "
                f"within [0, {num_partitions}]"
            )

    def __len__(self) -> int:
        return max(self.last_index - self.first_index, 0)

    def __iter__(self) -> Iterator[int]:
        return iter(range(self.first_index, self.last_index))


@dataclass(frozen=True)
class CoalescedPartitionSpec:
    """One coalesced partition, read by a single downstream task.

    Attributes:
        start_reducer_index: First original partition index (inclusive)
        end_reducer_index: Last original partition index (exclusive)
        data_size: Combined bytes across all shuffles, None if not computed
    """

    start_reducer_index: int
    end_reducer_index: int
    data_size: int | None = None

    @property
    def num_reducers(self) -> int:
        return self.end_reducer_index - self.start_reducer_index


@dataclass
class CoalescePlan:
    """Outcome of planning one coalescing round.

    Attributes:
        split_points: Start index of each coalesced partition, strictly increasing
        partition_range: Range of original indices that was coalesced
        advisory_target_size: Target size the caller asked for
        target_size: Target size the packing actually honored
        specs: Coalesced partitions rebuilt from the split points
    """

    split_points: list[int]
    partition_range: PartitionRange
    advisory_target_size: int
    target_size: int
    specs: list[CoalescedPartitionSpec] = field(default_factory=list)

    @property
    def num_partitions(self) -> int:
        """Number of downstream tasks the scheduler should launch."""
        return len(self.split_points)
