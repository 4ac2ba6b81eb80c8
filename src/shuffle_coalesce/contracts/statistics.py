"""Per-shuffle map output statistics.

These are produced by the shuffle write phase and handed to the coalescer
read-only. One instance per participating shuffle.
"""

from collections.abc import Iterable
from dataclasses import dataclass


@dataclass(frozen=True)
class MapOutputStatistics:
    """Byte sizes of every output partition of one shuffle.

    Attributes:
        shuffle_id: Identifier of the shuffle stage that wrote the partitions
        bytes_by_partition_id: Size in bytes of partition i at position i
    """

    shuffle_id: int
    bytes_by_partition_id: tuple[int, ...]

    def __post_init__(self) -> None:
        if self.shuffle_id < 0:
            raise ValueError(f"shuffle_id must be non-negative, got {self.shuffle_id}")
        for index, size in enumerate(self.bytes_by_partition_id):
            if size < 0:
                raise ValueError(
                    f"Shuffle {self.shuffle_id}: partition {index} has negative size {size}"
                )

    @classmethod
    def from_sizes(cls, shuffle_id: int, sizes: Iterable[int]) -> "MapOutputStatistics":
        """Build statistics from any iterable of integer partition sizes.

        Raises:
            TypeError: If a size is not an integer
        """
        values = tuple(sizes)
        for index, size in enumerate(values):
            if not isinstance(size, int) or isinstance(size, bool):
                raise TypeError(
                    f"Shuffle {shuffle_id}: partition {index} size must be an integer, "
                    f"got {size!r}"
                )
        return cls(shuffle_id=shuffle_id, bytes_by_partition_id=values)

    @property
    def num_partitions(self) -> int:
        """Total number of output partitions written by this shuffle."""
        return len(self.bytes_by_partition_id)

    @property
    def total_bytes(self) -> int:
        return sum(self.bytes_by_partition_id)
