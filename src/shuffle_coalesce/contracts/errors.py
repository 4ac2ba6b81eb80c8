"""Error types shared across subsystem boundaries.

InvariantViolation is a caller contract failure, not a data condition.
It must propagate to the planner unchanged; there is no local recovery.
"""

from collections.abc import Iterable


class InvariantViolation(Exception):
    """Participating shuffles disagree on their total partition count.

    Attributes:
        partition_counts: Distinct partition counts observed, in first-seen order
    """

    def __init__(self, partition_counts: Iterable[int]) -> None:
        self.partition_counts = tuple(partition_counts)
        super().__init__(
            "There should be only one distinct value of the number of shuffle "
            f"partitions among participating shuffles, got {list(self.partition_counts)}"
        )


class StatisticsFormatError(Exception):
    """A statistics document could not be turned into MapOutputStatistics."""
