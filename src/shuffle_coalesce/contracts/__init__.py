"""Shared contracts for cross-boundary data types.

Import pattern:
    from shuffle_coalesce.contracts import MapOutputStatistics, InvariantViolation
"""

from shuffle_coalesce.contracts.errors import (
    InvariantViolation,
    StatisticsFormatError,
)
from shuffle_coalesce.contracts.partitions import (
    CoalescedPartitionSpec,
    CoalescePlan,
    PartitionRange,
)
from shuffle_coalesce.contracts.statistics import MapOutputStatistics

__all__ = [
    "CoalescePlan",
    "CoalescedPartitionSpec",
    "InvariantViolation",
    "MapOutputStatistics",
    "PartitionRange",
    "StatisticsFormatError",
]
