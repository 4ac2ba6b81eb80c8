"""Coalescing engine.

The coalescer holds the sizing and packing decision; the planner
wires it to configuration and produces schedulable specs.
"""

from shuffle_coalesce.engine.coalescer import (
    MIN_TARGET_SIZE,
    coalesce_partitions,
    coalesce_partitions_with_target,
    combined_partition_sizes,
    compute_target_size,
    split_points_to_specs,
)
from shuffle_coalesce.engine.planner import CoalescePlanner

__all__ = [
    "MIN_TARGET_SIZE",
    "CoalescePlanner",
    "coalesce_partitions",
    "coalesce_partitions_with_target",
    "combined_partition_sizes",
    "compute_target_size",
    "split_points_to_specs",
]
