"""CoalescePlanner: applies coalesce settings to a set of shuffles.

Bridges configuration and the coalescer. The scheduler launches one
reduce task per spec in the returned plan.
"""

from collections.abc import Sequence

from shuffle_coalesce.contracts import (
    CoalescePlan,
    MapOutputStatistics,
    PartitionRange,
)
from shuffle_coalesce.core.config import CoalesceSettings
from shuffle_coalesce.core.logging import get_logger
from shuffle_coalesce.engine.coalescer import (
    coalesce_partitions_with_target,
    combined_partition_sizes,
    split_points_to_specs,
)

logger = get_logger(__name__)


class CoalescePlanner:
    """Plans coalesced reduce partitions for a group of shuffles.

    Example:
        planner = CoalescePlanner(settings.coalesce)
        plan = planner.plan(stats)
        for spec in plan.specs:
            launch_reduce_task(spec.start_reducer_index, spec.end_reducer_index)
    """

    def __init__(self, settings: CoalesceSettings) -> None:
        self._settings = settings

    @property
    def settings(self) -> CoalesceSettings:
        return self._settings

    def plan(
        self,
        statistics: Sequence[MapOutputStatistics],
        partition_range: PartitionRange | None = None,
    ) -> CoalescePlan:
        """Coalesce a range of partitions shared by ``statistics``.

        Args:
            statistics: Map output statistics of every participating shuffle
            partition_range: Indices to coalesce, all partitions if None

        Returns:
            Plan with split points and one spec per coalesced partition

        Raises:
            InvariantViolation: If the shuffles disagree on partition count
            ValueError: If the range does not fit the shuffles
        """
        # Also enforces the partition count invariant
        sizes = combined_partition_sizes(statistics)
        if partition_range is None:
            partition_range = PartitionRange(0, len(sizes))
        partition_range.validate_against(len(sizes))

        advisory = self._settings.advisory_partition_size_bytes
        if not self._settings.enabled:
            logger.debug(
                "Coalescing disabled, keeping original partitions",
                num_partitions=len(partition_range),
            )
            return self._identity_plan(partition_range, sizes, advisory)

        min_num_partitions = self._settings.effective_min_partition_num
        split_points, target_size = coalesce_partitions_with_target(
            statistics,
            partition_range.first_index,
            partition_range.last_index,
            advisory,
            min_num_partitions,
        )
        plan = CoalescePlan(
            split_points=split_points,
            partition_range=partition_range,
            advisory_target_size=advisory,
            target_size=target_size,
            specs=split_points_to_specs(split_points, partition_range.last_index, sizes),
        )
        logger.debug(
            "Coalesce plan ready",
            shuffle_ids=[s.shuffle_id for s in statistics],
            original_partitions=len(partition_range),
            coalesced_partitions=plan.num_partitions,
        )
        return plan

    def _identity_plan(
        self,
        partition_range: PartitionRange,
        sizes: list[int],
        advisory: int,
    ) -> CoalescePlan:
        # Empty ranges still report their start, as the coalescer does
        split_points = list(partition_range) or [partition_range.first_index]
        return CoalescePlan(
            split_points=split_points,
            partition_range=partition_range,
            advisory_target_size=advisory,
            target_size=advisory,
            specs=split_points_to_specs(split_points, partition_range.last_index, sizes),
        )
