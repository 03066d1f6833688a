"""
Window Aggregator — severity tallies over one batch snapshot.

A map-reduce over the batch: each record is classified on its own (map)
and the levels are counted (reduce). No record depends on another and no
temporal order is kept; "window" means one finite snapshot, not a sliding
window over a stream.

Invariants checked on every call:
    - every severity level is present in the counts, zero or not
    - the counts sum to the number of records classified
"""

from collections import Counter
from typing import Iterable, Optional, Sequence

import structlog

from faultlens.engine.classifier import SeverityClassifier
from faultlens.engine.exceptions import InvariantViolationError
from faultlens.models.enums import SeverityLevel
from faultlens.models.results import AggregateWindow
from faultlens.models.sensors import Metrics

logger = structlog.get_logger()


def verify_conservation(window: AggregateWindow, expected_total: int) -> None:
    """
    Check that a window accounts for exactly ``expected_total`` records.

    Raises:
        InvariantViolationError: If the counts do not sum to the expected total
    """
    total = window.total
    if total != expected_total:
        logger.error(
            "aggregate_conservation_violated",
            counted=total,
            expected=expected_total,
        )
        raise InvariantViolationError(
            f"Severity counts sum to {total}, expected {expected_total}"
        )


class WindowAggregator:
    """
    Classify every record in a batch and count records per severity level.

    Example:
        >>> aggregator = WindowAggregator()
        >>> aggregator.aggregate([]).counts
        {<SeverityLevel.NORMAL: 'normal'>: 0, <SeverityLevel.WARNING: 'warning'>: 0, <SeverityLevel.CRITICAL: 'critical'>: 0}
    """

    def __init__(self, classifier: Optional[SeverityClassifier] = None):
        self.classifier = classifier or SeverityClassifier()

    def tally(self, levels: Iterable[SeverityLevel]) -> AggregateWindow:
        """Reduce step: count levels, with every level present."""
        counter = Counter(levels)
        return AggregateWindow(
            counts={level: counter.get(level, 0) for level in SeverityLevel.ordered()}
        )

    def aggregate(self, batch: Sequence[Metrics]) -> AggregateWindow:
        """
        Aggregate a batch of metrics records into severity counts.

        Args:
            batch: Validated metrics records; may be empty

        Returns:
            AggregateWindow with all three levels present

        Raises:
            InvariantViolationError: If the counts do not account for the batch
        """
        window = self.tally(self.classifier.classify(metrics) for metrics in batch)
        verify_conservation(window, len(batch))

        logger.info(
            "window_aggregated",
            batch_size=len(batch),
            counts={level.value: count for level, count in window.counts.items()},
        )
        return window
