"""Lifecycle — прогрессия сегментов, rolling deadline, завершение и zombie-статус кривой."""

from .segment_tracker import (
    BLOCKS_PER_PERIOD,
    SegmentConfig,
    SegmentTracker,
    SegmentTransitionResult,
)

__all__ = [
    "BLOCKS_PER_PERIOD",
    "SegmentConfig",
    "SegmentTracker",
    "SegmentTransitionResult",
]
