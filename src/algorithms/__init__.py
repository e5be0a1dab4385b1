"""
アルゴリズム層

枠時間の補正・重複判定、レーン割り当て、伸縮ドラッグの実装を提供します。
"""

from .interval_policy import clamp_duration, overlaps, interval
from .lane_packer import (
    pack_lanes,
    pack_lanes_by_place,
    max_concurrency,
    find_lane_conflicts
)
from .resize_controller import (
    ResizeController,
    IdleSession,
    DraggingSession,
    IDLE,
    apply_event,
    delta_units,
    round_half_up
)

__all__ = [
    "clamp_duration",
    "overlaps",
    "interval",
    "pack_lanes",
    "pack_lanes_by_place",
    "max_concurrency",
    "find_lane_conflicts",
    "ResizeController",
    "IdleSession",
    "DraggingSession",
    "IDLE",
    "apply_event",
    "delta_units",
    "round_half_up"
]
