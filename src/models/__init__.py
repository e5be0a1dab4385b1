"""
モデル層

配材スケジュールの時間軸と依頼のデータ構造を提供します。
"""

from .slot_models import (
    Slot,
    SlotAxis,
    DEFAULT_AXIS,
    SENTINEL_SLOT,
    START_HOUR,
    END_HOUR,
    DEFAULT_DURATION,
    slot_order,
    slot_label,
    max_duration
)
from .request_models import Request, Lane

__all__ = [
    "Slot",
    "SlotAxis",
    "DEFAULT_AXIS",
    "SENTINEL_SLOT",
    "START_HOUR",
    "END_HOUR",
    "DEFAULT_DURATION",
    "slot_order",
    "slot_label",
    "max_duration",
    "Request",
    "Lane"
]
