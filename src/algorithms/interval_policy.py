"""
枠時間ポリシー

依頼の枠時間（duration）の補正と、依頼同士の時間重複判定を提供します。

- 枠時間は 1 以上、かつ終了時刻の枠を超えない範囲に補正する
- IA・VL 枠は常に 1h 固定
- 重複判定は半開区間 [開始, 開始+枠時間) で行い、接しているだけの依頼は重ならない
"""

import math
from typing import Optional, Tuple

from models.slot_models import Slot, SlotAxis, DEFAULT_AXIS, DEFAULT_DURATION
from models.request_models import Request


def _coerce_duration(requested) -> Optional[int]:
    """入力値を整数の枠時間に変換（数値として解釈できなければNone）"""
    if requested is None or isinstance(requested, bool):
        return None
    if isinstance(requested, str):
        try:
            requested = float(requested.strip())
        except ValueError:
            return None
    if not isinstance(requested, (int, float)):
        return None
    if isinstance(requested, float):
        if not math.isfinite(requested):
            return None
        # 端数は四捨五入（0.5は切り上げ）
        return int(math.floor(requested + 0.5))
    return requested


def clamp_duration(slot: Slot, requested, axis: SlotAxis = DEFAULT_AXIS) -> int:
    """
    スロットに対して有効な枠時間に補正

    Args:
        slot: 搬入時間のスロット
        requested: 希望する枠時間（数値以外・未指定は既定値2hとして扱う）
        axis: 時間軸

    Returns:
        1 以上 max_duration(slot) 以下の枠時間
    """
    if axis.is_sentinel(slot):
        return 1

    duration = _coerce_duration(requested)
    if duration is None:
        duration = DEFAULT_DURATION

    return max(1, min(axis.max_duration(slot), duration))


def interval(request: Request, axis: SlotAxis = DEFAULT_AXIS) -> Optional[Tuple[int, int]]:
    """依頼の時間区間 [開始, 終了)。IA・VL枠は時間軸に乗らないためNone"""
    if axis.is_sentinel(request.slot):
        return None
    start = int(request.slot)
    return start, start + clamp_duration(request.slot, request.duration, axis)


def overlaps(a: Request, b: Request, axis: SlotAxis = DEFAULT_AXIS) -> bool:
    """
    2つの依頼の時間が重なるかチェック

    IA・VL 枠は時刻の枠とは別種の作業なので、IA・VL 同士でのみ重なります。
    """
    if axis.is_sentinel(a.slot) or axis.is_sentinel(b.slot):
        return a.slot == b.slot

    a_start, a_end = interval(a, axis)
    b_start, b_end = interval(b, axis)
    return a_start < b_end and b_start < a_end
