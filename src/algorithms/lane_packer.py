"""
レーン割り当てアルゴリズム

同じ日・同じ場所の依頼を、時間が重ならない表示レーンに振り分けます。
開始順に走査し、既存レーンのうち重複のない最初のレーンへ入れる
貪欲法（区間グラフ彩色）で、レーン数は同時刻に重なる依頼数の最大値と一致します。
"""

import logging
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from models.slot_models import SlotAxis, DEFAULT_AXIS
from models.request_models import Request, Lane
from .interval_policy import overlaps, interval

logger = logging.getLogger(__name__)


def _sort_key(request: Request, axis: SlotAxis) -> Tuple[int, int, str]:
    # 同じ開始枠は作成時刻、IDの順で固定
    return axis.order(request.slot), request.created_at, request.id


def pack_lanes(requests: Iterable[Request], axis: SlotAxis = DEFAULT_AXIS) -> List[Lane]:
    """
    依頼をレーンに振り分け

    Args:
        requests: 同じ日・同じ場所の依頼
        axis: 時間軸

    Returns:
        レーンのリスト（1番から作成順）。依頼がなければ空リスト
    """
    lanes: List[Lane] = []

    for request in sorted(requests, key=lambda r: _sort_key(r, axis)):
        for lane in lanes:
            if not any(overlaps(member, request, axis) for member in lane):
                lane.add(request)
                break
        else:
            lanes.append(Lane(number=len(lanes) + 1, requests=[request]))

    return lanes


def pack_lanes_by_place(requests: Iterable[Request], places: Optional[Sequence[str]] = None,
                        axis: SlotAxis = DEFAULT_AXIS) -> Dict[str, List[Lane]]:
    """
    1日分の依頼を場所ごとにレーン分け

    Args:
        requests: 1日分の依頼
        places: 表示する場所（この順で結果を返す）。Noneの場合は依頼に含まれる場所の昇順
        axis: 時間軸

    Returns:
        場所 → レーンのリスト
    """
    by_place: Dict[str, List[Request]] = {}
    for request in requests:
        by_place.setdefault(request.place, []).append(request)

    if places is None:
        places = sorted(by_place)

    return {place: pack_lanes(by_place.get(place, []), axis) for place in places}


def max_concurrency(requests: Iterable[Request], axis: SlotAxis = DEFAULT_AXIS) -> int:
    """
    同時刻に重なる依頼数の最大値

    IA・VL 枠の依頼は全て互いに重なり、時刻の枠とは重ならないため別に数えます。
    """
    sentinel_count = 0
    events: List[Tuple[int, int]] = []

    for request in requests:
        span = interval(request, axis)
        if span is None:
            sentinel_count += 1
            continue
        start, end = span
        events.append((start, 1))
        events.append((end, -1))

    # 同時刻は終了を先に処理（接しているだけの依頼は重ならない）
    events.sort()
    active = 0
    peak = 0
    for _, delta in events:
        active += delta
        peak = max(peak, active)

    return max(peak, sentinel_count)


def find_lane_conflicts(lanes: Iterable[Lane], axis: SlotAxis = DEFAULT_AXIS) -> List[Tuple[int, Request, Request]]:
    """レーン内で重なっている依頼の組を列挙（正しく割り当てられていれば空）"""
    conflicts = []
    for lane in lanes:
        members = lane.requests
        for i in range(len(members)):
            for j in range(i + 1, len(members)):
                if overlaps(members[i], members[j], axis):
                    conflicts.append((lane.number, members[i], members[j]))

    if conflicts:
        logger.error(f"レーン内の重複を検出しました: {len(conflicts)}件")
    return conflicts
