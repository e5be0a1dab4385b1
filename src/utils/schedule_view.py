"""
スケジュール表示変換モジュール

レーン割り当て結果と依頼一覧を、表示・ダウンロード用のDataFrameに変換します。
"""

import pandas as pd
from typing import Dict, Iterable, List

from models.slot_models import SlotAxis, DEFAULT_AXIS
from models.request_models import Request, Lane
from algorithms.interval_policy import clamp_duration
from .constants import LIST_COLUMNS

# 枠の2列目以降に表示する印
CONTINUATION_MARK = "→"


def card_text(request: Request) -> str:
    """カードの表示文字列（見出し + 枠時間）"""
    return f"{request.title} ({request.duration}h)"


def lanes_to_grid(lanes: List[Lane], axis: SlotAxis = DEFAULT_AXIS) -> pd.DataFrame:
    """
    1つの場所のレーンをスケジュール表に変換

    Args:
        lanes: レーンのリスト
        axis: 時間軸

    Returns:
        レーンを行、搬入時間を列としたDataFrame。
        依頼の開始枠にはカード文字列、2列目以降には継続の印が入ります。
        依頼がない場合も空のレーン1行を返します。
    """
    slots = axis.all_slots()
    columns = [axis.label(s) for s in slots]
    positions = {axis.label(s): i for i, s in enumerate(slots)}

    rows = {}
    for lane in lanes or [Lane(number=1)]:
        cells = [""] * len(slots)
        for request in lane:
            start = positions[axis.label(request.slot)]
            span = min(clamp_duration(request.slot, request.duration, axis), len(slots) - start)
            cells[start] = card_text(request)
            for offset in range(1, span):
                cells[start + offset] = CONTINUATION_MARK
        rows[lane.label] = cells

    grid = pd.DataFrame.from_dict(rows, orient="index", columns=columns)
    grid.index.name = "レーン"
    return grid


def schedule_to_frame(lanes_by_place: Dict[str, List[Lane]], axis: SlotAxis = DEFAULT_AXIS) -> pd.DataFrame:
    """場所ごとのスケジュール表を1つのDataFrameに連結（場所・レーンの2段インデックス）"""
    grids = {place: lanes_to_grid(lanes, axis) for place, lanes in lanes_by_place.items()}
    if not grids:
        return pd.DataFrame(columns=[axis.label(s) for s in axis.all_slots()])
    return pd.concat(grids, names=["場所", "レーン"])


def requests_to_frame(requests: Iterable[Request], axis: SlotAxis = DEFAULT_AXIS) -> pd.DataFrame:
    """依頼一覧をDataFrameに変換（並び順はそのまま）"""
    data = [
        {
            LIST_COLUMNS["date"]: r.date,
            LIST_COLUMNS["place"]: r.place,
            LIST_COLUMNS["slot"]: axis.label(r.slot),
            LIST_COLUMNS["duration"]: r.duration,
            LIST_COLUMNS["block"]: r.block,
            LIST_COLUMNS["ship"]: r.ship,
            LIST_COLUMNS["note"]: r.note,
        }
        for r in requests
    ]
    return pd.DataFrame(data, columns=list(LIST_COLUMNS.values()))


def export_requests_csv(requests: Iterable[Request], axis: SlotAxis = DEFAULT_AXIS) -> str:
    """依頼一覧をCSV文字列に変換"""
    return requests_to_frame(requests, axis).to_csv(index=False)
