"""
保存レコード変換モジュール

依頼（Request）と保存用のフラットなレコード（dict）の相互変換を提供します。
読み込み時に旧形式のレコードを判定し、一度だけ現行形式へ変換します。

現行形式: id, date, place, slot, duration, block, ship, note, createdAt
旧形式: 搬入日が deliveryDate、ブロックが title、備考が memo
"""

import math
import time
import uuid
import logging
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Iterable, List, Sequence

from models.slot_models import SlotAxis, DEFAULT_AXIS
from models.request_models import Request
from algorithms.interval_policy import clamp_duration
from .constants import PLACES, RECORD_FIELDS, LEGACY_FIELD_MAP

logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%d"


class RecordShape(Enum):
    """保存レコードの形式"""
    CURRENT = "current"
    LEGACY = "legacy"


class RecordDecodeError(ValueError):
    """レコードを依頼に変換できない"""


def new_request_id() -> str:
    """依頼IDを発行（作成時刻 + ランダム値）"""
    return f"{now_ms()}_{uuid.uuid4().hex[:12]}"


def now_ms() -> int:
    return int(time.time() * 1000)


def is_valid_date(value: Any) -> bool:
    """YYYY-MM-DD 形式の日付かチェック（2024-5-1 のようなゼロ埋めなしは不可）"""
    if not isinstance(value, str):
        return False
    try:
        parsed = datetime.strptime(value, DATE_FORMAT)
    except ValueError:
        return False
    return parsed.strftime(DATE_FORMAT) == value


def clean_text(value: Any) -> str:
    """自由入力欄を文字列にして前後の空白を除去"""
    if value is None:
        return ""
    return str(value).strip()


def detect_record_shape(raw: Dict[str, Any]) -> RecordShape:
    """レコードの形式を判定"""
    for legacy_key, current_key in LEGACY_FIELD_MAP.items():
        if legacy_key in raw and current_key not in raw:
            return RecordShape.LEGACY
    return RecordShape.CURRENT


def upgrade_legacy_record(raw: Dict[str, Any]) -> Dict[str, Any]:
    """旧形式のフィールド名を現行形式に変換（元のレコードは変更しない）"""
    upgraded = dict(raw)
    for legacy_key, current_key in LEGACY_FIELD_MAP.items():
        if legacy_key in upgraded:
            value = upgraded.pop(legacy_key)
            upgraded.setdefault(current_key, value)
    return upgraded


def decode_record(raw: Dict[str, Any], axis: SlotAxis = DEFAULT_AXIS,
                  places: Sequence[str] = PLACES) -> Request:
    """
    保存レコードを依頼に変換

    Args:
        raw: 保存レコード（現行形式・旧形式のどちらでも可）
        axis: 時間軸
        places: 有効な場所

    Returns:
        依頼（枠時間は補正済み）

    Raises:
        RecordDecodeError: 搬入日・場所・搬入時間が不正な場合
    """
    if not isinstance(raw, dict):
        raise RecordDecodeError(f"レコードの形式が不正です: {type(raw).__name__}")

    if detect_record_shape(raw) is RecordShape.LEGACY:
        raw = upgrade_legacy_record(raw)

    request_id = clean_text(raw.get("id")) or new_request_id()

    date = clean_text(raw.get("date"))
    if not is_valid_date(date):
        raise RecordDecodeError(f"依頼 {request_id}: 搬入日 {raw.get('date')!r} が不正です")

    place = clean_text(raw.get("place"))
    if place not in places:
        raise RecordDecodeError(f"依頼 {request_id}: 場所 {place!r} が存在しません")

    slot = axis.parse_slot(raw.get("slot"))
    if slot is None:
        raise RecordDecodeError(f"依頼 {request_id}: 搬入時間 {raw.get('slot')!r} が不正です")

    created_at = raw.get("createdAt")
    if isinstance(created_at, bool) or not isinstance(created_at, (int, float)) or not math.isfinite(created_at):
        created_at = 0

    return Request(
        id=request_id,
        date=date,
        place=place,
        slot=slot,
        duration=clamp_duration(slot, raw.get("duration"), axis),
        block=clean_text(raw.get("block")),
        ship=clean_text(raw.get("ship")),
        note=clean_text(raw.get("note")),
        created_at=int(created_at)
    )


def encode_request(request: Request) -> Dict[str, Any]:
    """依頼を保存レコードに変換"""
    record = {
        "id": request.id,
        "date": request.date,
        "place": request.place,
        "slot": request.slot,
        "duration": request.duration,
        "block": request.block,
        "ship": request.ship,
        "note": request.note,
        "createdAt": request.created_at,
    }
    return {key: record[key] for key in RECORD_FIELDS}


def decode_db(payload: Any, axis: SlotAxis = DEFAULT_AXIS,
              places: Sequence[str] = PLACES) -> List[Request]:
    """
    保存データ全体を依頼のリストに変換

    変換できないレコードは警告を出して読み飛ばします。
    """
    if not isinstance(payload, dict) or not isinstance(payload.get("requests"), list):
        logger.warning("保存データの形式が不正なため、空の状態で開始します")
        return []

    requests = []
    seen_ids = set()
    legacy_count = 0
    for raw in payload["requests"]:
        try:
            if isinstance(raw, dict) and detect_record_shape(raw) is RecordShape.LEGACY:
                legacy_count += 1
            request = decode_record(raw, axis, places)
        except RecordDecodeError as e:
            logger.warning(f"レコードを読み飛ばしました: {e}")
            continue
        if request.id in seen_ids:
            logger.warning(f"重複した依頼IDを読み飛ばしました: {request.id}")
            continue
        seen_ids.add(request.id)
        requests.append(request)

    if legacy_count:
        logger.info(f"旧形式のレコードを変換しました: {legacy_count}件")
    return requests


def encode_db(requests: Iterable[Request]) -> Dict[str, Any]:
    """依頼のリストを保存データに変換"""
    return {"requests": [encode_request(r) for r in requests]}
