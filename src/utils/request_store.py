"""
依頼ストア

配材依頼の一覧を保持する唯一の書き込み窓口です。
作成・更新・削除と、端末ローカルのJSONファイルへの保存・読み込みを行います。

- 依頼は不変オブジェクトなので、読み出した一覧を変更してもストアには影響しない
- 搬入時間・枠時間が変わる更新では、必ず枠時間を補正し直す
- 場所・搬入時間・搬入日の妥当性はここで検証する（不正値はValueError）
"""

import json
import logging
from dataclasses import replace
from pathlib import Path
from typing import List, Optional, Sequence, Union

from models.slot_models import SlotAxis, DEFAULT_AXIS, DEFAULT_DURATION
from models.request_models import Request
from algorithms.interval_policy import clamp_duration
from .constants import PLACES
from .logger import log_extra_fields
from .record_codec import (
    decode_db, encode_db, new_request_id, now_ms, is_valid_date, clean_text
)

logger = logging.getLogger(__name__)

# update_request で変更できる項目
EDITABLE_FIELDS = ("date", "place", "slot", "duration", "block", "ship", "note")
TEXT_FIELDS = ("block", "ship", "note")


class RequestStore:
    """配材依頼のストア"""

    def __init__(self, path: Optional[Union[str, Path]] = None, axis: SlotAxis = DEFAULT_AXIS,
                 places: Sequence[str] = PLACES, default_duration: int = DEFAULT_DURATION,
                 autosave: bool = True):
        """
        初期化

        Args:
            path: 保存ファイルのパス（Noneの場合はメモリ上のみ）
            axis: 時間軸
            places: 有効な場所
            default_duration: 新規依頼の枠時間
            autosave: 書き込みのたびに保存するか
        """
        self.path = Path(path) if path is not None else None
        self.axis = axis
        self.places = list(places)
        self.default_duration = default_duration
        self.autosave = autosave
        # 新しい依頼が先頭（作成順の逆）
        self._requests: List[Request] = []

    # ---------- 読み出し ----------

    def all(self) -> List[Request]:
        return list(self._requests)

    def get(self, request_id: str) -> Optional[Request]:
        for request in self._requests:
            if request.id == request_id:
                return request
        return None

    def list_by_date(self, date: str) -> List[Request]:
        """指定日の依頼を場所、搬入時間の順で取得"""
        return sorted(
            (r for r in self._requests if r.date == date),
            key=lambda r: (r.place, self.axis.order(r.slot))
        )

    def __len__(self) -> int:
        return len(self._requests)

    # ---------- 書き込み ----------

    def create_request(self, date: str, place: str, slot, block: str = "", ship: str = "",
                       note: str = "") -> Request:
        """
        依頼を新規作成（枠時間は既定値2hを補正したもの）

        Returns:
            作成した依頼
        """
        parsed_slot = self._validate(date, place, slot)
        request = Request(
            id=new_request_id(),
            date=date,
            place=place,
            slot=parsed_slot,
            duration=clamp_duration(parsed_slot, self.default_duration, self.axis),
            block=clean_text(block),
            ship=clean_text(ship),
            note=clean_text(note),
            created_at=now_ms()
        )
        return self.upsert(request)

    def upsert(self, request: Request) -> Request:
        """
        依頼を追加または置き換え

        IDが未登録なら先頭に追加、登録済みなら同じ位置で置き換えます。

        Returns:
            保存した依頼（枠時間・自由入力欄は正規化済み）
        """
        parsed_slot = self._validate(request.date, request.place, request.slot)
        request = replace(
            request,
            slot=parsed_slot,
            duration=clamp_duration(parsed_slot, request.duration, self.axis),
            block=clean_text(request.block),
            ship=clean_text(request.ship),
            note=clean_text(request.note)
        )

        for i, existing in enumerate(self._requests):
            if existing.id == request.id:
                self._requests[i] = request
                log_extra_fields(logger, logging.DEBUG, "依頼を更新しました", id=request.id,
                                 date=request.date, place=request.place, slot=request.slot,
                                 duration=request.duration)
                break
        else:
            self._requests.insert(0, request)
            log_extra_fields(logger, logging.INFO, "依頼を追加しました", id=request.id,
                             date=request.date, place=request.place, slot=request.slot,
                             duration=request.duration)

        self._autosave()
        return request

    def update_request(self, request_id: str, **fields) -> Optional[Request]:
        """
        依頼の項目を更新し、枠時間を補正し直す

        Args:
            request_id: 依頼ID
            **fields: 更新する項目（date, place, slot, duration, block, ship, note）

        Returns:
            更新後の依頼。IDが存在しない場合はNone
        """
        unknown = set(fields) - set(EDITABLE_FIELDS)
        if unknown:
            raise ValueError(f"更新できない項目が指定されています: {sorted(unknown)}")

        current = self.get(request_id)
        if current is None:
            logger.warning(f"更新対象の依頼が見つかりません: {request_id}")
            return None

        return self.upsert(replace(current, **fields))

    def update_duration(self, request_id: str, duration) -> Optional[Request]:
        """枠時間のみ更新（伸縮ドラッグから呼ばれる）"""
        current = self.get(request_id)
        if current is None:
            return None

        clamped = clamp_duration(current.slot, duration, self.axis)
        if clamped == current.duration:
            return current
        return self.upsert(replace(current, duration=clamped))

    def delete(self, request_id: str) -> bool:
        """
        依頼を削除（存在しないIDは何もしない）

        Returns:
            削除した場合True
        """
        remaining = [r for r in self._requests if r.id != request_id]
        if len(remaining) == len(self._requests):
            logger.debug(f"削除対象の依頼がありません: {request_id}")
            return False

        self._requests = remaining
        log_extra_fields(logger, logging.INFO, "依頼を削除しました", id=request_id)
        self._autosave()
        return True

    # ---------- 保存・読み込み ----------

    def load(self, path: Optional[Union[str, Path]] = None) -> int:
        """
        保存ファイルから読み込み

        ファイルがない・壊れている場合は空の状態で開始します。

        Returns:
            読み込んだ依頼の件数
        """
        path = Path(path) if path is not None else self.path
        if path is None:
            raise ValueError("保存ファイルのパスが指定されていません")
        self.path = path

        if not path.exists():
            logger.info(f"保存ファイルがないため、空の状態で開始します: {path}")
            self._requests = []
            return 0

        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning(f"保存ファイルを読み込めないため、空の状態で開始します: {path} ({e})")
            self._requests = []
            return 0

        self._requests = decode_db(payload, self.axis, self.places)
        logger.info(f"依頼を読み込みました: {len(self._requests)}件 ({path})")
        return len(self._requests)

    def save(self, path: Optional[Union[str, Path]] = None) -> Path:
        """保存ファイルに書き出し"""
        path = Path(path) if path is not None else self.path
        if path is None:
            raise ValueError("保存ファイルのパスが指定されていません")

        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = path.with_suffix(path.suffix + ".tmp")
        tmp_path.write_text(
            json.dumps(encode_db(self._requests), ensure_ascii=False, indent=2),
            encoding="utf-8"
        )
        tmp_path.replace(path)
        logger.debug(f"依頼を保存しました: {len(self._requests)}件 ({path})")
        return path

    def _autosave(self) -> None:
        if self.autosave and self.path is not None:
            self.save()

    def _validate(self, date: str, place: str, slot):
        """搬入日・場所・搬入時間を検証し、変換後のスロットを返す"""
        if not is_valid_date(date):
            raise ValueError(f"搬入日 {date!r} はYYYY-MM-DD形式である必要があります")
        if place not in self.places:
            raise ValueError(f"場所 {place!r} は存在しません")
        parsed_slot = self.axis.parse_slot(slot)
        if parsed_slot is None:
            raise ValueError(f"搬入時間 {slot!r} は時間軸にありません")
        return parsed_slot
