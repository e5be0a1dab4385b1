"""
スロットモデル

配材スケジュールの時間軸（搬入時間の枠）を定義します。
時間軸は「IA・VL」枠（時間を持たない特別枠）と、開始時刻から
終了時刻までの1時間刻みの枠で構成されます。

並び順は IA・VL が先頭、その後は時刻の昇順です。
"""

from typing import List, Optional, Union
from dataclasses import dataclass

# 時間軸の既定値
START_HOUR = 7
END_HOUR = 19

# 時間軸に乗らない特別枠（常に1h固定）
SENTINEL_SLOT = "IA・VL"
SENTINEL_ORDER = -1

# 新規依頼は2h固定
DEFAULT_DURATION = 2

Slot = Union[int, str]


@dataclass(frozen=True)
class SlotAxis:
    """搬入時間の時間軸"""
    start_hour: int = START_HOUR
    end_hour: int = END_HOUR
    sentinel: str = SENTINEL_SLOT

    def __post_init__(self):
        """時間軸作成後の検証"""
        if self.start_hour <= SENTINEL_ORDER:
            raise ValueError("開始時刻はIA・VL枠の並び順より大きい必要があります")
        if self.start_hour > self.end_hour:
            raise ValueError("開始時刻は終了時刻以下である必要があります")

    @property
    def hours(self) -> List[int]:
        return list(range(self.start_hour, self.end_hour + 1))

    def all_slots(self) -> List[Slot]:
        """並び順どおりの全スロット"""
        return [self.sentinel] + self.hours

    def is_sentinel(self, slot: Slot) -> bool:
        return slot == self.sentinel

    def is_valid_slot(self, slot: Slot) -> bool:
        """スロットが時間軸に含まれるかチェック"""
        if self.is_sentinel(slot):
            return True
        if isinstance(slot, bool) or not isinstance(slot, int):
            return False
        return self.start_hour <= slot <= self.end_hour

    def order(self, slot: Slot) -> int:
        """並び順の値（IA・VLは全ての時刻より小さい）"""
        if self.is_sentinel(slot):
            return SENTINEL_ORDER
        return int(slot)

    def label(self, slot: Slot) -> str:
        """表示用ラベル（例: 09:00）"""
        if self.is_sentinel(slot):
            return self.sentinel
        return f"{int(slot):02d}:00"

    def max_duration(self, slot: Slot) -> int:
        """スロットで取れる最大枠時間（終了時刻の枠まで）"""
        if self.is_sentinel(slot):
            return 1
        return self.end_hour - int(slot) + 1

    def parse_slot(self, value) -> Optional[Slot]:
        """
        入力値をスロットに変換

        Args:
            value: スロット値（"IA・VL"、9、"9"、"09:00" など）

        Returns:
            変換後のスロット。時間軸外・解釈不能の場合はNone
        """
        if isinstance(value, bool) or value is None:
            return None
        if isinstance(value, str):
            text = value.strip()
            if text == self.sentinel:
                return self.sentinel
            if text.endswith(":00"):
                text = text[:-3]
            try:
                value = int(text)
            except ValueError:
                return None
        elif isinstance(value, float):
            if not value.is_integer():
                return None
            value = int(value)
        if not isinstance(value, int):
            return None
        return value if self.is_valid_slot(value) else None


DEFAULT_AXIS = SlotAxis()


def slot_order(slot: Slot, axis: SlotAxis = DEFAULT_AXIS) -> int:
    """スロットの並び順を取得"""
    return axis.order(slot)


def slot_label(slot: Slot, axis: SlotAxis = DEFAULT_AXIS) -> str:
    """スロットの表示ラベルを取得"""
    return axis.label(slot)


def max_duration(slot: Slot, axis: SlotAxis = DEFAULT_AXIS) -> int:
    """スロットの最大枠時間を取得"""
    return axis.max_duration(slot)
