"""
配材依頼のデータ構造

依頼（Request）と、スケジュール表示用のレーン（Lane）を定義します。
依頼は不変オブジェクトとして扱い、変更時は dataclasses.replace で
新しい依頼を作成します。レーンは表示のたびに再計算される派生データで、
保存はされません。
"""

from typing import List, Iterator
from dataclasses import dataclass, field

from .slot_models import Slot, SENTINEL_SLOT, DEFAULT_DURATION


@dataclass(frozen=True)
class Request:
    """配材依頼"""
    id: str
    date: str            # 希望搬入日 (YYYY-MM-DD)
    place: str           # 場所
    slot: Slot           # 搬入時間
    duration: int = DEFAULT_DURATION
    block: str = ""      # ブロック
    ship: str = ""       # 番船
    note: str = ""       # 備考
    created_at: int = 0  # 作成時刻 (epoch ms)

    def __post_init__(self):
        """依頼作成後の検証"""
        if not self.id or not self.date or not self.place:
            raise ValueError("依頼ID、搬入日、場所は必須です")

    @property
    def is_sentinel(self) -> bool:
        return self.slot == SENTINEL_SLOT

    @property
    def title(self) -> str:
        """カード見出し（ブロック（番船））"""
        block = self.block or "（未入力）"
        return f"{block}（{self.ship}）" if self.ship else block


@dataclass
class Lane:
    """1つの場所の表示レーン（レーン内の依頼は重ならない）"""
    number: int
    requests: List[Request] = field(default_factory=list)

    def add(self, request: Request):
        """依頼をレーン末尾に追加"""
        self.requests.append(request)

    @property
    def label(self) -> str:
        return f"レーン{self.number}"

    def __len__(self) -> int:
        return len(self.requests)

    def __iter__(self) -> Iterator[Request]:
        return iter(self.requests)
