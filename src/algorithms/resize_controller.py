"""
枠時間の伸縮ドラッグ

カード右下のつまみのドラッグ（ピクセル単位の連続量）を、
枠時間（時間単位の離散量）の変更に変換します。

ドラッグ状態は共有の可変状態ではなく、明示的なセッション値
（IdleSession / DraggingSession）としてイベントごとに受け渡します。

- 開始: IA・VL 以外の依頼でのみドラッグ開始（同時に1つだけ）
- 移動: 移動量 / 1時間の幅 を四捨五入（0.5は切り上げ）し、開始時の枠時間に加算して補正
- 終了・取消: 待機状態に戻る（最後に反映した枠時間がそのまま確定。巻き戻しはしない）
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional, Protocol, Tuple, Union

from models.slot_models import Slot, SlotAxis, DEFAULT_AXIS
from models.request_models import Request
from .interval_policy import clamp_duration

logger = logging.getLogger(__name__)

# 1時間分の表示幅（px）
DEFAULT_UNIT_WIDTH = 98


@dataclass(frozen=True)
class IdleSession:
    """待機中（ドラッグなし）"""


@dataclass(frozen=True)
class DraggingSession:
    """ドラッグ中"""
    request_id: str
    start_x: float
    start_duration: int
    slot: Slot


DragSession = Union[IdleSession, DraggingSession]

IDLE = IdleSession()


@dataclass(frozen=True)
class PointerDown:
    request: Request
    x: float


@dataclass(frozen=True)
class PointerMove:
    x: float


@dataclass(frozen=True)
class PointerUp:
    pass


@dataclass(frozen=True)
class PointerCancel:
    pass


PointerEvent = Union[PointerDown, PointerMove, PointerUp, PointerCancel]


@dataclass(frozen=True)
class DurationUpdate:
    """ドラッグで決まった枠時間"""
    request_id: str
    duration: int


class DurationWriter(Protocol):
    def update_duration(self, request_id: str, duration) -> Optional[Request]:
        ...


def round_half_up(value: float) -> int:
    """四捨五入（0.5 は正の方向へ）"""
    return int(math.floor(value + 0.5))


def delta_units(delta_px: float, unit_width: float = DEFAULT_UNIT_WIDTH) -> int:
    """ピクセルの移動量を時間単位の変化量に変換"""
    if unit_width <= 0:
        raise ValueError("1時間分の幅は正の値である必要があります")
    return round_half_up(delta_px / unit_width)


def apply_event(session: DragSession, event: PointerEvent, unit_width: float = DEFAULT_UNIT_WIDTH,
                axis: SlotAxis = DEFAULT_AXIS) -> Tuple[DragSession, Optional[DurationUpdate]]:
    """
    ドラッグセッションにイベントを適用

    Args:
        session: 現在のセッション
        event: ポインターイベント
        unit_width: 1時間分の幅（px）
        axis: 時間軸

    Returns:
        (次のセッション, 枠時間の更新)のタプル。更新がなければNone
    """
    if isinstance(event, PointerDown):
        if isinstance(session, DraggingSession):
            # 同時にドラッグできるのは1つだけ
            return session, None
        if axis.is_sentinel(event.request.slot):
            return session, None
        start_duration = clamp_duration(event.request.slot, event.request.duration, axis)
        return DraggingSession(
            request_id=event.request.id,
            start_x=event.x,
            start_duration=start_duration,
            slot=event.request.slot
        ), None

    if isinstance(event, PointerMove):
        if not isinstance(session, DraggingSession):
            return session, None
        delta = delta_units(event.x - session.start_x, unit_width)
        duration = clamp_duration(session.slot, session.start_duration + delta, axis)
        return session, DurationUpdate(session.request_id, duration)

    # PointerUp / PointerCancel
    return IDLE, None


class ResizeController:
    """ドラッグセッションを保持し、枠時間の変更をストアへ即時反映する"""

    def __init__(self, writer: DurationWriter, unit_width: float = DEFAULT_UNIT_WIDTH,
                 axis: SlotAxis = DEFAULT_AXIS):
        if unit_width <= 0:
            raise ValueError("1時間分の幅は正の値である必要があります")
        self.writer = writer
        self.unit_width = unit_width
        self.axis = axis
        self.session: DragSession = IDLE

    @property
    def is_dragging(self) -> bool:
        return isinstance(self.session, DraggingSession)

    def dispatch(self, event: PointerEvent) -> Optional[int]:
        """イベントを処理し、反映した枠時間を返す"""
        next_session, update = apply_event(self.session, event, self.unit_width, self.axis)

        if next_session is not self.session:
            if isinstance(next_session, DraggingSession):
                logger.debug(f"伸縮ドラッグ開始: {next_session.request_id} ({next_session.start_duration}h)")
            elif isinstance(self.session, DraggingSession):
                logger.debug(f"伸縮ドラッグ終了: {self.session.request_id}")
        self.session = next_session

        if update is None:
            return None

        if self.writer.update_duration(update.request_id, update.duration) is None:
            # ドラッグ中に依頼が削除された
            logger.warning(f"ドラッグ中の依頼が見つかりません: {update.request_id}")
            self.session = IDLE
            return None
        return update.duration

    def start(self, request: Request, x: float) -> bool:
        """ドラッグを開始（この呼び出しで待機状態から開始した場合True）"""
        was_dragging = self.is_dragging
        self.dispatch(PointerDown(request, x))
        return not was_dragging and self.is_dragging

    def move(self, x: float) -> Optional[int]:
        return self.dispatch(PointerMove(x))

    def end(self):
        self.dispatch(PointerUp())

    def cancel(self):
        self.dispatch(PointerCancel())
