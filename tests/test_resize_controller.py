#!/usr/bin/env python3
"""
伸縮ドラッグのユニットテスト

ドラッグ量から枠時間への変換、セッションの状態遷移、ストアへの即時反映をテストします。
"""

import sys
import os
import pytest

# プロジェクトルートをパスに追加
sys.path.append(os.path.join(os.path.dirname(__file__), '..', 'src'))

from models.slot_models import SENTINEL_SLOT
from models.request_models import Request
from algorithms.interval_policy import clamp_duration
from algorithms.resize_controller import (
    ResizeController, IdleSession, DraggingSession, IDLE,
    PointerDown, PointerMove, PointerUp, PointerCancel,
    apply_event, delta_units, round_half_up, DEFAULT_UNIT_WIDTH
)
from utils.request_store import RequestStore

UNIT = DEFAULT_UNIT_WIDTH


@pytest.fixture
def store():
    return RequestStore()


@pytest.fixture
def controller(store):
    return ResizeController(store, unit_width=UNIT)


class TestDeltaUnits:
    """ドラッグ量の変換テスト"""

    @pytest.mark.parametrize("value,expected", [
        (0.0, 0), (0.49, 0), (0.5, 1), (1.5, 2), (2.5, 3),
        (-0.49, 0), (-0.5, 0), (-0.51, -1), (-1.5, -1),
    ])
    def test_round_half_up(self, value, expected):
        """0.5ちょうどは正の方向へ丸める"""
        assert round_half_up(value) == expected

    def test_exact_units(self):
        assert delta_units(2 * UNIT, UNIT) == 2
        assert delta_units(-UNIT, UNIT) == -1

    def test_half_unit_rounds_up(self):
        assert delta_units(UNIT / 2, UNIT) == 1
        assert delta_units(UNIT / 2 - 1, UNIT) == 0

    def test_invalid_unit_width(self):
        with pytest.raises(ValueError):
            delta_units(10, 0)


class TestApplyEvent:
    """セッション遷移（純粋関数）のテスト"""

    def make_request(self, slot=9, duration=2):
        return Request(id="r1", date="2024-05-01", place="1A1", slot=slot, duration=duration)

    def test_pointer_down_starts_drag(self):
        session, update = apply_event(IDLE, PointerDown(self.make_request(), 100))
        assert session == DraggingSession("r1", 100, 2, 9)
        assert update is None

    def test_sentinel_is_not_resizable(self):
        session, update = apply_event(IDLE, PointerDown(self.make_request(slot=SENTINEL_SLOT, duration=1), 0))
        assert isinstance(session, IdleSession)
        assert update is None

    def test_move_while_idle_does_nothing(self):
        session, update = apply_event(IDLE, PointerMove(500))
        assert session is IDLE
        assert update is None

    def test_move_proposes_clamped_duration(self):
        session, _ = apply_event(IDLE, PointerDown(self.make_request(slot=17), 0))
        _, update = apply_event(session, PointerMove(10 * UNIT))
        assert update.duration == clamp_duration(17, 12) == 3

    def test_second_pointer_down_is_ignored(self):
        """同時にドラッグできるのは1つだけ"""
        session, _ = apply_event(IDLE, PointerDown(self.make_request(), 0))
        other = Request(id="r2", date="2024-05-01", place="1A1", slot=10, duration=2)
        next_session, _ = apply_event(session, PointerDown(other, 50))
        assert next_session is session

    @pytest.mark.parametrize("event", [PointerUp(), PointerCancel()])
    def test_end_and_cancel_return_to_idle(self, event):
        session, _ = apply_event(IDLE, PointerDown(self.make_request(), 0))
        next_session, update = apply_event(session, event)
        assert isinstance(next_session, IdleSession)
        assert update is None


class TestResizeController:
    """伸縮コントローラーのテスト"""

    def test_drag_right_two_units(self, store, controller):
        """2h の依頼を右へ2時間分ドラッグすると clamp(slot, 4)"""
        request = store.create_request("2024-05-01", "1A1", 9)
        assert request.duration == 2

        assert controller.start(request, 200)
        assert controller.move(200 + 2 * UNIT) == clamp_duration(9, 4)
        controller.end()

        assert store.get(request.id).duration == 4
        assert not controller.is_dragging

    def test_live_updates_on_each_move(self, store, controller):
        """移動のたびにストアへ反映する"""
        request = store.create_request("2024-05-01", "1A1", 9)
        controller.start(request, 0)

        controller.move(UNIT)
        assert store.get(request.id).duration == 3
        controller.move(3 * UNIT)
        assert store.get(request.id).duration == 5
        controller.move(-UNIT)
        assert store.get(request.id).duration == 1

    def test_stops_at_bounds(self, store, controller):
        """上限・下限で止まる"""
        request = store.create_request("2024-05-01", "1A1", 18)
        controller.start(request, 0)

        assert controller.move(10 * UNIT) == 2
        assert controller.move(-10 * UNIT) == 1

    def test_cancel_keeps_applied_duration(self, store, controller):
        """取消しても反映済みの枠時間は巻き戻さない"""
        request = store.create_request("2024-05-01", "1A1", 9)
        controller.start(request, 0)
        controller.move(2 * UNIT)
        controller.cancel()

        assert not controller.is_dragging
        assert store.get(request.id).duration == 4

    def test_move_after_end_is_ignored(self, store, controller):
        request = store.create_request("2024-05-01", "1A1", 9)
        controller.start(request, 0)
        controller.end()

        assert controller.move(5 * UNIT) is None
        assert store.get(request.id).duration == 2

    def test_sentinel_request_cannot_start(self, store, controller):
        request = store.create_request("2024-05-01", "1A1", SENTINEL_SLOT)
        assert not controller.start(request, 0)
        assert controller.move(3 * UNIT) is None
        assert store.get(request.id).duration == 1

    def test_second_start_on_same_request_is_rejected(self, store, controller):
        """ドラッグ中に同じ依頼で再度開始しても開始扱いにしない"""
        request = store.create_request("2024-05-01", "1A1", 9)
        assert controller.start(request, 0)
        assert not controller.start(request, 5 * UNIT)

        # 最初の開始位置のまま
        assert controller.move(UNIT) == 3
        assert controller.is_dragging

    def test_gesture_does_not_touch_other_requests(self, store, controller):
        """ドラッグ中の依頼以外は変更しない。搬入時間・場所も変えない"""
        target = store.create_request("2024-05-01", "1A1", 9)
        other = store.create_request("2024-05-01", "1A1", 10)

        controller.start(target, 0)
        assert not controller.start(other, 0)
        controller.move(3 * UNIT)
        controller.end()

        updated = store.get(target.id)
        assert updated.duration == 5
        assert (updated.slot, updated.place) == (9, "1A1")
        assert store.get(other.id) == other

    def test_request_deleted_during_drag(self, store, controller):
        """ドラッグ中に依頼が削除されたら待機状態に戻る"""
        request = store.create_request("2024-05-01", "1A1", 9)
        controller.start(request, 0)
        store.delete(request.id)

        assert controller.move(UNIT) is None
        assert not controller.is_dragging

    def test_invalid_unit_width(self, store):
        with pytest.raises(ValueError):
            ResizeController(store, unit_width=0)
