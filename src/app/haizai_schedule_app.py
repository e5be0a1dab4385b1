"""
配材スケジューラ - Streamlitアプリ

- 入力項目：希望搬入日 / 場所 / 搬入時間 / ブロック / 番船 / 備考
- 枠時間は入力しない：新規は2h固定、スケジュール上で伸縮（19:00まで、IA・VLは1h固定）
- 同じ場所で時間が重なる依頼はレーンで分離して表示
"""

import sys
import os
from datetime import date

import streamlit as st

# プロジェクトルートをパスに追加
sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

from algorithms.lane_packer import pack_lanes_by_place, find_lane_conflicts
from algorithms.resize_controller import ResizeController
from utils.config import get_config
from utils.logger import setup_logging, get_logger
from utils.constants import PLACES, VIEW_CHOICES, ALL_PLACES_LABEL
from utils.request_store import RequestStore
from utils.schedule_view import export_requests_csv, schedule_to_frame
from utils.ui_components import (
    request_form, display_place_schedule, display_request_list, resize_controls,
    delete_with_confirmation, create_download_button, generate_filename
)

logger = get_logger(__name__)


def get_store() -> RequestStore:
    """セッションごとのストア（初回のみ保存ファイルから読み込み）"""
    if "store" not in st.session_state:
        config = get_config()
        store = RequestStore(
            path=config.db_file,
            axis=config.slot_axis(),
            default_duration=config.default_duration,
            autosave=config.autosave
        )
        store.load()
        st.session_state.store = store
    return st.session_state.store


def get_controller(store: RequestStore) -> ResizeController:
    if "resize_controller" not in st.session_state:
        config = get_config()
        st.session_state.resize_controller = ResizeController(
            store, unit_width=config.resize_unit_width, axis=store.axis
        )
    return st.session_state.resize_controller


def render_new_request(store: RequestStore, view_date: str, place_filter: str) -> None:
    with st.expander("＋ 依頼を追加", expanded=False):
        defaults = {
            "date": view_date,
            "place": PLACES[0] if place_filter == ALL_PLACES_LABEL else place_filter,
            "slot": store.axis.start_hour,
        }
        values = request_form("new_request", defaults, store.places, store.axis)
        if values is not None:
            try:
                store.create_request(**values)
            except ValueError as e:
                st.error(f"保存できませんでした: {e}")
                return
            st.success("依頼を追加しました ✅")
            st.rerun()


def render_edit_request(store: RequestStore, controller: ResizeController, request) -> None:
    key = f"edit_{request.id}"
    with st.expander(f"{request.place} / {store.axis.label(request.slot)} / {request.title}"):
        resize_controls(request, controller, key)
        defaults = {
            "date": request.date,
            "place": request.place,
            "slot": request.slot,
            "block": request.block,
            "ship": request.ship,
            "note": request.note,
        }
        values = request_form(f"{key}_form", defaults, store.places, store.axis, submit_label="保存")
        if values is not None:
            try:
                store.update_request(request.id, **values)
            except ValueError as e:
                st.error(f"保存できませんでした: {e}")
                return
            st.rerun()
        if delete_with_confirmation(request, store, key):
            st.rerun()


def render_schedule(store: RequestStore, controller: ResizeController, view_date: str, place_filter: str) -> None:
    requests = store.list_by_date(view_date)
    places = PLACES if place_filter == ALL_PLACES_LABEL else [place_filter]

    st.subheader("スケジュール")
    st.caption(f"{len(requests)}件　新規は2時間で登録。⇔の－／＋で{store.axis.end_hour:02d}:00まで伸び縮みできます（IA・VLは1h固定）。")

    lanes_by_place = pack_lanes_by_place(requests, places, store.axis)
    for place, lanes in lanes_by_place.items():
        find_lane_conflicts(lanes, store.axis)
        display_place_schedule(place, lanes, store.axis)

    create_download_button(
        schedule_to_frame(lanes_by_place, store.axis).to_csv(),
        "スケジュール CSV DL",
        generate_filename("schedule", view_date)
    )

    st.subheader("依頼の編集")
    for request in requests:
        if request.place in places:
            render_edit_request(store, controller, request)


def render_list(store: RequestStore, controller: ResizeController, view_date: str) -> None:
    requests = store.list_by_date(view_date)
    st.subheader("依頼一覧")
    st.caption(f"{len(requests)}件")
    display_request_list(requests, store.axis)
    if requests:
        create_download_button(
            export_requests_csv(requests, store.axis),
            "依頼一覧 CSV DL",
            generate_filename("requests", view_date)
        )
    for request in requests:
        render_edit_request(store, controller, request)


def main():
    config = get_config()
    setup_logging()

    st.set_page_config(page_title=config.app_name, layout="wide")
    st.title(config.app_name)

    store = get_store()
    controller = get_controller(store)

    view = st.sidebar.radio("表示", VIEW_CHOICES)
    view_date = st.sidebar.date_input("表示日", value=date.today()).strftime("%Y-%m-%d")
    place_filter = st.sidebar.selectbox("場所", [ALL_PLACES_LABEL] + PLACES)
    logger.debug(f"表示: {view} {view_date} {place_filter}")

    render_new_request(store, view_date, place_filter)

    if view == VIEW_CHOICES[0]:
        render_schedule(store, controller, view_date, place_filter)
    else:
        render_list(store, controller, view_date)


if __name__ == "__main__":
    main()
