"""
UIコンポーネントモジュール

Streamlitアプリケーションで使用する共通UIコンポーネントを提供します。
"""

import streamlit as st
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Sequence

from models.slot_models import SlotAxis
from models.request_models import Request, Lane
from algorithms.resize_controller import ResizeController
from .schedule_view import lanes_to_grid, requests_to_frame
from .request_store import RequestStore


def request_form(form_key: str, defaults: Dict[str, Any], places: Sequence[str], axis: SlotAxis,
                 submit_label: str = "保存（新規は2時間）") -> Optional[Dict[str, Any]]:
    """
    依頼の追加・編集フォームを表示

    Args:
        form_key: フォームのキー
        defaults: 初期値（date, place, slot, block, ship, note）
        places: 場所の選択肢
        axis: 時間軸
        submit_label: 保存ボタンのテキスト

    Returns:
        保存ボタンが押された場合は入力値の辞書、それ以外はNone
    """
    slots = axis.all_slots()
    with st.form(form_key, clear_on_submit=False):
        picked_date = st.date_input("希望搬入日", value=datetime.strptime(defaults["date"], "%Y-%m-%d").date())
        place = st.selectbox("場所（固定）", places, index=list(places).index(defaults["place"]))
        slot = st.selectbox("搬入時間", slots, index=slots.index(defaults["slot"]), format_func=axis.label)
        block = st.text_input("ブロック", defaults.get("block", ""), placeholder="例：Aブロック")
        ship = st.text_input("番船", defaults.get("ship", ""), placeholder="例：3便")
        note = st.text_input("備考", defaults.get("note", ""), placeholder="例：注意事項など")
        submitted = st.form_submit_button(submit_label, use_container_width=True)

    if not submitted:
        return None
    return {
        "date": picked_date.strftime("%Y-%m-%d") if isinstance(picked_date, date) else defaults["date"],
        "place": place,
        "slot": slot,
        "block": block,
        "ship": ship,
        "note": note,
    }


def display_place_schedule(place: str, lanes: List[Lane], axis: SlotAxis) -> None:
    """1つの場所のレーン表を表示"""
    lane_count = max(1, len(lanes))
    st.markdown(f"**{place}**　<small>レーン {lane_count}</small>", unsafe_allow_html=True)
    st.dataframe(lanes_to_grid(lanes, axis), use_container_width=True)


def display_request_list(requests: List[Request], axis: SlotAxis) -> None:
    """依頼一覧を表示"""
    if not requests:
        st.info("この日の依頼はありません。＋で追加してください。")
        return
    st.dataframe(requests_to_frame(requests, axis), use_container_width=True, hide_index=True)


def resize_controls(request: Request, controller: ResizeController, key: str) -> None:
    """
    枠時間の伸縮ボタンを表示

    ボタン1回を「1時間分の幅だけドラッグした」操作として伸縮コントローラーに渡します。
    IA・VL 枠は1h固定のため表示しません。
    """
    if request.is_sentinel:
        st.caption("IA・VLは1h固定")
        return

    col1, col2, col3 = st.columns([1, 2, 1])
    with col1:
        shrink = st.button("－", key=f"{key}_shrink", help="1時間縮める")
    with col2:
        st.write(f"⇔ {request.duration}h")
    with col3:
        grow = st.button("＋", key=f"{key}_grow", help="1時間伸ばす")

    if shrink or grow:
        step = controller.unit_width if grow else -controller.unit_width
        if controller.start(request, 0):
            controller.move(step)
        controller.end()
        st.rerun()


def delete_with_confirmation(request: Request, store: RequestStore, key: str) -> bool:
    """確認付きの削除ボタン（削除した場合True）"""
    confirmed = st.checkbox("この依頼を削除しますか？", key=f"{key}_confirm")
    if st.button("削除", key=f"{key}_delete", disabled=not confirmed, type="secondary"):
        return store.delete(request.id)
    return False


def create_download_button(csv_text: str, button_text: str, filename: str) -> None:
    """CSVダウンロードボタンを作成"""
    st.download_button(button_text, csv_text, file_name=filename, mime="text/csv")


def generate_filename(prefix: str, view_date: str, suffix: str = "") -> str:
    """
    ファイル名を生成

    Args:
        prefix: ファイル名のプレフィックス
        view_date: 表示中の日付（YYYY-MM-DD）
        suffix: サフィックス

    Returns:
        生成されたファイル名
    """
    timestamp = datetime.now().strftime("%Y%m%d_%H%M")
    base_filename = f"{prefix}_{view_date.replace('-', '')}_{timestamp}"
    if suffix:
        base_filename += f"_{suffix}"
    return f"{base_filename}.csv"
