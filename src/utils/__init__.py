"""
ユーティリティパッケージ

このパッケージは、アプリケーション全体で使用される共通機能を提供します。
設定管理、ログ機能、依頼ストア、保存レコード変換、表示用データ変換などが含まれています。

StreamlitのUIコンポーネント（ui_components）はアプリから直接インポートします。
"""

# 設定管理とログ機能
from .config import get_config, reload_config, AppConfig
from .logger import setup_logging, get_logger, log_extra_fields

from .constants import (
    PLACES,
    DB_KEY,
    DB_FILE_NAME,
    RECORD_FIELDS,
    LEGACY_FIELD_MAP,
    LIST_COLUMNS,
    VIEW_CHOICES,
    ALL_PLACES_LABEL
)
from .record_codec import (
    RecordShape,
    RecordDecodeError,
    detect_record_shape,
    upgrade_legacy_record,
    decode_record,
    encode_request,
    decode_db,
    encode_db,
    new_request_id
)
from .request_store import RequestStore
from .schedule_view import (
    card_text,
    lanes_to_grid,
    schedule_to_frame,
    requests_to_frame,
    export_requests_csv
)

__all__ = [
    # 設定管理とログ機能
    'get_config',
    'reload_config',
    'AppConfig',
    'setup_logging',
    'get_logger',
    'log_extra_fields',

    # 定数
    'PLACES',
    'DB_KEY',
    'DB_FILE_NAME',
    'RECORD_FIELDS',
    'LEGACY_FIELD_MAP',
    'LIST_COLUMNS',
    'VIEW_CHOICES',
    'ALL_PLACES_LABEL',

    # 保存レコード変換
    'RecordShape',
    'RecordDecodeError',
    'detect_record_shape',
    'upgrade_legacy_record',
    'decode_record',
    'encode_request',
    'decode_db',
    'encode_db',
    'new_request_id',

    # 依頼ストア
    'RequestStore',

    # 表示用データ変換
    'card_text',
    'lanes_to_grid',
    'schedule_to_frame',
    'requests_to_frame',
    'export_requests_csv'
]
