"""
定数定義モジュール

配材スケジューラで使用する定数を定義します。
時間軸の定数は models.slot_models、ドラッグ換算の幅は algorithms.resize_controller で定義しています。
"""

# 場所マスタ（固定）
PLACES = ["板継", "1A1", "1A2", "1A3", "先付", "2A1", "2A2", "2A3", "依頼工事", "連絡事項"]

# 保存データ
DB_KEY = "haizai_db_v4"
DB_FILE_NAME = f"{DB_KEY}.json"

# 保存レコードの列（この順で出力）
RECORD_FIELDS = ["id", "date", "place", "slot", "duration", "block", "ship", "note", "createdAt"]

# 旧形式レコードのフィールド名 → 現行フィールド名
LEGACY_FIELD_MAP = {
    "deliveryDate": "date",
    "title": "block",
    "memo": "note",
}

# 一覧・CSVの列名
LIST_COLUMNS = {
    "date": "希望搬入日",
    "place": "場所",
    "slot": "搬入時間",
    "duration": "枠(h)",
    "block": "ブロック",
    "ship": "番船",
    "note": "備考",
}

# 画面表示
VIEW_CHOICES = ["スケジュール", "一覧"]
ALL_PLACES_LABEL = "全て"
