#!/usr/bin/env python3
"""
依頼ストアのテスト

依頼の作成・更新・削除、日付ごとの一覧、JSONファイルへの保存と読み込みをテストします。
"""

import sys
import os
import json
import shutil
import tempfile
import unittest
from dataclasses import replace
from pathlib import Path

# プロジェクトルートをパスに追加
sys.path.append(os.path.join(os.path.dirname(__file__), '..', 'src'))

from models.slot_models import SENTINEL_SLOT, SlotAxis
from models.request_models import Request
from utils.request_store import RequestStore


class TestRequestStoreWrites(unittest.TestCase):
    """依頼の作成・更新・削除のテスト"""

    def setUp(self):
        self.store = RequestStore()

    def test_create_request_defaults(self):
        """新規依頼は2h、自由入力欄は前後の空白を除去"""
        request = self.store.create_request("2024-05-01", "1A1", 9, block="  Aブロック ", ship=" 3便", note=" ")
        self.assertEqual(request.duration, 2)
        self.assertEqual(request.block, "Aブロック")
        self.assertEqual(request.ship, "3便")
        self.assertEqual(request.note, "")
        self.assertTrue(request.id)
        self.assertGreater(request.created_at, 0)
        self.assertEqual(self.store.get(request.id), request)

    def test_create_request_clamps_default_duration(self):
        """19時開始・IA・VLは1h"""
        self.assertEqual(self.store.create_request("2024-05-01", "1A1", 19).duration, 1)
        self.assertEqual(self.store.create_request("2024-05-01", "1A1", SENTINEL_SLOT).duration, 1)

    def test_create_request_parses_slot_string(self):
        request = self.store.create_request("2024-05-01", "1A1", "10")
        self.assertEqual(request.slot, 10)

    def test_new_requests_are_prepended(self):
        first = self.store.create_request("2024-05-01", "1A1", 9)
        second = self.store.create_request("2024-05-01", "1A1", 10)
        self.assertEqual([r.id for r in self.store.all()], [second.id, first.id])

    def test_boundary_validation(self):
        """不正な場所・搬入時間・搬入日はValueError"""
        with self.assertRaises(ValueError):
            self.store.create_request("2024-05-01", "存在しない場所", 9)
        with self.assertRaises(ValueError):
            self.store.create_request("2024-05-01", "1A1", 6)
        with self.assertRaises(ValueError):
            self.store.create_request("2024/05/01", "1A1", 9)
        self.assertEqual(len(self.store), 0)

    def test_unpadded_date_is_rejected(self):
        """ゼロ埋めなしの搬入日は登録せず、その日の一覧にも出さない"""
        with self.assertRaises(ValueError):
            self.store.create_request("2024-5-1", "1A1", 9)
        request = self.store.create_request("2024-05-01", "1A1", 9)
        with self.assertRaises(ValueError):
            self.store.update_request(request.id, date="2024-5-1")
        self.assertEqual(self.store.list_by_date("2024-05-01"), [request])

    def test_upsert_replaces_in_place(self):
        first = self.store.create_request("2024-05-01", "1A1", 9)
        second = self.store.create_request("2024-05-01", "1A1", 10)
        self.store.upsert(replace(first, note="変更"))

        self.assertEqual(len(self.store), 2)
        self.assertEqual([r.id for r in self.store.all()], [second.id, first.id])
        self.assertEqual(self.store.get(first.id).note, "変更")

    def test_upsert_reclamps_duration(self):
        """upsert時にも枠時間を補正する"""
        request = Request(id="x", date="2024-05-01", place="1A1", slot=18, duration=9)
        self.assertEqual(self.store.upsert(request).duration, 2)

    def test_update_request_reclamps_after_slot_change(self):
        """搬入時間を変えたら枠時間を補正し直す"""
        request = self.store.create_request("2024-05-01", "1A1", 9)
        self.store.update_duration(request.id, 6)

        updated = self.store.update_request(request.id, slot=17)
        self.assertEqual(updated.slot, 17)
        self.assertEqual(updated.duration, 3)

        updated = self.store.update_request(request.id, slot=SENTINEL_SLOT)
        self.assertEqual(updated.duration, 1)

    def test_update_request_unknown_id(self):
        self.assertIsNone(self.store.update_request("none", note="x"))

    def test_update_request_rejects_unknown_field(self):
        request = self.store.create_request("2024-05-01", "1A1", 9)
        with self.assertRaises(ValueError):
            self.store.update_request(request.id, id="other")

    def test_update_request_invalid_place(self):
        request = self.store.create_request("2024-05-01", "1A1", 9)
        with self.assertRaises(ValueError):
            self.store.update_request(request.id, place="X")
        self.assertEqual(self.store.get(request.id).place, "1A1")

    def test_update_duration(self):
        request = self.store.create_request("2024-05-01", "1A1", 9)
        self.assertEqual(self.store.update_duration(request.id, 4).duration, 4)
        self.assertEqual(self.store.update_duration(request.id, 100).duration, 11)
        self.assertIsNone(self.store.update_duration("none", 3))

    def test_delete(self):
        request = self.store.create_request("2024-05-01", "1A1", 9)
        self.assertTrue(self.store.delete(request.id))
        self.assertNotIn(request.id, self.store)
        self.assertEqual(len(self.store), 0)

    def test_delete_unknown_id_is_noop(self):
        """存在しないIDの削除はエラーにならず、一覧も変わらない"""
        self.store.create_request("2024-05-01", "1A1", 9)
        before = self.store.all()

        self.assertFalse(self.store.delete("does-not-exist"))
        self.assertEqual(self.store.all(), before)

    def test_snapshots_are_independent(self):
        """読み出した一覧を変更してもストアは変わらない"""
        self.store.create_request("2024-05-01", "1A1", 9)
        snapshot = self.store.all()
        snapshot.clear()
        self.assertEqual(len(self.store), 1)


class TestRequestStoreReads(unittest.TestCase):
    """日付ごとの一覧のテスト"""

    def setUp(self):
        self.store = RequestStore()
        self.store.create_request("2024-05-01", "2A1", 9)
        self.store.create_request("2024-05-01", "1A1", 13)
        self.store.create_request("2024-05-01", "1A1", SENTINEL_SLOT)
        self.store.create_request("2024-05-01", "1A1", 9)
        self.store.create_request("2024-05-02", "1A1", 7)

    def test_list_by_date_sorted_by_place_then_slot(self):
        requests = self.store.list_by_date("2024-05-01")
        self.assertEqual(
            [(r.place, r.slot) for r in requests],
            [("1A1", SENTINEL_SLOT), ("1A1", 9), ("1A1", 13), ("2A1", 9)]
        )

    def test_list_by_other_date(self):
        self.assertEqual(len(self.store.list_by_date("2024-05-02")), 1)
        self.assertEqual(self.store.list_by_date("2024-06-01"), [])


class TestRequestStorePersistence(unittest.TestCase):
    """保存・読み込みのテスト"""

    def setUp(self):
        self.tmp_dir = Path(tempfile.mkdtemp())
        self.path = self.tmp_dir / "data" / "haizai_db_v4.json"

    def tearDown(self):
        shutil.rmtree(self.tmp_dir)

    def test_autosave_and_reload(self):
        store = RequestStore(self.path)
        created = store.create_request("2024-05-01", "先付", 10, block="B", ship="2便", note="注意")
        store.update_duration(created.id, 3)

        reloaded = RequestStore(self.path)
        self.assertEqual(reloaded.load(), 1)
        self.assertEqual(reloaded.get(created.id), store.get(created.id))

    def test_saved_record_shape(self):
        """保存レコードはフラットな現行形式"""
        store = RequestStore(self.path)
        store.create_request("2024-05-01", "1A1", SENTINEL_SLOT)

        payload = json.loads(self.path.read_text(encoding="utf-8"))
        record = payload["requests"][0]
        self.assertEqual(
            list(record),
            ["id", "date", "place", "slot", "duration", "block", "ship", "note", "createdAt"]
        )
        self.assertEqual(record["slot"], "IA・VL")
        self.assertEqual(record["duration"], 1)

    def test_autosave_disabled(self):
        store = RequestStore(self.path, autosave=False)
        store.create_request("2024-05-01", "1A1", 9)
        self.assertFalse(self.path.exists())
        store.save()
        self.assertTrue(self.path.exists())

    def test_missing_file_loads_empty(self):
        store = RequestStore(self.path)
        self.assertEqual(store.load(), 0)
        self.assertEqual(store.all(), [])

    def test_corrupt_file_loads_empty(self):
        self.path.parent.mkdir(parents=True)
        self.path.write_text("{not json", encoding="utf-8")
        store = RequestStore(self.path)
        self.assertEqual(store.load(), 0)

    def test_load_upgrades_legacy_and_missing_duration(self):
        """旧形式・枠時間なしのレコードも読み込める"""
        self.path.parent.mkdir(parents=True)
        payload = {"requests": [
            {"id": "old", "deliveryDate": "2024-05-01", "place": "1A1", "slot": "9",
             "title": "Aブロック", "memo": "旧備考", "createdAt": 1},
            {"id": "cur", "date": "2024-05-01", "place": "1A1", "slot": 18, "duration": 7,
             "block": "", "ship": "", "note": "", "createdAt": 2},
            {"id": "bad", "date": "2024-05-01", "place": "不明", "slot": 9},
        ]}
        self.path.write_text(json.dumps(payload, ensure_ascii=False), encoding="utf-8")

        store = RequestStore(self.path)
        self.assertEqual(store.load(), 2)
        old = store.get("old")
        self.assertEqual((old.date, old.slot, old.duration, old.block, old.note),
                         ("2024-05-01", 9, 2, "Aブロック", "旧備考"))
        self.assertEqual(store.get("cur").duration, 2)

    def test_save_without_path(self):
        with self.assertRaises(ValueError):
            RequestStore().save()

    def test_custom_axis(self):
        store = RequestStore(axis=SlotAxis(start_hour=9, end_hour=17))
        with self.assertRaises(ValueError):
            store.create_request("2024-05-01", "1A1", 7)
        self.assertEqual(store.create_request("2024-05-01", "1A1", 17).duration, 1)


if __name__ == "__main__":
    unittest.main()
