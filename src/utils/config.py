"""
設定管理モジュール

このモジュールは、アプリケーション全体で使用される設定値を管理します。
環境変数から値を読み込み、適切なデフォルト値を提供します。
direnvとの連携を考慮し、開発環境での設定管理を簡素化します。

主な機能:
- 環境変数からの設定値読み込み
- デフォルト値の提供
- 設定値の型変換
- 設定値の検証
"""

import os
import logging
from typing import Optional
from dataclasses import dataclass
from pathlib import Path

from models.slot_models import SlotAxis, START_HOUR, END_HOUR, DEFAULT_DURATION
from algorithms.resize_controller import DEFAULT_UNIT_WIDTH
from .constants import DB_FILE_NAME


@dataclass
class AppConfig:
    """アプリケーション設定クラス"""

    # アプリケーション基本設定
    app_name: str
    app_version: str
    debug: bool
    log_level: str

    # 保存データ設定
    data_dir: Path
    db_file: Path
    autosave: bool

    # 時間軸設定
    start_hour: int
    end_hour: int
    default_duration: int

    # 伸縮ドラッグ設定
    resize_unit_width: int

    # Streamlit設定
    streamlit_server_port: int
    streamlit_server_address: str

    # ログ設定
    log_file: Path
    log_max_size: str
    log_backup_count: int

    def slot_axis(self) -> SlotAxis:
        """設定の開始・終了時刻から時間軸を作成"""
        return SlotAxis(start_hour=self.start_hour, end_hour=self.end_hour)


class ConfigManager:
    """設定管理クラス"""

    def __init__(self):
        """設定マネージャーを初期化"""
        self._config: Optional[AppConfig] = None
        self._logger = logging.getLogger(__name__)

    def load_config(self) -> AppConfig:
        """環境変数から設定を読み込み、AppConfigオブジェクトを返す"""
        if self._config is None:
            self._config = self._create_config()
        return self._config

    def _create_config(self) -> AppConfig:
        """環境変数から設定オブジェクトを作成"""

        # アプリケーション基本設定
        app_name = os.getenv('APP_NAME', '配材スケジューラ')
        app_version = os.getenv('APP_VERSION', '0.1.0')
        debug = self._parse_bool(os.getenv('DEBUG', 'false'))
        log_level = os.getenv('LOG_LEVEL', 'INFO')

        # 保存データ設定
        data_dir = Path(os.getenv('DATA_DIR', './data'))
        db_file = Path(os.getenv('DB_FILE', str(data_dir / DB_FILE_NAME)))
        autosave = self._parse_bool(os.getenv('AUTOSAVE', 'true'))

        # 時間軸設定
        start_hour = int(os.getenv('START_HOUR', str(START_HOUR)))
        end_hour = int(os.getenv('END_HOUR', str(END_HOUR)))
        default_duration = int(os.getenv('DEFAULT_DURATION', str(DEFAULT_DURATION)))

        # 伸縮ドラッグ設定
        resize_unit_width = int(os.getenv('RESIZE_UNIT_WIDTH', str(DEFAULT_UNIT_WIDTH)))

        # Streamlit設定
        streamlit_server_port = int(os.getenv('STREAMLIT_SERVER_PORT', '8501'))
        streamlit_server_address = os.getenv('STREAMLIT_SERVER_ADDRESS', '0.0.0.0')

        # ログ設定
        log_file = Path(os.getenv('LOG_FILE', './logs/app.log'))
        log_max_size = os.getenv('LOG_MAX_SIZE', '10MB')
        log_backup_count = int(os.getenv('LOG_BACKUP_COUNT', '5'))

        # 設定オブジェクトを作成
        config = AppConfig(
            app_name=app_name,
            app_version=app_version,
            debug=debug,
            log_level=log_level,
            data_dir=data_dir,
            db_file=db_file,
            autosave=autosave,
            start_hour=start_hour,
            end_hour=end_hour,
            default_duration=default_duration,
            resize_unit_width=resize_unit_width,
            streamlit_server_port=streamlit_server_port,
            streamlit_server_address=streamlit_server_address,
            log_file=log_file,
            log_max_size=log_max_size,
            log_backup_count=log_backup_count
        )

        # 設定の検証
        self._validate_config(config)

        # ログ出力
        self._log_config_summary(config)

        return config

    def _parse_bool(self, value: str) -> bool:
        """文字列をブール値に変換"""
        return value.lower() in ('true', '1', 'yes', 'on')

    def _validate_config(self, config: AppConfig) -> None:
        """設定値の検証"""
        errors = []

        # 保存先ディレクトリの存在確認
        if not config.db_file.parent.exists():
            self._logger.warning(f"データディレクトリが存在しません（保存時に作成します）: {config.db_file.parent}")

        # 時間軸設定の検証
        if not (0 <= config.start_hour <= 23):
            errors.append("START_HOURは0から23の間の値である必要があります")

        if not (0 <= config.end_hour <= 23):
            errors.append("END_HOURは0から23の間の値である必要があります")

        if config.start_hour > config.end_hour:
            errors.append("START_HOURはEND_HOUR以下である必要があります")

        if config.default_duration < 1:
            errors.append("DEFAULT_DURATIONは1以上の値である必要があります")

        # 伸縮ドラッグ設定の検証
        if config.resize_unit_width <= 0:
            errors.append("RESIZE_UNIT_WIDTHは正の値である必要があります")

        # ログ設定の検証
        if config.log_backup_count < 0:
            errors.append("LOG_BACKUP_COUNTは0以上の値である必要があります")

        # エラーがあれば例外を発生
        if errors:
            error_msg = "設定エラー:\n" + "\n".join(f"- {error}" for error in errors)
            raise ValueError(error_msg)

    def _log_config_summary(self, config: AppConfig) -> None:
        """設定の要約をログに出力"""
        self._logger.info("アプリケーション設定を読み込みました:")
        self._logger.info(f"  アプリ名: {config.app_name} v{config.app_version}")
        self._logger.info(f"  デバッグモード: {config.debug}")
        self._logger.info(f"  ログレベル: {config.log_level}")
        self._logger.info(f"  保存ファイル: {config.db_file}")
        self._logger.info(f"  時間軸: {config.start_hour:02d}:00〜{config.end_hour:02d}:00")
        self._logger.info(f"  Streamlit: {config.streamlit_server_address}:{config.streamlit_server_port}")
        self._logger.info(f"  ログファイル: {config.log_file}")


# グローバル設定インスタンス
config_manager = ConfigManager()


def get_config() -> AppConfig:
    """設定オブジェクトを取得"""
    return config_manager.load_config()


def reload_config() -> AppConfig:
    """設定を再読み込み"""
    config_manager._config = None
    return config_manager.load_config()
