"""
ログ管理モジュール

このモジュールは、アプリケーション全体で使用されるログ機能を提供します。
設定（AppConfig）と連携し、ログレベルと出力先を設定します。

主な機能:
- コンソール出力（デバッグモードではカラー表示）
- ログファイルへの出力とローテーション
- 追加フィールド付きの構造化ログ（JSON 1行）
"""

import json
import logging
import logging.handlers
import sys
from typing import Optional

from .config import AppConfig, get_config

CONSOLE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


class ColoredFormatter(logging.Formatter):
    """カラー付きログフォーマッター"""

    # ANSIカラーコード
    COLORS = {
        'DEBUG': '\033[36m',    # シアン
        'INFO': '\033[32m',     # 緑
        'WARNING': '\033[33m',  # 黄
        'ERROR': '\033[31m',    # 赤
        'CRITICAL': '\033[35m', # マゼンタ
    }
    RESET = '\033[0m'

    def format(self, record):
        """ログレコードをフォーマット（他のハンドラーに色が漏れないようレベル名は戻す）"""
        levelname = record.levelname
        color = self.COLORS.get(levelname)
        if color:
            record.levelname = f"{color}{levelname}{self.RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = levelname


class StructuredFormatter(logging.Formatter):
    """構造化ログフォーマッター（1レコード = JSON 1行）"""

    def format(self, record):
        log_entry = {
            'timestamp': self.formatTime(record, DATE_FORMAT),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage()
        }

        # log_extra_fields で渡された追加フィールド
        fields = getattr(record, 'fields', None)
        if fields:
            log_entry['fields'] = fields

        if record.exc_info:
            log_entry['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_entry, ensure_ascii=False, default=str)


def parse_size(size_str: str) -> int:
    """サイズ文字列（例: 10MB）をバイト数に変換"""
    size_str = size_str.strip().upper()
    units = {'KB': 1024, 'MB': 1024 ** 2, 'GB': 1024 ** 3}
    for suffix, factor in units.items():
        if size_str.endswith(suffix):
            return int(size_str[:-2]) * factor
    return int(size_str)


class LoggerManager:
    """ログマネージャークラス"""

    def __init__(self):
        self._initialized = False

    def setup_logging(self, log_level: Optional[str] = None, config: Optional[AppConfig] = None) -> None:
        """ログ設定を初期化（2回目以降は何もしない）"""
        if self._initialized:
            return

        config = config or get_config()
        numeric_level = getattr(logging, (log_level or config.log_level).upper(), logging.INFO)

        root_logger = logging.getLogger()
        root_logger.setLevel(numeric_level)

        # 既存のハンドラーをクリア（Streamlitの再実行で二重登録しない）
        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)

        root_logger.addHandler(self._console_handler(config, numeric_level))
        root_logger.addHandler(self._file_handler(config, numeric_level))

        self._adjust_library_log_levels(config)

        self._initialized = True
        logging.getLogger(__name__).info("ログシステムを初期化しました")

    def reset(self) -> None:
        """ハンドラーを外して未初期化に戻す"""
        root_logger = logging.getLogger()
        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)
            handler.close()
        self._initialized = False

    def _console_handler(self, config: AppConfig, level: int) -> logging.Handler:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)

        # デバッグモードの場合はカラー付きフォーマッターを使用
        formatter_class = ColoredFormatter if config.debug else logging.Formatter
        console_handler.setFormatter(formatter_class(CONSOLE_FORMAT, datefmt=DATE_FORMAT))
        return console_handler

    def _file_handler(self, config: AppConfig, level: int) -> logging.Handler:
        config.log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            filename=config.log_file,
            maxBytes=parse_size(config.log_max_size),
            backupCount=config.log_backup_count,
            encoding='utf-8'
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(StructuredFormatter())
        return file_handler

    def _adjust_library_log_levels(self, config: AppConfig) -> None:
        """外部ライブラリのログレベルを調整"""
        logging.getLogger('streamlit').setLevel(logging.INFO)
        logging.getLogger('tornado').setLevel(logging.WARNING)

        # デバッグモードでない場合は、ファイル監視などの詳細なログを抑制
        if not config.debug:
            logging.getLogger('watchdog').setLevel(logging.WARNING)
            logging.getLogger('urllib3').setLevel(logging.WARNING)


# グローバルログマネージャーインスタンス
logger_manager = LoggerManager()


def setup_logging(log_level: Optional[str] = None, config: Optional[AppConfig] = None) -> None:
    """ログ設定を初期化"""
    logger_manager.setup_logging(log_level, config)


def get_logger(name: str) -> logging.Logger:
    """指定された名前のロガーを取得"""
    return logging.getLogger(name)


def log_extra_fields(logger: logging.Logger, level: int, message: str, **kwargs) -> None:
    """
    追加フィールド付きでログを出力

    コンソールには「メッセージ | {フィールド}」、ファイルには fields キーとして出力されます。
    """
    logger.log(level, f"{message} | {kwargs}", extra={'fields': kwargs})
