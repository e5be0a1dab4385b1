#!/usr/bin/env python3
"""
配材スケジューラ - メインエントリーポイント

このファイルは、アプリケーションを起動するためのメインエントリーポイントです。
設定を読み込み、ログシステムを初期化してからStreamlitアプリを起動します。
"""

import sys
import os

# プロジェクトルートをパスに追加
sys.path.append(os.path.join(os.path.dirname(__file__), 'src'))


def main():
    import streamlit.web.cli as stcli
    from utils.config import get_config
    from utils.logger import setup_logging, get_logger

    config = get_config()
    setup_logging()
    logger = get_logger(__name__)

    app_path = os.path.join(os.path.dirname(__file__), "src", "app", "haizai_schedule_app.py")
    if not os.path.exists(app_path):
        logger.error(f"アプリケーションファイルが見つかりません: {app_path}")
        sys.exit(1)

    logger.info(f"{config.app_name} v{config.app_version} を起動しています...")
    logger.info(f"ブラウザで http://localhost:{config.streamlit_server_port} にアクセスしてください")

    sys.argv = [
        "streamlit", "run", app_path,
        f"--server.port={config.streamlit_server_port}",
        f"--server.address={config.streamlit_server_address}",
    ]
    sys.exit(stcli.main())


if __name__ == "__main__":
    main()
