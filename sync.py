# -*- coding: utf-8 -*-
"""
命令行入口：
    python sync.py                 # 同步全部实体
    python sync.py cases defects   # 只同步指定实体（仍按依赖顺序）
退出码：0 = 运行完成（允许部分记录被跳过）；1 = 致命错误或未处理异常
"""

import logging
import os
import sys

from app import create_app
from extensions.file_store import open_stores
from services.sync_service import SyncOrchestrator
from utils.exceptions import FatalStoreError

logger = logging.getLogger("sync")


def main(argv=None, app=None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    if app is None:
        app = create_app(os.getenv("APP_ENV", "development"))
    try:
        with open_stores(app) as handle:
            report = SyncOrchestrator(handle, app.config).run(argv or None)
    except FatalStoreError as exc:
        logger.error("同步中止: %s", exc.message)
        return 1
    except ValueError as exc:
        logger.error("参数错误: %s", exc)
        return 1
    except Exception:
        logger.exception("同步过程中出现未处理异常")
        return 1
    logger.info("同步运行 %s 完成", report.run_id)
    return 0


if __name__ == "__main__":
    sys.exit(main())
