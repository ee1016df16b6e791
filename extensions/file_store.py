"""JSON file store plus the per-run store handle."""
from __future__ import annotations

import json
import logging
import os
import tempfile
from contextlib import contextmanager
from typing import Any, Dict, Generator, List

from sqlalchemy import inspect, text
from sqlalchemy.exc import SQLAlchemyError

from extensions.database import db
from utils.exceptions import FatalStoreError

logger = logging.getLogger(__name__)


class JsonFileStore:
    """One JSON array document per entity type under ``data_dir``."""

    def __init__(self, data_dir: str) -> None:
        self.data_dir = data_dir

    def path_for(self, file_name: str) -> str:
        return os.path.join(self.data_dir, file_name)

    def exists(self, file_name: str) -> bool:
        return os.path.exists(self.path_for(file_name))

    def read(self, file_name: str) -> List[Dict[str, Any]]:
        """
        读取整个文档
        - 文件不存在视为空存储（首次同步）
        - 内容不是 JSON 数组时抛 FatalStoreError，避免之后整体重写把数据覆盖掉
        """
        path = self.path_for(file_name)
        if not os.path.exists(path):
            logger.info("文件存储 %s 不存在，按空集合处理", path)
            return []
        try:
            with open(path, "r", encoding="utf-8") as fh:
                content = fh.read()
        except OSError as exc:
            raise FatalStoreError(f"读取文件 {path} 失败: {exc}") from exc
        if not content.strip():
            return []
        try:
            data = json.loads(content)
        except json.JSONDecodeError as exc:
            raise FatalStoreError(f"文件 {path} 不是合法 JSON: {exc}") from exc
        if not isinstance(data, list):
            raise FatalStoreError(f"文件 {path} 的顶层结构必须是数组")
        return [item for item in data if isinstance(item, dict)]

    def write(self, file_name: str, records: List[Dict[str, Any]]) -> None:
        """整体替换文档：先写临时文件，再原子替换"""
        os.makedirs(self.data_dir, exist_ok=True)
        path = self.path_for(file_name)
        fd, tmp_path = tempfile.mkstemp(dir=self.data_dir, prefix=".sync-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(records, fh, ensure_ascii=False, indent=2)
                fh.write("\n")
            os.replace(tmp_path, path)
        except OSError as exc:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise FatalStoreError(f"写入文件 {path} 失败: {exc}") from exc


class StoreHandle:
    """一次同步运行共享的存储句柄：数据库会话 + 文件存储。"""

    def __init__(self, files: JsonFileStore, session=None) -> None:
        self.files = files
        self.session = session if session is not None else db.session

    def ping(self) -> None:
        try:
            self.session.execute(text("SELECT 1"))
        except SQLAlchemyError as exc:
            raise FatalStoreError(f"数据库不可用: {exc}") from exc

    def has_table(self, table_name: str) -> bool:
        try:
            return inspect(self.session.get_bind()).has_table(table_name)
        except SQLAlchemyError as exc:
            raise FatalStoreError(f"无法读取数据库结构: {exc}") from exc

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()

    def release(self) -> None:
        if hasattr(self.session, "remove"):
            self.session.remove()
        else:
            self.session.close()
        # 内存数据库的连接池就是数据本身，释放连接池会丢失全部数据
        if db.engine.url.database in (None, "", ":memory:"):
            return
        db.engine.dispose()


@contextmanager
def open_stores(app) -> Generator[StoreHandle, None, None]:
    """
    每次运行只打开一次存储连接，无论正常结束还是异常退出都会释放
    使用示例:
        with open_stores(app) as handle:
            SyncOrchestrator(handle).run()
    """
    with app.app_context():
        handle = StoreHandle(JsonFileStore(app.config["SYNC_DATA_DIR"]))
        try:
            handle.ping()
            yield handle
        finally:
            handle.release()
            logger.debug("存储连接已释放")
