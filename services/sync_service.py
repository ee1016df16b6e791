# -*- coding: utf-8 -*-
"""
sync_service.py
--------------------------------------------------------------------
文件存储 <-> 数据库 双向同步。
每种实体走同一套状态序列（不允许跳步，也不允许回退）：
    LoadPrimary -> LoadSecondary -> CreateMissing -> UpdateChanged
    -> RemoveUnlisted -> RegenerateSecondarySnapshot -> Report
- CreateMissing：文件中有、数据库中没有的记录写入数据库
- UpdateChanged：两边都有且标量字段不同的记录，以文件为准覆盖数据库
- RemoveUnlisted：只对由文件维护的实体（测试计划、测试用例）开启，
  数据库中有、文件中没有的记录从数据库删除，计为 deleted
- RegenerateSecondarySnapshot：从数据库最终状态整体重写文件；
  文件中有但数据库最终没有的键计为 deleted
单条记录失败只回滚该记录并计数；FatalStoreError 中止整次运行。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional, Set, Tuple

from sqlalchemy.exc import OperationalError, SQLAlchemyError

from constants.sync import parse_entity_types
from extensions.file_store import JsonFileStore, StoreHandle
from extensions.logger import bind_run_id, reset_run_id
from services.diff_service import changes_to_dict, diff_records
from services.match_service import MatchResolver
from services.report_service import EntityReport, RunReport
from services.sync_adapters import EntityAdapter, build_adapters
from utils.exceptions import FatalStoreError, RecordSkipped

logger = logging.getLogger(__name__)


@dataclass
class RunContext:
    """一次运行内各实体阶段共享的状态，运行结束即丢弃"""
    report: RunReport
    resolver: MatchResolver
    files: Optional[JsonFileStore] = None
    allow_reference_fallback: bool = False
    duplicate_threshold: float = 0.60
    declared_links: Set[Tuple[str, str]] = field(default_factory=set)
    # 用例文件记录中 defects 字段的内容，只包含带有该字段的用例
    declared_defects: Dict[str, Set[str]] = field(default_factory=dict)
    affected_test_cases: Set[str] = field(default_factory=set)


class SyncPipeline:
    """单个实体类型的一次同步"""

    def __init__(self, adapter: EntityAdapter, handle: StoreHandle, context: RunContext):
        self.adapter = adapter
        self.handle = handle
        self.context = context
        self.report: EntityReport = context.report.for_entity(adapter.name)

    def run(self) -> EntityReport:
        logger.info("开始同步 %s (%s)", self.adapter.name, self.adapter.file_name)
        file_records = self.load_primary()
        db_rows = self.load_secondary()
        records = self._read(lambda: self.adapter.primary_records(file_records, self.context))
        keyed = self.key_records(records)
        self.create_missing(keyed, db_rows)
        self.update_changed(keyed, db_rows)
        self.remove_unlisted(keyed, db_rows)
        self._read(lambda: self.adapter.after_reconcile(self.context, self.report))
        self.regenerate_secondary_snapshot(file_records)
        logger.info(
            "%s 同步完成: 新建 %d, 更新 %d, 删除 %d, 跳过/错误 %d, 总数 %d",
            self.adapter.name, self.report.created, self.report.updated, self.report.deleted,
            self.report.skipped_or_errored, self.report.total,
        )
        return self.report

    # -------- LoadPrimary / LoadSecondary --------
    def load_primary(self) -> List[Dict[str, Any]]:
        return self.handle.files.read(self.adapter.file_name)

    def load_secondary(self) -> Dict[Any, Any]:
        # 预加载的子集合、关联表同样需要存在
        for table_name in self.adapter.table_names:
            if not self.handle.has_table(table_name):
                raise FatalStoreError(
                    f"数据表 {table_name} 不存在，请先执行 flask sync init-db 或数据库迁移"
                )
        return self._read(self.adapter.load_all)

    def _read(self, action: Callable[[], Any]) -> Any:
        """记录级事务之外的数据库访问；出错说明存储本身不可用"""
        try:
            return action()
        except SQLAlchemyError as exc:
            self.handle.rollback()
            raise FatalStoreError(f"读取 {self.adapter.table_name} 失败: {exc}") from exc

    def key_records(self, records: Iterable[Dict[str, Any]]) -> List[Tuple[Any, Dict[str, Any]]]:
        """计算同步键；缺键或文件内重复键的记录计为跳过"""
        keyed, seen = [], set()
        for index, record in enumerate(records):
            key = self.adapter.key_of_record(record)
            if key is None:
                self.report.record_skip(f"#{index}", "缺少同步键")
                logger.warning("%s 第 %d 条记录缺少同步键，已跳过", self.adapter.name, index)
                continue
            if key in seen:
                self.report.record_skip(key, "文件中存在重复键")
                logger.warning("%s 记录 %s 在文件中重复出现，只处理第一条", self.adapter.name, key)
                continue
            seen.add(key)
            keyed.append((key, record))
        return keyed

    # -------- CreateMissing --------
    def create_missing(self, keyed, db_rows):
        for key, record in keyed:
            if key in db_rows:
                continue
            created = self._apply(key, lambda record=record: self.adapter.create(record, self.context))
            if created:
                self.report.created += 1
                logger.debug("%s 新建 %s", self.adapter.name, key)

    # -------- UpdateChanged --------
    def update_changed(self, keyed, db_rows):
        if not self.adapter.compare_fields:
            return
        for key, record in keyed:
            row = db_rows.get(key)
            if row is None:
                continue
            try:
                normalized = self.adapter.normalize(record)
            except RecordSkipped as exc:
                self.report.record_skip(key, exc.reason)
                logger.warning("%s 记录 %s 无法解析，跳过更新: %s", self.adapter.name, key, exc.reason)
                continue
            current = self._read(lambda row=row: self.adapter.to_file_record(row))
            changes = diff_records(normalized, current, self.adapter.compare_fields)
            if not changes:
                continue
            updated = self._apply(
                key, lambda row=row, record=record: self.adapter.update(row, record, self.context) or True
            )
            if updated:
                self.report.record_update(key, changes_to_dict(changes))
                logger.info("%s 更新 %s: %s", self.adapter.name, key, ", ".join(sorted(changes)))

    # -------- RemoveUnlisted --------
    def remove_unlisted(self, keyed, db_rows):
        """数据库中有、文件中没有的记录从数据库删除；文件不存在时不删除任何记录"""
        if not self.adapter.remove_unlisted:
            return
        if not self.handle.files.exists(self.adapter.file_name):
            logger.info("%s 不存在，不处理 %s 的删除", self.adapter.file_name, self.adapter.name)
            return
        file_keys = {key for key, _ in keyed}
        for key in sorted(set(db_rows) - file_keys, key=str):
            removed = self._apply(
                key, lambda row=db_rows[key]: self.adapter.delete(row, self.context) or True
            )
            if removed:
                self.report.record_removal(key)
                logger.info("%s 记录 %s 已不在文件中，从数据库删除", self.adapter.name, key)

    # -------- RegenerateSecondarySnapshot --------
    def regenerate_secondary_snapshot(self, file_records: List[Dict[str, Any]]):
        final_rows = self._read(self.adapter.load_all)
        file_keys = {self.adapter.key_of_record(record) for record in file_records}
        file_keys.discard(None)
        for key in sorted(file_keys - set(final_rows), key=str):
            self.report.record_removal(key)
            logger.info("%s 记录 %s 不在数据库中，从文件快照移除", self.adapter.name, key)
        records = self.snapshot_records(final_rows)
        self.handle.files.write(self.adapter.file_name, records)
        self.report.total = len(records)

    def snapshot_records(self, rows: Dict[Any, Any]) -> List[Dict[str, Any]]:
        return self._read(lambda: [self.adapter.to_file_record(row) for row in rows.values()])

    def refresh_snapshot(self):
        """只按数据库当前状态重写文件，不计删除（其他实体阶段改动了本实体时使用）"""
        rows = self._read(self.adapter.load_all)
        self.handle.files.write(self.adapter.file_name, self.snapshot_records(rows))
        logger.info("已刷新 %s 文件快照", self.adapter.file_name)

    # -------- 单条记录事务 --------
    def _apply(self, key, action: Callable[[], Any]) -> bool:
        try:
            result = action()
            self.handle.commit()
        except FatalStoreError:
            self.handle.rollback()
            raise
        except RecordSkipped as exc:
            self.handle.rollback()
            self.report.record_skip(key, exc.reason)
            logger.warning("%s 记录 %s 已跳过: %s", self.adapter.name, key, exc.reason)
            return False
        except OperationalError as exc:
            self.handle.rollback()
            raise FatalStoreError(f"数据库不可用: {exc}") from exc
        except SQLAlchemyError as exc:
            self.handle.rollback()
            reason = str(getattr(exc, "orig", None) or exc)
            self.report.record_error(key, reason)
            logger.error("%s 记录 %s 写入失败: %s", self.adapter.name, key, reason)
            return False
        except (ValueError, TypeError, KeyError) as exc:
            self.handle.rollback()
            self.report.record_error(key, str(exc))
            logger.exception("%s 记录 %s 处理异常", self.adapter.name, key)
            return False
        return result is not None


class SyncOrchestrator:
    """按依赖顺序逐个实体执行同步，汇总为一份 RunReport"""

    def __init__(self, handle: StoreHandle, config, resolver: Optional[MatchResolver] = None):
        self.handle = handle
        self.config = config
        self.resolver = resolver or MatchResolver.from_config(config)
        self.adapters = build_adapters()

    def new_context(self, report: RunReport) -> RunContext:
        return RunContext(
            report=report,
            resolver=self.resolver,
            files=self.handle.files,
            allow_reference_fallback=bool(self.config.get("SYNC_REFERENCE_FALLBACK", False)),
            duplicate_threshold=float(self.config.get("DUPLICATE_SIMILARITY_THRESHOLD", 0.60)),
        )

    def run(self, entities: Optional[Iterable[str]] = None, run_id: Optional[str] = None) -> RunReport:
        """
        执行一次同步
        :param entities: 只同步指定实体（仍按依赖顺序执行），None 表示全部
        :raises FatalStoreError: 存储不可用 / 表不存在 / 文件无法解析；报告中记录中止原因后重新抛出
        """
        entity_types = parse_entity_types(entities)
        report = RunReport(run_id=run_id)
        context = self.new_context(report)
        token = bind_run_id(report.run_id)
        logger.info("同步运行 %s 开始，实体: %s", report.run_id, ", ".join(e.value for e in entity_types))
        try:
            for entity in entity_types:
                adapter = self.adapters[entity]
                SyncPipeline(adapter, self.handle, context).run()
                for dependent in adapter.dependent_snapshots:
                    SyncPipeline(self.adapters[dependent], self.handle, context).refresh_snapshot()
        except FatalStoreError as exc:
            logger.error("同步运行 %s 中止: %s", report.run_id, exc.message)
            report.finish(fatal_error=exc.message)
            self._emit(report)
            raise
        else:
            report.finish()
            self._emit(report)
        finally:
            reset_run_id(token)
        return report

    def _emit(self, report: RunReport):
        report.log_summary()
        if self.config.get("SYNC_WRITE_REPORT"):
            try:
                report.write_json(self.config["SYNC_RESULTS_DIR"])
            except OSError as exc:
                logger.error("写入同步报告失败: %s", exc)

    def refresh_snapshots(self, entities: Iterable[str]):
        """同步流程之外修改了数据库（例如通过 API 删除关联）后，按数据库当前状态重写对应文件"""
        context = self.new_context(RunReport())
        for entity in parse_entity_types(entities):
            SyncPipeline(self.adapters[entity], self.handle, context).refresh_snapshot()
