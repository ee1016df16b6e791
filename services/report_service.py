# -*- coding: utf-8 -*-
"""
report_service.py
--------------------------------------------------------------------
同步运行报告：
- 按实体类型统计 created / updated / deleted / skipped / errored / total
- 记录跳过原因、更新字段差异、状态变更、删除的缺陷关联与可能重复的缺陷
- summary_lines() 生成结束时打印的人类可读摘要；write_json() 持久化机器可读报告
只做统计与输出，不修改任何存储。
"""

from __future__ import annotations

import json
import logging
import os
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from utils.datetime_helpers import datetime_to_iso, utc_now

logger = logging.getLogger(__name__)


@dataclass
class EntityReport:
    entity: str
    created: int = 0
    updated: int = 0
    deleted: int = 0
    skipped: int = 0
    errored: int = 0
    total: int = 0
    issues: List[Dict[str, Any]] = field(default_factory=list)
    changes: List[Dict[str, Any]] = field(default_factory=list)
    removed_keys: List[str] = field(default_factory=list)

    @property
    def skipped_or_errored(self) -> int:
        return self.skipped + self.errored

    def record_skip(self, key, reason: str):
        self.skipped += 1
        self.issues.append({"key": _key_text(key), "kind": "skipped", "reason": reason})

    def record_error(self, key, reason: str):
        self.errored += 1
        self.issues.append({"key": _key_text(key), "kind": "errored", "reason": reason})

    def record_update(self, key, diff: Dict[str, Any]):
        self.updated += 1
        self.changes.append({"key": _key_text(key), "fields": diff})

    def record_removal(self, key):
        self.deleted += 1
        self.removed_keys.append(_key_text(key))

    def to_dict(self):
        return {
            "entity": self.entity,
            "created": self.created,
            "updated": self.updated,
            "deleted": self.deleted,
            "skipped": self.skipped,
            "errored": self.errored,
            "skipped_or_errored": self.skipped_or_errored,
            "total": self.total,
            "issues": self.issues,
            "changes": self.changes,
            "removed": self.removed_keys,
        }


def _key_text(key) -> str:
    if isinstance(key, tuple):
        return "/".join(str(part) for part in key)
    return str(key)


class RunReport:
    """一次完整同步运行的汇总"""

    def __init__(self, run_id: Optional[str] = None):
        self.run_id = run_id or uuid.uuid4().hex
        self.started_at: datetime = utc_now()
        self.finished_at: Optional[datetime] = None
        self.entities: Dict[str, EntityReport] = {}
        self.status_transitions: List[Dict[str, Any]] = []
        self.removed_relations: List[Dict[str, Any]] = []
        self.possible_duplicates: List[Dict[str, Any]] = []
        self.fatal_error: Optional[str] = None

    def for_entity(self, entity: str) -> EntityReport:
        if entity not in self.entities:
            self.entities[entity] = EntityReport(entity=entity)
        return self.entities[entity]

    def finish(self, fatal_error: Optional[str] = None):
        self.finished_at = utc_now()
        self.fatal_error = fatal_error

    @property
    def totals(self) -> Dict[str, int]:
        keys = ("created", "updated", "deleted", "skipped", "errored", "total")
        totals = {key: sum(getattr(item, key) for item in self.entities.values()) for key in keys}
        totals["skipped_or_errored"] = totals["skipped"] + totals["errored"]
        return totals

    def summary_lines(self) -> List[str]:
        lines = [f"同步运行 {self.run_id} 结果汇总:"]
        header = f"  {'实体':<10}{'新建':>6}{'更新':>6}{'删除':>6}{'跳过/错误':>10}{'总数':>6}"
        lines.append(header)
        for item in self.entities.values():
            lines.append(
                f"  {item.entity:<10}{item.created:>6}{item.updated:>6}{item.deleted:>6}"
                f"{item.skipped_or_errored:>10}{item.total:>6}"
            )
        totals = self.totals
        lines.append(
            f"  {'合计':<10}{totals['created']:>6}{totals['updated']:>6}{totals['deleted']:>6}"
            f"{totals['skipped_or_errored']:>10}{totals['total']:>6}"
        )
        if self.status_transitions:
            lines.append(f"  用例状态变更: {len(self.status_transitions)}")
        if self.removed_relations:
            lines.append(f"  删除的缺陷关联: {len(self.removed_relations)}")
        if self.possible_duplicates:
            lines.append(f"  可能重复的缺陷: {len(self.possible_duplicates)} 对")
            for dup in self.possible_duplicates:
                lines.append(
                    f"    - 用例 {dup['test_case_id']}: {dup['incident_a']} ~ {dup['incident_b']}"
                    f" (相似度 {dup['score']:.2f})"
                )
        if self.fatal_error:
            lines.append(f"  运行中止: {self.fatal_error}")
        return lines

    def log_summary(self):
        for line in self.summary_lines():
            logger.info(line)

    def to_dict(self):
        return {
            "run_id": self.run_id,
            "started_at": datetime_to_iso(self.started_at),
            "finished_at": datetime_to_iso(self.finished_at),
            "fatal_error": self.fatal_error,
            "totals": self.totals,
            "entities": [item.to_dict() for item in self.entities.values()],
            "status_transitions": self.status_transitions,
            "removed_relations": self.removed_relations,
            "possible_duplicates": self.possible_duplicates,
        }

    def write_json(self, results_dir: str) -> str:
        os.makedirs(results_dir, exist_ok=True)
        stamp = self.started_at.strftime("%Y%m%d-%H%M%S")
        path = os.path.join(results_dir, f"sync-report-{stamp}-{self.run_id[:8]}.json")
        with open(path, "w", encoding="utf-8") as fh:
            json.dump(self.to_dict(), fh, ensure_ascii=False, indent=2)
        logger.info("同步报告已写入 %s", path)
        return path
