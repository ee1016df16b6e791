"""Field-level diff between a file-store record and its database counterpart."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, Iterable, Mapping, Optional

_MISSING = object()
_SCALAR_TYPES = (str, int, float, bool, type(None))


@dataclass(frozen=True)
class FieldChange:
    file_value: Any
    db_value: Any

    def to_dict(self):
        return {
            "file": None if self.file_value is _MISSING else self.file_value,
            "db": None if self.db_value is _MISSING else self.db_value,
        }


def _as_scalar(value):
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


def is_scalar(value) -> bool:
    return value is _MISSING or isinstance(value, _SCALAR_TYPES)


def diff_records(
    record_a: Mapping[str, Any],
    record_b: Mapping[str, Any],
    fields: Optional[Iterable[str]] = None,
) -> Dict[str, FieldChange]:
    """
    只比较标量字段（字符串 / 数字 / 布尔 / 以字符串表示的时间）
    - 任一侧为列表 / 字典的字段不参与比较，两个存储中子集合的顺序与 id 都不稳定
    - 两侧都缺失视为相等，只有一侧缺失视为不等
    - 返回空字典表示记录未变化，调用方跳过写入
    """
    record_a = record_a or {}
    record_b = record_b or {}
    keys = list(fields) if fields is not None else sorted(set(record_a) | set(record_b))
    changes: Dict[str, FieldChange] = {}
    for key in keys:
        value_a = _as_scalar(record_a.get(key, _MISSING))
        value_b = _as_scalar(record_b.get(key, _MISSING))
        if not is_scalar(value_a) or not is_scalar(value_b):
            continue
        if value_a is _MISSING and value_b is _MISSING:
            continue
        if value_a is _MISSING or value_b is _MISSING or value_a != value_b:
            changes[key] = FieldChange(value_a, value_b)
    return changes


def changes_to_dict(changes: Mapping[str, FieldChange]) -> Dict[str, Dict[str, Any]]:
    return {key: change.to_dict() for key, change in changes.items()}
