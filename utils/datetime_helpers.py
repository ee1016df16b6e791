# -*- coding: utf-8 -*-
"""Datetime helpers for the file store <-> database conversion.

数据库中存储的 ``datetime`` 一律视为 UTC（无时区信息）。
文件存储中的时间字段使用与前端 ``Date.toISOString()`` 相同的格式
（``2024-05-01T08:30:00.000Z``），这里提供双向转换。
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any, Optional


def _ensure_utc(dt: datetime) -> datetime:
    """将给定 ``datetime`` 统一转换为带 UTC 时区的对象。"""

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_datetime(value: Any) -> Optional[datetime]:
    """解析文件中的时间字段，返回无时区的 UTC ``datetime``。

    :param value: ISO 8601 字符串 / ``datetime`` / ``date``；空值返回 ``None``。
    :raises ValueError: 字符串无法解析时抛出，由调用方决定是否跳过该记录。
    """

    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return _ensure_utc(value).replace(tzinfo=None)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if not isinstance(value, str):
        raise ValueError(f"无法解析的时间值: {value!r}")

    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    return _ensure_utc(parsed).replace(tzinfo=None)


def datetime_to_iso(dt: Optional[datetime]) -> Optional[str]:
    """将 ``datetime`` 格式化为 ``YYYY-MM-DDTHH:MM:SS.mmmZ``。

    :param dt: 需要转换的时间; ``None`` 时直接返回 ``None``。
    """

    if dt is None:
        return None
    utc = _ensure_utc(dt)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"


def utc_now() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)
