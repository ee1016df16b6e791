# -*- coding: utf-8 -*-
"""Ticket-style identifier helpers.

缺陷与测试用例之间通过自由文本的工单编号（如 ``KOIN-261-T003``）关联，
比较前需要统一格式：去掉所有非字母数字字符并转为大写。
"""

from __future__ import annotations

import re
from typing import Optional

_NON_ALNUM_RE = re.compile(r"[^0-9A-Za-z]+")
_TRAILING_DIGITS_RE = re.compile(r"([0-9]+)$")


def normalize_identifier(value: Optional[str]) -> str:
    """``"koin-261 t003"`` -> ``"KOIN261T003"``；``None`` / 空串返回 ``""``。"""

    if not value:
        return ""
    return _NON_ALNUM_RE.sub("", str(value)).upper()


def trailing_number(value: Optional[str]) -> Optional[int]:
    """返回末尾连续数字的数值（``"T003"`` -> ``3``），没有则返回 ``None``。"""

    if not value:
        return None
    match = _TRAILING_DIGITS_RE.search(str(value).strip())
    if not match:
        return None
    return int(match.group(1))


def clean_text(value: Optional[str]) -> str:
    if value is None:
        return ""
    return str(value).strip()
