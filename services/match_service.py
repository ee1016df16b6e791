# -*- coding: utf-8 -*-
"""
match_service.py
--------------------------------------------------------------------
判断缺陷是否属于某个测试用例：
- 缺陷的 jira_id 是自由文本工单号，用例由 project_id + code_ref 标识
- 六条规则按顺序组成规则链，任意一条成立即视为匹配；
  结果中记录第一条成立的规则，便于排查误匹配
- 另外提供描述文本的 Jaccard 相似度，用于提示“可能重复”的缺陷（仅提示，不合并）
所有函数均为纯函数，不抛异常。
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import partial
from itertools import combinations
from typing import Callable, Iterable, List, Optional, Sequence, Set, Tuple

from utils.identifiers import clean_text, normalize_identifier, trailing_number

_PUNCT_RE = re.compile(r"[^\w\s]")
_ASCII_DIGITS_RE = re.compile(r"[0-9]+")


@dataclass(frozen=True)
class MatchInput:
    ticket: str
    code_ref: str
    project_id: str


@dataclass(frozen=True)
class MatchResult:
    matched: bool
    rule: Optional[str] = None

    def __bool__(self):
        return self.matched

    def to_dict(self):
        return {"matched": self.matched, "rule": self.rule}


NO_MATCH = MatchResult(False)


# -------- 规则（顺序即优先级） --------
def exact_match(ctx: MatchInput) -> bool:
    return bool(ctx.code_ref) and ctx.code_ref == ctx.ticket


def composite_match(ctx: MatchInput) -> bool:
    if not ctx.code_ref or not ctx.project_id:
        return False
    return ctx.ticket == f"{ctx.project_id}-{ctx.code_ref}"


def code_ref_contains(ctx: MatchInput) -> bool:
    return bool(ctx.code_ref) and ctx.code_ref in ctx.ticket


def project_contains(ctx: MatchInput) -> bool:
    return bool(ctx.project_id) and ctx.project_id in ctx.ticket


def normalized_contains(ctx: MatchInput) -> bool:
    ticket = normalize_identifier(ctx.ticket)
    if not ticket:
        return False
    code_ref = normalize_identifier(ctx.code_ref)
    project_id = normalize_identifier(ctx.project_id)
    return bool(code_ref and code_ref in ticket) or bool(project_id and project_id in ticket)


def ticket_number_match(ctx: MatchInput, projects: Optional[Sequence[str]] = None) -> bool:
    """
    项目级工单约定 ``<project_id>-T<数字>``：比较工单与 code_ref 末尾数字的数值
    （T3 与 T003 视为同一用例，弥补补零 / 前缀不一致导致子串规则失效的情况）
    """
    if not ctx.code_ref or not ctx.project_id:
        return False
    if projects and ctx.project_id not in projects:
        return False
    prefix = f"{ctx.project_id}-T"
    if not ctx.ticket.upper().startswith(prefix.upper()):
        return False
    suffix = ctx.ticket[len(prefix):]
    if not _ASCII_DIGITS_RE.fullmatch(suffix):
        return False
    case_number = trailing_number(ctx.code_ref)
    return case_number is not None and int(suffix) == case_number


RULES = {
    "exact": exact_match,
    "composite": composite_match,
    "code_ref_contains": code_ref_contains,
    "project_contains": project_contains,
    "normalized_contains": normalized_contains,
    "ticket_number": ticket_number_match,
}

DEFAULT_RULE_ORDER = list(RULES)


class MatchResolver:
    """按配置的规则链判断 (缺陷, 用例) 是否匹配。"""

    def __init__(
        self,
        rules: Optional[Sequence[str]] = None,
        ticket_number_projects: Optional[Sequence[str]] = None,
    ):
        names = list(rules) if rules is not None else DEFAULT_RULE_ORDER
        unknown = [name for name in names if name not in RULES]
        if unknown:
            raise ValueError(f"未知的匹配规则: {unknown}，可选值 {DEFAULT_RULE_ORDER}")
        self.rule_names = names
        self._chain: List[Tuple[str, Callable[[MatchInput], bool]]] = []
        for name in names:
            predicate = RULES[name]
            if name == "ticket_number":
                predicate = partial(ticket_number_match, projects=ticket_number_projects or None)
            self._chain.append((name, predicate))

    @classmethod
    def from_config(cls, config) -> "MatchResolver":
        return cls(
            rules=config.get("MATCH_RULES"),
            ticket_number_projects=config.get("TICKET_NUMBER_PROJECTS"),
        )

    @staticmethod
    def build_input(defect, test_case) -> MatchInput:
        return MatchInput(
            ticket=clean_text(getattr(defect, "jira_id", None)),
            code_ref=clean_text(getattr(test_case, "code_ref", None)),
            project_id=clean_text(getattr(test_case, "project_id", None)),
        )

    def resolve(self, defect, test_case) -> MatchResult:
        ctx = self.build_input(defect, test_case)
        if not ctx.ticket:
            return NO_MATCH
        for name, predicate in self._chain:
            if predicate(ctx):
                return MatchResult(True, name)
        return NO_MATCH

    def matches(self, defect, test_case) -> bool:
        return self.resolve(defect, test_case).matched

    def matching_pairs(self, defects: Iterable, test_cases: Iterable) -> List[Tuple[object, object, str]]:
        """返回全部匹配的 (缺陷, 用例, 规则名)"""
        cases = list(test_cases)
        pairs = []
        for defect in defects:
            if not clean_text(getattr(defect, "jira_id", None)):
                continue
            for test_case in cases:
                result = self.resolve(defect, test_case)
                if result.matched:
                    pairs.append((defect, test_case, result.rule))
        return pairs


# -------- 描述相似度 --------
def tokenize(text: Optional[str]) -> Set[str]:
    if not text:
        return set()
    return set(_PUNCT_RE.sub("", str(text).lower()).split())


def similarity(text_a: Optional[str], text_b: Optional[str]) -> float:
    """Jaccard 系数 |A∩B| / |A∪B|，任一侧为空返回 0"""
    tokens_a = tokenize(text_a)
    tokens_b = tokenize(text_b)
    if not tokens_a or not tokens_b:
        return 0.0
    return len(tokens_a & tokens_b) / len(tokens_a | tokens_b)


@dataclass(frozen=True)
class PossibleDuplicate:
    test_case_id: str
    incident_a: str
    incident_b: str
    score: float

    def to_dict(self):
        return {
            "test_case_id": self.test_case_id,
            "incident_a": self.incident_a,
            "incident_b": self.incident_b,
            "score": round(self.score, 4),
        }


def find_possible_duplicates(test_case_id: str, incidents: Iterable, threshold: float = 0.60) -> List[PossibleDuplicate]:
    """同一用例下描述相似度严格大于阈值的缺陷两两成对返回"""
    ordered = sorted(incidents, key=lambda item: str(item.id))
    found = []
    for first, second in combinations(ordered, 2):
        score = similarity(getattr(first, "description", None), getattr(second, "description", None))
        if score > threshold:
            found.append(PossibleDuplicate(test_case_id, first.id, second.id, score))
    return found
