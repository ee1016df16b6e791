# constants/sync.py
"""
同步实体类型与固定的处理顺序
后面的实体在解析外键时依赖前面的实体已经写入数据库，因此顺序不可调整。
"""

from enum import Enum


class EntityType(Enum):
    TEAMS = "teams"
    CELLS = "cells"
    ANALYSTS = "analysts"
    PLANS = "plans"
    CASES = "cases"
    DEFECTS = "defects"
    PROJECTS = "projects"
    RELATIONS = "relations"

    @classmethod
    def values(cls):
        return [m.value for m in cls]


SYNC_ORDER = [
    EntityType.TEAMS,
    EntityType.CELLS,
    EntityType.ANALYSTS,
    EntityType.PLANS,
    EntityType.CASES,
    EntityType.DEFECTS,
    EntityType.PROJECTS,
    EntityType.RELATIONS,
]

# 每种实体对应的 JSON 文档
FILE_NAMES = {
    EntityType.TEAMS: "teams.json",
    EntityType.CELLS: "cells.json",
    EntityType.ANALYSTS: "analysts.json",
    EntityType.PLANS: "test-plans.json",
    EntityType.CASES: "test-cases.json",
    EntityType.DEFECTS: "incidents.json",
    EntityType.PROJECTS: "projects.json",
    EntityType.RELATIONS: "defect-relations.json",
}


def parse_entity_types(names):
    """["cases", "defects"] -> [EntityType.CASES, EntityType.DEFECTS]，按 SYNC_ORDER 排序"""
    if not names:
        return list(SYNC_ORDER)
    wanted = set()
    for name in names:
        try:
            wanted.add(EntityType(str(name).strip().lower()))
        except ValueError:
            raise ValueError(f"未知的实体类型: {name}，可选值 {EntityType.values()}")
    return [entity for entity in SYNC_ORDER if entity in wanted]
