# -*- coding: utf-8 -*-
"""文件字段 -> 数据库值 的转换"""

from datetime import datetime

import pytest

from services.sync_adapters import Field, TestCaseAdapter, convert_value
from utils.exceptions import ValidationError


@pytest.mark.parametrize(
    "field_def, value, expected",
    [
        (Field("int"), "3", 3),
        (Field("int"), 4.0, 4),
        (Field("int", 0), None, 0),
        (Field("float"), "2.5", 2.5),
        (Field("bool", True), None, True),
        (Field("bool"), "Sí", True),
        (Field("bool"), "no", False),
        (Field("name"), "  Pagos ", "Pagos"),
        (Field(), "", ""),
        (Field("datetime"), "2024-05-01T08:30:00.000Z", datetime(2024, 5, 1, 8, 30)),
    ],
)
def test_convert_value(field_def, value, expected):
    assert convert_value(field_def, value, "field", "k1") == expected


@pytest.mark.parametrize(
    "field_def, value",
    [
        (Field("int"), "tres"),
        (Field("int"), 2.5),
        (Field("int"), True),
        (Field("bool"), "quizas"),
        (Field("datetime"), "ayer"),
        (Field("name", required=True), "  "),
    ],
)
def test_convert_value_rejects(field_def, value):
    with pytest.raises(ValidationError) as exc:
        convert_value(field_def, value, "field", "k1")
    assert exc.value.key == "k1"


def test_normalized_case_matches_database_shape():
    adapter = TestCaseAdapter()
    record = {
        "id": "tc-1",
        "name": " Login ",
        "project_id": "KOIN-261",
        "code_ref": "T003",
        "cycle": "2",
        "steps": [{"description": "a"}],
    }

    normalized = adapter.normalize(record)

    assert normalized["name"] == "Login"
    assert normalized["cycle"] == 2
    assert normalized["status"] is None
    assert "steps" not in normalized


def test_case_cycle_must_be_positive():
    adapter = TestCaseAdapter()

    with pytest.raises(ValidationError):
        adapter.normalize({"id": "tc-1", "name": "x", "project_id": "p", "code_ref": "T1", "cycle": 0})
