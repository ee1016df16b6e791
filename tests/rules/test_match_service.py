# -*- coding: utf-8 -*-
"""匹配规则链与描述相似度"""

from types import SimpleNamespace

import pytest

from services.match_service import (
    DEFAULT_RULE_ORDER,
    MatchInput,
    MatchResolver,
    code_ref_contains,
    composite_match,
    exact_match,
    find_possible_duplicates,
    normalized_contains,
    project_contains,
    similarity,
    ticket_number_match,
)


def _defect(ticket, description=None, id="inc-1"):
    return SimpleNamespace(id=id, jira_id=ticket, description=description)


def _case(code_ref, project_id, id="tc-1"):
    return SimpleNamespace(id=id, code_ref=code_ref, project_id=project_id)


def test_each_rule_in_isolation():
    assert exact_match(MatchInput("T003", "T003", "KOIN-261"))
    assert not exact_match(MatchInput("T003", "", "KOIN-261"))

    assert composite_match(MatchInput("KOIN-261-T003", "T003", "KOIN-261"))
    assert not composite_match(MatchInput("KOIN-261-T004", "T003", "KOIN-261"))

    assert code_ref_contains(MatchInput("Falla en T003 login", "T003", "X"))
    assert project_contains(MatchInput("KOIN-261 regresion", "T999", "KOIN-261"))

    assert normalized_contains(MatchInput("koin 261/t003", "T-003", "OTHER"))
    assert not normalized_contains(MatchInput("", "T003", "KOIN-261"))


def test_composite_match_for_project_ticket():
    resolver = MatchResolver()

    result = resolver.resolve(_defect("KOIN-261-T003"), _case("T003", "KOIN-261"))

    assert result.matched
    assert result.rule == "composite"


def test_ticket_number_rule_ignores_zero_padding():
    ctx = MatchInput("KOIN-261-T3", "T003", "KOIN-261")

    assert ticket_number_match(ctx)
    assert not ticket_number_match(MatchInput("KOIN-261-T4", "T003", "KOIN-261"))
    assert not ticket_number_match(MatchInput("KOIN-261-T3a", "T003", "KOIN-261"))
    assert not ticket_number_match(ctx, projects=["PAY-100"])


def test_ticket_number_rule_alone_in_chain():
    resolver = MatchResolver(rules=["ticket_number"])

    result = resolver.resolve(_defect("koin-261-t03"), _case("T003", "KOIN-261"))

    assert result.matched
    assert result.rule == "ticket_number"


@pytest.mark.parametrize("ticket", ["KOIN-261-T²", "KOIN-261-T٣", "KOIN-261-T0²"])
def test_ticket_number_rule_ignores_non_ascii_digits(ticket):
    resolver = MatchResolver(rules=["ticket_number"])

    result = resolver.resolve(_defect(ticket), _case("T002", "KOIN-261"))

    assert not result.matched


def test_empty_ticket_never_matches():
    resolver = MatchResolver()

    assert not resolver.matches(_defect(None), _case("T003", "KOIN-261"))
    assert not resolver.matches(_defect("   "), _case("T003", "KOIN-261"))


def test_empty_code_ref_and_project_do_not_match_everything():
    resolver = MatchResolver()

    assert not resolver.matches(_defect("KOIN-261-T003"), _case("", ""))
    assert not resolver.matches(_defect("KOIN-261-T003"), _case(None, None))


def test_first_satisfied_rule_is_reported():
    resolver = MatchResolver()

    # exact 与 code_ref_contains 同时成立，返回顺序靠前的 exact
    result = resolver.resolve(_defect("T003"), _case("T003", "KOIN-261"))

    assert result.rule == "exact"
    assert result.to_dict() == {"matched": True, "rule": "exact"}


def test_rule_order_is_configurable():
    resolver = MatchResolver(rules=["code_ref_contains", "composite"])

    result = resolver.resolve(_defect("KOIN-261-T003"), _case("T003", "KOIN-261"))

    assert result.rule == "code_ref_contains"
    assert resolver.rule_names == ["code_ref_contains", "composite"]


def test_unknown_rule_is_rejected():
    with pytest.raises(ValueError):
        MatchResolver(rules=["exact", "fuzzy"])


def test_from_config_reads_rules_and_projects():
    resolver = MatchResolver.from_config({"MATCH_RULES": ["ticket_number"], "TICKET_NUMBER_PROJECTS": ["PAY-100"]})

    assert not resolver.matches(_defect("KOIN-261-T3"), _case("T003", "KOIN-261"))
    assert resolver.matches(_defect("PAY-100-T3"), _case("T003", "PAY-100"))
    assert MatchResolver.from_config({}).rule_names == DEFAULT_RULE_ORDER


def test_matching_pairs_skips_defects_without_ticket():
    resolver = MatchResolver()
    defects = [_defect("KOIN-261-T003", id="inc-1"), _defect("", id="inc-2")]
    cases = [_case("T003", "KOIN-261", id="tc-1"), _case("T010", "PAY-100", id="tc-2")]

    pairs = resolver.matching_pairs(defects, cases)

    assert [(d.id, c.id, rule) for d, c, rule in pairs] == [("inc-1", "tc-1", "composite")]


@pytest.mark.parametrize(
    "text_a, text_b",
    [
        ("Login falla", "login FALLA!"),
        ("uno dos tres", "cuatro cinco"),
        ("", "algo"),
        (None, None),
    ],
)
def test_similarity_is_bounded_and_symmetric(text_a, text_b):
    score = similarity(text_a, text_b)

    assert 0.0 <= score <= 1.0
    assert score == similarity(text_b, text_a)


def test_similarity_values():
    assert similarity("Login falla", "login falla.") == 1.0
    assert similarity("", "") == 0.0
    assert similarity("a b", "b c") == pytest.approx(1 / 3)


def test_find_possible_duplicates_uses_strict_threshold():
    incidents = [
        _defect("A", "error al iniciar sesion con usuario bloqueado en app", id="inc-2"),
        _defect("B", "error al iniciar sesion con usuario bloqueado en web", id="inc-1"),
        _defect("C", "el pago con tarjeta queda pendiente", id="inc-3"),
    ]

    found = find_possible_duplicates("tc-1", incidents, threshold=0.60)

    assert len(found) == 1
    assert (found[0].incident_a, found[0].incident_b) == ("inc-1", "inc-2")
    assert found[0].score == pytest.approx(0.8)
    assert find_possible_duplicates("tc-1", incidents, threshold=0.8) == []
