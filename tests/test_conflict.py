# -*- coding: utf-8 -*-

import pytest

from metapick.market import MarketType
from metapick.consensus import pair_groups
from metapick.conflict import ConflictRule, match_rule, analyze_conflict

@pytest.mark.parametrize("agreeing,disagreeing,rule", [
    (1, 0, ConflictRule.TOO_FEW),
    (0, 2, ConflictRule.TOO_FEW),
    (1, 1, ConflictRule.ONE_VS_MANY),
    (1, 4, ConflictRule.ONE_VS_MANY),
    (2, 1, ConflictRule.TWO_VS_ONE),
    (2, 2, ConflictRule.SPLIT),
    (2, 3, ConflictRule.SPLIT),
    (3, 3, ConflictRule.SPLIT),
    (3, 1, ConflictRule.CONFLICT_PENALTY),
    (5, 2, ConflictRule.CONFLICT_PENALTY),
    (2, 0, ConflictRule.CLEAN),
    (4, 0, ConflictRule.CLEAN),
])
def test_decision_table(agreeing, disagreeing, rule):
    assert match_rule(agreeing, disagreeing) is rule

@pytest.mark.parametrize("agreeing,disagreeing,expected", [
    (1, 0, "1-vs-0 - need at least 2 agreeing, only have 1"),
    (1, 1, "1-vs-1 split - blocked"),
    (2, 1, "2-vs-1 - too close, conservative skip"),
    (2, 2, "2-vs-2 split consensus - blocked"),
    (3, 1, "3-vs-1 - consensus with conflict penalty"),
    (3, 0, "3-vs-0 - clean consensus"),
])
def test_reason(agreeing, disagreeing, expected):
    assert match_rule(agreeing, disagreeing).reason(agreeing, disagreeing) == expected

def test_only_penalty_and_clean_allow_pick():
    allowed = {rule for rule in ConflictRule if rule.allows_pick}
    assert allowed == {ConflictRule.CONFLICT_PENALTY, ConflictRule.CLEAN}

def test_analyze_conflict(make_pick):
    picks = [make_pick('shiva',  "OVER 225.5"),
             make_pick('ifrit',  "OVER 225.5"),
             make_pick('nexus',  "OVER 225.5"),
             make_pick('oracle', "UNDER 225.5")]
    over, under = sorted(pair_groups(picks, MarketType.TOTAL), key=lambda g: g.side)

    analysis = analyze_conflict(over)
    assert analysis.has_conflict
    assert analysis.can_generate_pick
    assert analysis.rule is ConflictRule.CONFLICT_PENALTY
    assert (analysis.agreement_count, analysis.disagreement_count) == (3, 1)

    analysis = analyze_conflict(under)
    assert not analysis.can_generate_pick
    assert analysis.rule is ConflictRule.ONE_VS_MANY
