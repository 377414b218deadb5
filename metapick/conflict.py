# -*- coding: utf-8 -*-

from typing import NamedTuple
from enum import Enum

from .consensus import ConsensusGroup

MIN_AGREEING = 2

################
# ConflictRule #
################

class ConflictRule(Enum):
    """Named rules for the consensus decision table, listed in evaluation order
    (first matching rule wins).  Rules with `allows_pick == False` represent a
    deliberate decision not to pick (as distinct from a failure to evaluate).
    """
    ONE_VS_MANY      = ('1-vs-d', False)
    TOO_FEW          = ('too few', False)
    TWO_VS_ONE       = ('2-vs-1', False)
    SPLIT            = ('split', False)
    CONFLICT_PENALTY = ('conflict penalty', True)
    CLEAN            = ('clean', True)

    def __init__(self, label: str, allows_pick: bool):
        self.label = label
        self.allows_pick = allows_pick

    def reason(self, agreeing: int, disagreeing: int) -> str:
        split = f"{agreeing}-vs-{disagreeing}"
        return {ConflictRule.ONE_VS_MANY:      f"{split} split - blocked",
                ConflictRule.TOO_FEW:          f"{split} - need at least {MIN_AGREEING} agreeing, "
                                               f"only have {agreeing}",
                ConflictRule.TWO_VS_ONE:       f"{split} - too close, conservative skip",
                ConflictRule.SPLIT:            f"{split} split consensus - blocked",
                ConflictRule.CONFLICT_PENALTY: f"{split} - consensus with conflict penalty",
                ConflictRule.CLEAN:            f"{split} - clean consensus"}[self]

def match_rule(agreeing: int, disagreeing: int) -> ConflictRule:
    """Apply the decision table to agreement/disagreement counts.  Note that the
    2-vs-1 rule is a deliberate conservatism setting (a majority, but too thin
    to act on), not something derivable from the other rules.
    """
    if agreeing == 1 and disagreeing >= 1:
        return ConflictRule.ONE_VS_MANY
    if agreeing < MIN_AGREEING:
        return ConflictRule.TOO_FEW
    if agreeing == 2 and disagreeing == 1:
        return ConflictRule.TWO_VS_ONE
    if agreeing <= disagreeing:
        return ConflictRule.SPLIT
    if disagreeing > 0:
        return ConflictRule.CONFLICT_PENALTY
    return ConflictRule.CLEAN

####################
# ConflictAnalysis #
####################

class ConflictAnalysis(NamedTuple):
    has_conflict:       bool
    agreement_count:    int
    disagreement_count: int
    can_generate_pick:  bool
    rule:               ConflictRule
    reason:             str

def analyze_conflict(group: ConsensusGroup) -> ConflictAnalysis:
    """Determine whether the consensus group can generate a meta-pick
    """
    agreeing = group.agreement_count
    disagreeing = group.disagreement_count
    rule = match_rule(agreeing, disagreeing)
    return ConflictAnalysis(disagreeing > 0,
                            agreeing,
                            disagreeing,
                            rule.allows_pick,
                            rule,
                            rule.reason(agreeing, disagreeing))
