# -*- coding: utf-8 -*-

from typing import NamedTuple

from .core import log
from .market import MarketType, TotalSide, SpreadSide, MoneylineSide
from .eligibility import Record
from .consensus import ConsensusGroup
from .conflict import ConflictRule, analyze_conflict
from .confluence import FactorConfluence, CounterThesis
from .units import UnitPolicy, calculate_units
from .tier import TierGrade, grade_confluence

MIN_ALIGNED_MENTIONS = 2

############
# Decision #
############

class Decision(NamedTuple):
    """Meta-pick decision for a consensus group.  Note that a blocked decision
    (`should_generate == False`) is the result of a successful evaluation; the
    `rule` says why no pick was made.
    """
    should_generate:     bool
    game_id:             int | str
    market:              MarketType
    side:                str
    line:                float | None
    selection:           str
    units:               int
    confidence:          float
    reason:              str
    rule:                ConflictRule
    agreement_count:     int
    disagreement_count:  int
    capper_ids:          tuple[str, ...]
    factor_confluence:   tuple[FactorConfluence, ...]
    counter_thesis:      CounterThesis | None
    tier_weighted_score: float = 0.0
    tier_grade:          TierGrade | None = None

    def to_record(self) -> dict:
        """Plain (JSON-serializable) representation, for persistence or display by
        the caller
        """
        return {'should_generate':     self.should_generate,
                'game_id':             self.game_id,
                'market':              self.market.value,
                'side':                self.side,
                'line':                self.line,
                'selection':           self.selection,
                'units':               self.units,
                'confidence':          self.confidence,
                'reason':              self.reason,
                'rule':                self.rule.name,
                'agreement_count':     self.agreement_count,
                'disagreement_count':  self.disagreement_count,
                'contributing_capper_ids': list(self.capper_ids),
                'factor_confluence':   [f.to_dict() for f in self.factor_confluence],
                'counter_thesis':      self.counter_thesis.to_dict() if self.counter_thesis else None,
                'tier_weighted_score': self.tier_weighted_score,
                'tier_grade':          self.tier_grade.to_dict() if self.tier_grade else None}

def format_selection(group: ConsensusGroup) -> str:
    """Selection string for a meta-pick on the group, using the consensus line
    (e.g. "OVER 225.5", "LAL -4.5")
    """
    if group.market is MarketType.TOTAL:
        return TotalSide(group.side, group.line).selection
    if group.market is MarketType.SPREAD:
        return SpreadSide(group.side, group.line).selection
    return MoneylineSide(group.side).selection

def decide(group: ConsensusGroup, policy: UnitPolicy = None, record: Record = None) -> Decision:
    """Evaluate a consensus group, and return the meta-pick decision

    :param group: consensus group (with disagreeing picks, if opposed)
    :param policy: unit sizing policy (default policy, if not specified)
    :param record: meta-capper's record for the market (for tier grading)
    :return: decision (generate or not, with supporting analysis)
    """
    conflict = analyze_conflict(group)
    calc = calculate_units(group, policy)
    names = ', '.join(p.display_name for p in group.agreeing)
    common = {'game_id':            group.game_id,
              'market':             group.market,
              'side':               group.side,
              'line':               group.line,
              'selection':          format_selection(group),
              'rule':               conflict.rule,
              'agreement_count':    conflict.agreement_count,
              'disagreement_count': conflict.disagreement_count,
              'capper_ids':         tuple(group.capper_ids),
              'factor_confluence':  tuple(calc.factor_confluence),
              'counter_thesis':     calc.counter_thesis}

    if not calc.should_generate:
        log.debug(f"Game {group.game_id} {group.market} {group.side}: {conflict.reason}")
        return Decision(should_generate=False,
                        units=0,
                        confidence=0.0,
                        reason=conflict.reason,
                        **common)

    reason = f"{conflict.reason} from {names}"
    if calc.factor_confluence:
        top = calc.factor_confluence[0]
        if top.total_mentions >= MIN_ALIGNED_MENTIONS:
            reason += (f" | Factor alignment: {top.factor_name} "
                       f"({top.total_mentions}/{conflict.agreement_count} cappers)")
    grade = grade_confluence(group.agreeing, calc.factor_confluence, calc.counter_thesis, record)
    log.info(f"Game {group.game_id} {group.market}: {common['selection']} "
             f"{calc.calculated_units}u ({grade.tier.value}) - {reason}")
    return Decision(should_generate=True,
                    units=calc.calculated_units,
                    confidence=calc.calculated_confidence,
                    reason=reason,
                    tier_weighted_score=calc.tier_weighted_score,
                    tier_grade=grade,
                    **common)
