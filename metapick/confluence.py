# -*- coding: utf-8 -*-

from typing import NamedTuple
from collections.abc import Sequence
from enum import Enum

from .pick import Pick, Factor

MIXED_DIRECTION_PENALTY = 0.5

STRONG_TIER_SCORE   = 7.0
MODERATE_TIER_SCORE = 5.0

####################
# FactorConfluence #
####################

class FactorConfluence(NamedTuple):
    """Agreement among cappers on an individual factor (i.e. how many of the
    agreeing cappers cited it as one of their top factors)
    """
    factor_key:       str
    factor_name:      str
    capper_ids:       tuple[str, ...]
    total_mentions:   int
    total_net_units:  float  # sum of net units of the mentioning cappers
    avg_contribution: float
    alignment_score:  float  # 0-1: share of cappers citing it (halved if mixed direction)

    def to_dict(self) -> dict:
        return self._asdict() | {'capper_ids': list(self.capper_ids)}

def confluence_rank(conf: FactorConfluence) -> tuple:
    """Most mentions first, then most net units behind the factor, then key (so
    that the ranking is fully deterministic)
    """
    return -conf.total_mentions, -conf.total_net_units, conf.factor_key

def analyze_factor_confluence(agreeing: Sequence[Pick]) -> list[FactorConfluence]:
    """Determine which factors are shared as top drivers across the agreeing
    picks, ranked by `confluence_rank()`
    """
    mentions: dict[str, tuple[str, list[Pick], list[float]]] = {}
    for pick in agreeing:
        for factor in pick.factors:
            if factor.key not in mentions:
                mentions[factor.key] = (factor.name, [], [])
            _, picks, values = mentions[factor.key]
            if pick in picks:
                continue
            picks.append(pick)
            values.append(factor.value)

    ncappers = len(agreeing)
    confluence = []
    for key, (name, picks, values) in mentions.items():
        same_direction = all(v >= 0 for v in values) or all(v <= 0 for v in values)
        mention_ratio = len(picks) / ncappers
        alignment = mention_ratio if same_direction else mention_ratio * MIXED_DIRECTION_PENALTY
        confluence.append(FactorConfluence(key,
                                           name,
                                           tuple(p.capper_id for p in picks),
                                           len(picks),
                                           round(sum(p.capper_net_units for p in picks), 2),
                                           round(sum(values) / len(values), 2),
                                           round(alignment, 2)))

    return sorted(confluence, key=confluence_rank)

def factor_alignment_points(confluence: Sequence[FactorConfluence], ncappers: int) -> float:
    """Points (max 3) for how aligned the top factors of the agreeing cappers are,
    used in tier grading
    """
    if not confluence or ncappers < 2:
        return 0.0
    top = confluence[0]
    if top.total_mentions == ncappers and top.alignment_score >= 0.9:
        return 3.0
    if top.alignment_score >= 0.75:
        return 2.0
    if top.alignment_score >= 0.5:
        return 1.5
    if top.total_mentions >= 2:
        return 1.0
    # no real alignment, but they still agree on the side
    return 0.5

#################
# CounterThesis #
#################

class CounterStrength(Enum):
    STRONG   = 'STRONG'
    MODERATE = 'MODERATE'
    WEAK     = 'WEAK'

class CounterThesis(NamedTuple):
    """Assessment of the strongest dissenting pick against a consensus
    """
    capper_id:  str
    tier:       str
    tier_score: float
    top_factor: Factor | None
    strength:   CounterStrength
    reason:     str

    def to_dict(self) -> dict:
        return {'capper_id':  self.capper_id,
                'tier':       self.tier,
                'tier_score': self.tier_score,
                'top_factor': self.top_factor.name if self.top_factor else None,
                'strength':   self.strength.value,
                'reason':     self.reason}

def analyze_counter_thesis(disagreeing: Sequence[Pick]) -> CounterThesis | None:
    """Characterize the case against the consensus, based on the highest-graded
    dissenting pick (`None` if there is no dissent)
    """
    if not disagreeing:
        return None

    # `sorted` is stable, so ties go to the first dissenter in group order
    dissenter = sorted(disagreeing, key=lambda p: -(p.tier_score or 0.0))[0]
    tier_score = dissenter.tier_score or 0.0
    tier = dissenter.tier or 'Common'
    if tier_score >= STRONG_TIER_SCORE:
        strength = CounterStrength.STRONG
        reason = f"{tier} tier pick with high confidence"
    elif tier_score >= MODERATE_TIER_SCORE:
        strength = CounterStrength.MODERATE
        reason = f"{tier} tier pick with moderate confidence"
    else:
        strength = CounterStrength.WEAK
        reason = f"{tier} tier pick - lower confidence"

    top_factor = dissenter.top_factor
    if top_factor:
        reason += f" (driven by {top_factor.name})"

    return CounterThesis(dissenter.capper_id, tier, tier_score, top_factor, strength, reason)
