# -*- coding: utf-8 -*-

"""Confluence tier grading for meta-picks.  Five signals, max 12 points:

  1. Consensus strength (0.5-3): how many cappers agree
  2. Tier quality (0.5-3): average tier score of the agreeing picks
  3. Factor alignment (0-3): do the cappers share the same top factors?
  4. Counter-thesis weakness (0-2): how weak is the dissenting case?
  5. Meta-capper record (0-1): historical performance for the market

Tiers: Legendary >= 10, Elite >= 8, Rare >= 6, Uncommon >= 4, else Common.
"""

from typing import NamedTuple
from collections.abc import Sequence
from enum import Enum

from .pick import Pick
from .eligibility import Record
from .confluence import (FactorConfluence, CounterThesis, CounterStrength,
                         factor_alignment_points)

MIN_RECORD_PICKS = 10

class Tier(Enum):
    LEGENDARY = 'Legendary'
    ELITE     = 'Elite'
    RARE      = 'Rare'
    UNCOMMON  = 'Uncommon'
    COMMON    = 'Common'

# minimum score for each tier, in descending order
TIER_THRESHOLDS = [(10.0, Tier.LEGENDARY),
                   (8.0,  Tier.ELITE),
                   (6.0,  Tier.RARE),
                   (4.0,  Tier.UNCOMMON)]

def tier_for_score(score: float) -> Tier:
    for threshold, tier in TIER_THRESHOLDS:
        if score >= threshold:
            return tier
    return Tier.COMMON

###########
# Signals #
###########

def consensus_points(ncappers: int) -> float:
    if ncappers >= 4:
        return 3.0
    if ncappers == 3:
        return 2.0
    if ncappers == 2:
        return 1.0
    return 0.5

def tier_quality_points(agreeing: Sequence[Pick]) -> float:
    if not agreeing:
        return 0.0
    avg = sum(p.tier_score or 0.0 for p in agreeing) / len(agreeing)
    if avg >= 7:
        return 3.0
    if avg >= 6:
        return 2.5
    if avg >= 5:
        return 2.0
    if avg >= 4:
        return 1.0
    return 0.5

def counter_thesis_points(counter: CounterThesis | None) -> float:
    if not counter:
        return 2.0
    return {CounterStrength.WEAK:     1.5,
            CounterStrength.MODERATE: 1.0,
            CounterStrength.STRONG:   0.0}[counter.strength]

def record_points(record: Record | None) -> float:
    """Points for the meta-capper's own record in the market (insufficient or
    missing history earns nothing)
    """
    if record is None or record.wins + record.losses < MIN_RECORD_PICKS:
        return 0.0
    if record.win_rate >= 55.0:
        return 1.0
    if record.win_rate >= 52.0:
        return 0.5
    return 0.0

#############
# TierGrade #
#############

class TierGrade(NamedTuple):
    tier:      Tier
    score:     float
    breakdown: dict[str, float | str | None]

    def to_dict(self) -> dict:
        return {'tier': self.tier.value, 'score': self.score, 'breakdown': self.breakdown}

def grade_confluence(agreeing: Sequence[Pick],
                     confluence: Sequence[FactorConfluence],
                     counter: CounterThesis | None,
                     record: Record | None = None) -> TierGrade:
    """Compute the confluence score and tier for a meta-pick
    """
    ncappers = len(agreeing)
    breakdown = {'consensus':        consensus_points(ncappers),
                 'tier_quality':     tier_quality_points(agreeing),
                 'factor_alignment': factor_alignment_points(confluence, ncappers),
                 'counter_thesis':   counter_thesis_points(counter),
                 'record':           record_points(record)}
    score = round(sum(breakdown.values()), 1)
    breakdown |= {'capper_count':       ncappers,
                  'top_aligned_factor': confluence[0].factor_name if confluence else None,
                  'counter_strength':   counter.strength.value if counter else None}
    return TierGrade(tier_for_score(score), score, breakdown)
