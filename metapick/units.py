# -*- coding: utf-8 -*-

from typing import NamedTuple
from collections.abc import Sequence, Mapping
from types import MappingProxyType
import math

from .core import cfg, ConfigError
from .pick import Pick
from .consensus import ConsensusGroup
from .conflict import analyze_conflict
from .confluence import (FactorConfluence, CounterThesis, analyze_factor_confluence,
                         analyze_counter_thesis)

DFLT_CONFIDENCE = 5.0

##############
# UnitPolicy #
##############

DFLT_TIER_WEIGHTS = MappingProxyType({'Legendary': 5,
                                      'Elite':     4,
                                      'Rare':      3,
                                      'Uncommon':  2,
                                      'Common':    1})

class UnitPolicy(NamedTuple):
    """Tunable parameters for sizing a meta-pick.  The formula is:

      weight(pick)  = tier_weight(pick.tier) * tier_factor
                      + min(capper_net_units, net_units_cap) / net_units_scale
      base_units    = sum(units * weight) / sum(weight)     (agreeing picks)
      units         = base_units * consensus_mult[n_agreeing]
                      * conflict_mult[counter_strength]     (only if disagreeing)

    rounded half-up and clamped to [min_units, max_units].  The mapping params are
    read-only (shared default instances).
    """
    min_units:       int                 = 1
    max_units:       int                 = 5
    tier_factor:     float               = 2.0
    net_units_cap:   float               = 20.0
    net_units_scale: float               = 4.0
    consensus_mult:  Mapping[int, float] = MappingProxyType({2: 1.0, 3: 1.25, 4: 1.5})
    conflict_mult:   Mapping[str, float] = MappingProxyType({'STRONG': 0.5,
                                                           'MODERATE': 0.7,
                                                           'WEAK': 0.85})
    tier_weights:    Mapping[str, float] = DFLT_TIER_WEIGHTS

    @classmethod
    def from_config(cls) -> 'UnitPolicy':
        """Policy as specified in the `consensus` section of the config file (with
        defaults for anything not specified)
        """
        consensus = cfg.config('consensus') or {}
        params = dict(consensus.get('units') or {})
        unknown = set(params) - set(cls._fields)
        if unknown:
            raise ConfigError(f"Unknown unit policy params: {', '.join(sorted(unknown))}")
        if 'consensus_mult' in params:
            params['consensus_mult'] = {int(k): float(v) for k, v in params['consensus_mult'].items()}
        if consensus.get('tier_weights'):
            params['tier_weights'] = consensus['tier_weights']
        for key in ('consensus_mult', 'conflict_mult', 'tier_weights'):
            if key in params:
                params[key] = MappingProxyType(dict(params[key]))
        policy = cls(**params)
        if policy.min_units > policy.max_units:
            raise ConfigError("`min_units` may not exceed `max_units`")
        if policy.net_units_scale <= 0:
            raise ConfigError("`net_units_scale` must be positive")
        return policy

    def tier_weight(self, tier: str | None) -> float:
        return self.tier_weights.get(tier or 'Common') or 1

    def pick_weight(self, pick: Pick) -> float:
        net_units = min(max(pick.capper_net_units, 0.0), self.net_units_cap)
        return self.tier_weight(pick.tier) * self.tier_factor + net_units / self.net_units_scale

    def consensus_multiplier(self, agreeing: int) -> float:
        """Multiplier for the largest configured count not exceeding `agreeing`
        """
        counts = [n for n in self.consensus_mult if n <= agreeing]
        return self.consensus_mult[max(counts)] if counts else 1.0

    def conflict_multiplier(self, counter: CounterThesis | None) -> float:
        if not counter:
            return 1.0
        return self.conflict_mult.get(counter.strength.value, 1.0)

def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)

############
# UnitCalc #
############

class UnitCalc(NamedTuple):
    calculated_units:      int
    calculated_confidence: float
    tier_weighted_score:   float
    factor_confluence:     list[FactorConfluence]
    counter_thesis:        CounterThesis | None
    should_generate:       bool

def weighted_units(agreeing: Sequence[Pick], policy: UnitPolicy) -> tuple[float, float]:
    """Return weighted average units and weighted average tier score for the
    agreeing picks
    """
    total_weight = 0.0
    units_sum = 0.0
    tier_sum = 0.0
    for pick in agreeing:
        weight = policy.pick_weight(pick)
        total_weight += weight
        units_sum += pick.units * weight
        tier_sum += (pick.tier_score or 0.0) * weight
    if total_weight <= 0.0:
        return float(policy.min_units), 0.0
    return units_sum / total_weight, tier_sum / total_weight

def weighted_confidence(agreeing: Sequence[Pick], policy: UnitPolicy) -> float:
    total_weight = sum(policy.tier_weight(p.tier) for p in agreeing)
    if total_weight <= 0:
        return DFLT_CONFIDENCE
    return sum(p.confidence * policy.tier_weight(p.tier) for p in agreeing) / total_weight

def calculate_units(group: ConsensusGroup, policy: UnitPolicy = None) -> UnitCalc:
    """Compute the unit size (and supporting analysis) for a meta-pick on the
    group.  Factor confluence and counter-thesis are always computed (for audit);
    units and confidence are zero if the group cannot generate a pick.
    """
    policy = policy or UnitPolicy()
    conflict = analyze_conflict(group)
    confluence = analyze_factor_confluence(group.agreeing)
    counter = analyze_counter_thesis(group.disagreeing)
    if not conflict.can_generate_pick:
        return UnitCalc(0, 0.0, 0.0, confluence, counter, False)

    base_units, tier_score = weighted_units(group.agreeing, policy)
    units = base_units * policy.consensus_multiplier(conflict.agreement_count)
    if conflict.has_conflict:
        units *= policy.conflict_multiplier(counter)
    final_units = max(policy.min_units, min(policy.max_units, round_half_up(units)))
    confidence = weighted_confidence(group.agreeing, policy)

    return UnitCalc(final_units,
                    round(confidence, 2),
                    round(tier_score, 2),
                    confluence,
                    counter,
                    True)
