# -*- coding: utf-8 -*-

from typing import NamedTuple
from datetime import datetime
from enum import Enum
import json

from .core import log
from .market import Side

MAX_FACTORS = 3

##############
# PickStatus #
##############

class PickStatus(Enum):
    PENDING = 'pending'
    WON     = 'won'
    LOST    = 'lost'
    PUSH    = 'push'

    @property
    def is_graded(self) -> bool:
        return self is not PickStatus.PENDING

GRADED_STATUSES = tuple(s.value for s in PickStatus if s.is_graded)

##########
# Factor #
##########

class Factor(NamedTuple):
    """One of the signals a capper cited as driving its pick
    """
    key:    str
    name:   str
    value:  float  # normalized contribution (typically -3 to +3)
    weight: float = 1.0

def parse_factors(raw: str | list | dict | None) -> tuple[Factor, ...]:
    """Return the top factors (by absolute contribution) from a capper's factor
    data, which may be JSON text, a list of factor dicts, or a dict with a
    `factors` list (insight card format).  Malformed entries are skipped.
    """
    if not raw:
        return ()
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError:
            log.info(f"Unparseable factor data '{raw[:40]}', ignoring")
            return ()
    if isinstance(raw, dict):
        raw = raw.get('factors')
    if not isinstance(raw, list):
        return ()

    factors = []
    for entry in raw:
        if not isinstance(entry, dict) or not entry.get('key'):
            continue
        value = entry.get('normalized_value', entry.get('value'))
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            continue
        factors.append(Factor(entry['key'],
                              entry.get('name') or entry['key'],
                              float(value),
                              float(entry.get('weight') or 1.0)))
    factors.sort(key=lambda f: abs(f.value), reverse=True)
    return tuple(factors[:MAX_FACTORS])

########
# Pick #
########

class Pick(NamedTuple):
    """Pick by an individual capper for an individual game and market.  `market`
    is the raw market string from the pick source; `side` is populated only once
    the selection has been parsed (see `consensus.parse_picks()`), and
    `capper_net_units` once the capper's performance is known.
    """
    id:               int | str
    capper_id:        str
    game_id:          int | str
    market:           str
    selection:        str
    units:            float
    confidence:       float
    status:           str = PickStatus.PENDING.value
    pick_ts:          datetime | None = None
    capper_name:      str | None = None
    tier:             str | None = None
    tier_score:       float | None = None
    factors:          tuple[Factor, ...] = ()
    capper_net_units: float = 0.0
    side:             Side | None = None

    @property
    def is_pending(self) -> bool:
        return self.status == PickStatus.PENDING.value

    @property
    def display_name(self) -> str:
        return self.capper_name or self.capper_id.upper()

    @property
    def top_factor(self) -> Factor | None:
        return self.factors[0] if self.factors else None
