# -*- coding: utf-8 -*-

from peewee import *

from ..core import cfg
from ..db_core import BaseModel
from ..game import Game
from ..pick import Pick, PickStatus, parse_factors

def meta_cappers() -> set[str]:
    """Return names of the meta-capper (and any legacy aliases), which are never
    counted as contributors to consensus
    """
    consensus = cfg.config('consensus') or {}
    names = set(consensus.get('exclude') or [])
    if consensus.get('meta_capper'):
        names.add(consensus['meta_capper'])
    return {n.lower() for n in names}

##########
# Capper #
##########

class Capper(BaseModel):
    """Opinion source (human or algorithm) whose picks may feed consensus.  The
    performance record is never stored here; it is always recomputed from graded
    picks (see `eligibility.compute_performance()`).
    """
    name         = TextField(unique=True)  # lowercase identifier (e.g. "shiva")
    display_name = TextField(null=True)
    about_me     = TextField(null=True)
    active       = BooleanField(default=True)

    def __str__(self) -> str:
        return self.display_name or self.name.upper()

    def __hash__(self) -> int:
        return hash((self.__class__, self.name))

    @classmethod
    def get_by_name(cls, capper_name: str) -> 'Capper':
        """Convenience method for retrieving capper by name
        """
        return cls.get(cls.name == capper_name.lower())

##############
# CapperPick #
##############

class CapperPick(BaseModel):
    """Represents both current (pending) and historical (graded) picks for all
    cappers.  A capper may submit more than one pick for the same game and market;
    only the most recent pending one counts toward consensus.

    `net_units` is the profit/loss delta booked when the pick is graded (null
    while pending); `tier`, `tier_score` and `factors` are the capper's own
    grading and rationale for the pick, as reported by the capper.
    """
    capper     = ForeignKeyField(Capper, backref='picks')
    game       = ForeignKeyField(Game, backref='capper_picks')
    market     = TextField()                 # raw market string (see `MarketType.parse`)
    selection  = TextField()                 # e.g. "OVER 225.5", "LAL -4.5"
    units      = FloatField(default=1.0)
    confidence = FloatField(default=0.0)
    status     = TextField(default=PickStatus.PENDING.value)
    net_units  = FloatField(null=True)
    tier       = TextField(null=True)
    tier_score = FloatField(null=True)
    factors    = TextField(null=True)        # json representation of factor list
    pick_ts    = DateTimeField()             # timestamp managed by framework

    class Meta:
        table_name = 'capper_pick'

    def get_pick(self) -> Pick:
        """Return the pure pick information, with persistence context removed
        """
        return Pick(id=self.id,
                    capper_id=self.capper.name,
                    game_id=self.game_id,
                    market=self.market,
                    selection=self.selection,
                    units=self.units or 1.0,
                    confidence=self.confidence or 0.0,
                    status=self.status,
                    pick_ts=self.pick_ts,
                    capper_name=self.capper.display_name,
                    tier=self.tier,
                    tier_score=self.tier_score,
                    factors=parse_factors(self.factors))
