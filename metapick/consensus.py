# -*- coding: utf-8 -*-

from typing import NamedTuple
from collections import Counter
from collections.abc import Iterable
from enum import Enum

from .core import log, InvalidMarket, LogicError
from .market import MarketType, parse_side, is_known, opposite_direction
from .pick import Pick

################
# RejectedPick #
################

class RejectKind(Enum):
    MARKET = 'market'  # market string not recognized
    PARSE  = 'parse'   # selection not interpretable as a side of the market

class RejectedPick(NamedTuple):
    pick_id:   int | str
    capper_id: str
    game_id:   int | str
    kind:      str
    message:   str

def reject(pick: Pick, kind: RejectKind, message: str) -> RejectedPick:
    log.info(f"Pick {pick.id} ({pick.capper_id}) rejected [{kind.value}]: {message}")
    return RejectedPick(pick.id, pick.capper_id, pick.game_id, kind.value, message)

##################
# ConsensusGroup #
##################

class ConsensusGroup(NamedTuple):
    """Picks sharing one side for a game and market (`agreeing`), along with the
    picks for the opposing side (`disagreeing`).  For a paired group, the
    `disagreeing` picks are exactly the `agreeing` picks of its opponent group.
    """
    game_id:     int | str
    market:      MarketType
    side:        str                # side key (OVER/UNDER or team code)
    line:        float | None       # most common line among `agreeing`
    agreeing:    tuple[Pick, ...]
    disagreeing: tuple[Pick, ...]

    @property
    def agreement_count(self) -> int:
        return len(self.agreeing)

    @property
    def disagreement_count(self) -> int:
        return len(self.disagreeing)

    @property
    def capper_ids(self) -> list[str]:
        return [p.capper_id for p in self.agreeing]

def consensus_line(picks: Iterable[Pick]) -> float | None:
    """Most common line among the picks (earliest seen wins ties)
    """
    lines = Counter(p.side.line for p in picks if p.side.line is not None)
    if not lines:
        return None
    return lines.most_common(1)[0][0]

###########
# Helpers #
###########

def id_key(value: int | str) -> tuple:
    """Sort key for ids that may be ints or strings (ints compare numerically, and
    sort before strings)
    """
    return isinstance(value, str), value

def pick_order(pick: Pick) -> tuple:
    """Deterministic ordering for picks, independent of retrieval order
    """
    return id_key(pick.game_id), pick.capper_id, id_key(pick.id)

def split_markets(picks: Iterable[Pick]) -> tuple[dict[MarketType, list[Pick]], list[RejectedPick]]:
    """Bucket picks by `MarketType`; picks with unknown market strings are
    rejected (and otherwise ignored)
    """
    by_market = {}
    rejects = []
    for pick in picks:
        try:
            market = MarketType.parse(pick.market)
        except InvalidMarket as e:
            rejects.append(reject(pick, RejectKind.MARKET, str(e)))
            continue
        by_market.setdefault(market, []).append(pick)
    return by_market, rejects

def latest_picks(picks: Iterable[Pick]) -> list[Pick]:
    """Return only the most recent pick per capper and game (for picks within a
    single market), to prevent a capper from being counted more than once
    """
    def recency(pick: Pick) -> tuple:
        # missing timestamps sort oldest (without comparing naive against aware)
        return pick.pick_ts is not None, pick.pick_ts, id_key(pick.id)

    latest: dict[tuple, Pick] = {}
    for pick in sorted(picks, key=recency, reverse=True):
        key = (pick.capper_id, pick.game_id)
        if key in latest:
            log.debug(f"Superseded pick {pick.id} ({pick.capper_id}) ignored")
            continue
        latest[key] = pick
    return sorted(latest.values(), key=pick_order)

def parse_picks(picks: Iterable[Pick], market: MarketType) -> tuple[list[Pick], list[RejectedPick]]:
    """Attach canonical sides to picks for the market.  Picks whose selection
    cannot be parsed are rejected: they count for neither side.
    """
    parsed = []
    rejects = []
    for pick in picks:
        side = parse_side(pick.selection, market)
        if not is_known(side):
            rejects.append(reject(pick, RejectKind.PARSE,
                                  f"Unparseable {market} selection '{pick.selection}'"))
            continue
        parsed.append(pick._replace(side=side))
    return parsed, rejects

###############
# pair_groups #
###############

def find_opponent(key: tuple, buckets: dict[tuple, list[Pick]], paired: set[tuple],
                  market: MarketType) -> tuple | None:
    """Return the key of the (not yet paired) opposing bucket for the same game,
    if there is one
    """
    game_id, side = key
    if market is MarketType.TOTAL:
        opp_key = (game_id, opposite_direction(side))
        return opp_key if opp_key in buckets and opp_key not in paired else None

    for other in buckets:
        if other[0] == game_id and other != key and other not in paired:
            return other
    return None

def make_group(key: tuple, market: MarketType, agreeing: list[Pick],
               disagreeing: list[Pick]) -> ConsensusGroup:
    game_id, side = key
    return ConsensusGroup(game_id, market, side, consensus_line(agreeing),
                          tuple(agreeing), tuple(disagreeing))

def pair_groups(picks: Iterable[Pick], market: MarketType) -> list[ConsensusGroup]:
    """Group parsed picks (all for `market`) by game and side, and pair each group
    with its opposing group.  Each pair is emitted once, as two mirrored groups
    (group first, then its opponent); an unopposed group is emitted with no
    `disagreeing` picks.
    """
    buckets: dict[tuple, list[Pick]] = {}
    for pick in sorted(picks, key=pick_order):
        if pick.side is None or not is_known(pick.side):
            raise LogicError(f"Pick {pick.id} has no parsed side")
        buckets.setdefault((pick.game_id, pick.side.key), []).append(pick)

    groups = []
    paired: set[tuple] = set()
    for key, agreeing in buckets.items():
        if key in paired:
            continue
        paired.add(key)
        opp_key = find_opponent(key, buckets, paired, market)
        if opp_key is None:
            groups.append(make_group(key, market, agreeing, []))
            continue
        paired.add(opp_key)
        opposing = buckets[opp_key]
        groups.append(make_group(key, market, agreeing, opposing))
        groups.append(make_group(opp_key, market, opposing, agreeing))

    return groups

def group_and_pair(picks: Iterable[Pick], market: MarketType) -> list[ConsensusGroup]:
    """Full grouping process for one market: pending picks for the market only,
    latest pick per capper, parsed sides (unparseable picks dropped), and paired
    groups
    """
    by_market, _ = split_markets(p for p in picks if p.is_pending)
    parsed, _ = parse_picks(latest_picks(by_market.get(market, [])), market)
    return pair_groups(parsed, market)
