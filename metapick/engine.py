#!/usr/bin/env python
# -*- coding: utf-8 -*-

import sys
from typing import NamedTuple
from collections.abc import Iterable, Iterator
from datetime import datetime
import json

from .utils import parse_argv
from .core import cfg, log, DataUnavailable
from .market import MarketType
from .pick import Pick
from .eligibility import EligibleCapper, Record, take_snapshot, compute_eligibility
from .consensus import RejectedPick, split_markets, latest_picks, parse_picks, pair_groups
from .units import UnitPolicy
from .decision import Decision, decide
from .feeds import PerformanceFeed, PicksFeed, DbFeed
from .game import upcoming_games

DFLT_MARKETS = (MarketType.TOTAL, MarketType.SPREAD)

###############
# BatchResult #
###############

class ErrorEntry(NamedTuple):
    """Evaluation for a game and market could not be performed (as opposed to a
    decision not to pick)
    """
    game_id: int | str
    market:  MarketType
    message: str

    def to_record(self) -> dict:
        return {'game_id': self.game_id, 'market': self.market.value, 'message': self.message}

class GameResult(NamedTuple):
    game_id:   int | str
    decisions: list[Decision]
    errors:    list[ErrorEntry]
    rejects:   list[RejectedPick]

class BatchResult(NamedTuple):
    games_analyzed: int
    eligible:       list[EligibleCapper]
    decisions:      list[Decision]
    errors:         list[ErrorEntry]
    rejects:        list[RejectedPick]

    @property
    def meta_picks(self) -> list[Decision]:
        return [d for d in self.decisions if d.should_generate]

    def to_record(self) -> dict:
        return {'games_analyzed':   self.games_analyzed,
                'eligible_cappers': [{'id':        c.id,
                                      'name':      c.name,
                                      'net_units': c.net_units} for c in self.eligible],
                'decisions':        [d.to_record() for d in self.decisions],
                'errors':           [e.to_record() for e in self.errors],
                'rejects':          [r._asdict() for r in self.rejects]}

    def to_json(self, indent: int = None) -> str:
        return json.dumps(self.to_record(), indent=indent, sort_keys=True, default=str)

##########
# Engine #
##########

class Engine:
    """Consensus meta-capper engine.  Each invocation of `run()` (or
    `evaluate_iter()`) works from a single eligibility snapshot, and is a pure
    function of the feed data (i.e. re-running against unchanged data yields the
    same decisions).
    """
    perf_feed:   PerformanceFeed
    picks_feed:  PicksFeed
    policy:      UnitPolicy
    markets:     tuple[MarketType, ...]
    meta_capper: str | None

    def __init__(self, perf_feed: PerformanceFeed, picks_feed: PicksFeed,
                 policy: UnitPolicy = None, markets: Iterable[MarketType | str] = None,
                 meta_capper: str = None):
        self.perf_feed   = perf_feed
        self.picks_feed  = picks_feed
        self.policy      = policy or UnitPolicy()
        self.markets     = tuple(MarketType.parse(m) for m in (markets or DFLT_MARKETS))
        self.meta_capper = meta_capper

    def eligible_cappers(self) -> list[EligibleCapper]:
        """Compute eligibility snapshot (individual capper failures exclude only
        that capper; roster failure raises `DataUnavailable`)
        """
        try:
            roster = self.perf_feed.get_roster()
        except DataUnavailable:
            raise
        except Exception as e:
            # any feed failure for the roster means no snapshot can be taken
            raise DataUnavailable(f"Roster fetch failed: {e!r}") from e
        names = {c.id: c.name for c in roster if c.name}
        snapshot = take_snapshot(self.perf_feed, roster)
        eligible = compute_eligibility(snapshot, names)
        log.info(f"{len(eligible)} of {len(roster)} cappers eligible")
        if len(eligible) < 2:
            log.warning(f"Not enough eligible cappers for consensus ({len(eligible)})")
        return eligible

    def market_records(self) -> dict[MarketType, Record | None]:
        """Meta-capper's own record by market (used only for tier grading, so any
        failure here is not fatal)
        """
        records = {}
        for market in self.markets:
            record = None
            if self.meta_capper:
                try:
                    record = self.perf_feed.get_market_record(self.meta_capper, market)
                except Exception as e:
                    log.info(f"No {market} record for '{self.meta_capper}': {e}")
            records[market] = record
        return records

    def evaluate_game(self, game_id: int | str, eligible: list[EligibleCapper],
                      records: dict[MarketType, Record | None]) -> GameResult:
        """Evaluate all markets for a single game
        """
        try:
            raw_picks = self.picks_feed.get_pending_picks(game_id, [c.id for c in eligible])
        except Exception as e:
            # fail this game only, whatever the feed error
            log.warning(f"Picks unavailable for game {game_id}: {e!r}")
            errors = [ErrorEntry(game_id, m, f"Picks unavailable: {e}") for m in self.markets]
            return GameResult(game_id, [], errors, [])

        picks = self.contributing_picks(game_id, raw_picks, eligible)
        by_market, rejects = split_markets(picks)
        decisions = []
        for market in self.markets:
            parsed, parse_rejects = parse_picks(latest_picks(by_market.get(market, [])), market)
            rejects += parse_rejects
            for group in pair_groups(parsed, market):
                decisions.append(decide(group, self.policy, records.get(market)))
        return GameResult(game_id, decisions, [], rejects)

    def contributing_picks(self, game_id: int | str, picks: list[Pick],
                           eligible: list[EligibleCapper]) -> list[Pick]:
        """Only pending picks for the game from eligible cappers count (whatever the
        feed returns); capper net units are attached for weighting
        """
        net_units = {c.id: c.net_units for c in eligible}
        names = {c.id: c.name for c in eligible}
        contrib = []
        for pick in picks:
            if pick.capper_id not in net_units or not pick.is_pending or pick.game_id != game_id:
                log.debug(f"Pick {pick.id} ({pick.capper_id}) does not contribute")
                continue
            contrib.append(pick._replace(capper_net_units=net_units[pick.capper_id],
                                         capper_name=pick.capper_name or names[pick.capper_id]))
        return contrib

    def unavailable(self, game_ids: Iterable[int | str], e: Exception) -> Iterator[GameResult]:
        for game_id in game_ids:
            errors = [ErrorEntry(game_id, m, f"Eligibility unavailable: {e}") for m in self.markets]
            yield GameResult(game_id, [], errors, [])

    def evaluate_iter(self, game_ids: Iterable[int | str],
                      eligible: list[EligibleCapper] = None) -> Iterator[GameResult]:
        """Evaluate games one at a time; results already yielded remain valid if
        the caller stops (or is cancelled) midway.  If `eligible` is not
        specified, the eligibility snapshot is taken here (once for all games).
        """
        game_ids = list(game_ids)
        if eligible is None:
            try:
                eligible = self.eligible_cappers()
            except DataUnavailable as e:
                log.error(f"Capper roster unavailable: {e}")
                yield from self.unavailable(game_ids, e)
                return

        records = self.market_records()
        for game_id in game_ids:
            yield self.evaluate_game(game_id, eligible, records)

    def run(self, game_ids: Iterable[int | str]) -> BatchResult:
        """Evaluate all specified games, returning the decisions for every consensus
        group, along with error entries for evaluations that could not be done
        """
        game_ids = list(game_ids)
        try:
            eligible = self.eligible_cappers()
            results = self.evaluate_iter(game_ids, eligible)
        except DataUnavailable as e:
            log.error(f"Capper roster unavailable: {e}")
            eligible = []
            results = self.unavailable(game_ids, e)

        decisions = []
        errors = []
        rejects = []
        for result in results:
            decisions += result.decisions
            errors += result.errors
            rejects += result.rejects
        log.info(f"{len(game_ids)} games analyzed: {sum(d.should_generate for d in decisions)} "
                 f"meta-picks, {len(errors)} errors")
        return BatchResult(len(game_ids), eligible, decisions, errors, rejects)

###########
# Drivers #
###########

def run(hours: float = None, now: str = None, markets: str = None, indent: int = 2) -> int:
    """Run the meta-capper against upcoming games in the database, and print the
    results (as JSON).  `now` may be specified (ISO format) for reproducible runs;
    `markets` is a comma-separated list.
    """
    consensus = cfg.config('consensus') or {}
    now_dt = datetime.fromisoformat(now) if now else datetime.now()
    if markets:
        market_list = [m.strip() for m in str(markets).split(',') if m.strip()]
    else:
        market_list = consensus.get('markets') or DFLT_MARKETS

    games = upcoming_games(now_dt, hours)
    if not games:
        log.info(f"No games within lookahead window from {now_dt}")
    for game in games:
        log.debug(f"Analyzing {game.matchup} ({game.datetime})")

    feed = DbFeed()
    engine = Engine(feed, feed, UnitPolicy.from_config(), market_list,
                    consensus.get('meta_capper'))
    result = engine.run(g.id for g in games)
    print(result.to_json(indent=indent))
    return 1 if result.errors else 0

########
# Main #
########

def main() -> int:
    """Built-in driver to invoke various utility functions for the module

    Usage: engine.py <util_func> [<args> ...]

    Functions/usage:
      - run [hours=<float>] [now=<iso_datetime>] [markets=<market>[,...]]
    """
    if len(sys.argv) < 2:
        print(f"Utility function not specified", file=sys.stderr)
        return -1
    elif sys.argv[1] not in globals():
        print(f"Unknown utility function '{sys.argv[1]}'", file=sys.stderr)
        return -1

    util_func = globals()[sys.argv[1]]
    args, kwargs = parse_argv(sys.argv[2:])

    return util_func(*args, **kwargs)

if __name__ == '__main__':
    sys.exit(main())
