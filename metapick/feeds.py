# -*- coding: utf-8 -*-

from collections.abc import Iterable

from peewee import PeeweeException, DoesNotExist

from .core import log, DataUnavailable, InvalidMarket, ImplementationError
from .market import MarketType
from .pick import Pick, PickStatus, GRADED_STATUSES
from .eligibility import (Performance, Record, CapperInfo, GradedPick,
                          compute_performance)
from .capper import Capper, CapperPick, meta_cappers

###################
# PerformanceFeed #
###################

class PerformanceFeed:
    """Abstract interface for the capper performance feed; implementations should
    raise `DataUnavailable` if data cannot be retrieved.
    """
    def get_roster(self) -> list[CapperInfo]:
        """Return all cappers that may contribute to consensus (the meta-capper
        itself excluded)
        """
        raise ImplementationError("Must be implemented by subclass")

    def get_performance(self, capper_id: str) -> Performance:
        """Return the capper's performance, computed from all graded picks
        """
        raise ImplementationError("Must be implemented by subclass")

    def get_market_record(self, capper_id: str, market: MarketType) -> Record | None:
        """Return the capper's record for picks in the specified market (`None`
        if not supported by the feed)
        """
        return None

#############
# PicksFeed #
#############

class PicksFeed:
    """Abstract interface for the pending picks feed; implementations should raise
    `DataUnavailable` if data cannot be retrieved.
    """
    def get_pending_picks(self, game_id: int | str, capper_ids: Iterable[str]) -> list[Pick]:
        """Return pending picks for the game from the specified cappers (all
        markets)
        """
        raise ImplementationError("Must be implemented by subclass")

##########
# DbFeed #
##########

class DbFeed(PerformanceFeed, PicksFeed):
    """Both feeds, backed by the `Capper` and `CapperPick` models.  Database
    errors are reported as `DataUnavailable`.
    """
    def get_roster(self) -> list[CapperInfo]:
        excluded = meta_cappers()
        try:
            query = (Capper
                     .select()
                     .where(Capper.active == True)
                     .order_by(Capper.name))
            return [CapperInfo(c.name, c.display_name) for c in query if c.name not in excluded]
        except PeeweeException as e:
            raise DataUnavailable(f"Capper roster: {e}") from e

    def graded_picks(self, capper_id: str) -> list[CapperPick]:
        try:
            capper = Capper.get_by_name(capper_id)
            query = (CapperPick
                     .select()
                     .where(CapperPick.capper == capper,
                            CapperPick.status << list(GRADED_STATUSES))
                     .order_by(CapperPick.pick_ts, CapperPick.id))
            return list(query)
        except DoesNotExist:
            raise DataUnavailable(f"Capper '{capper_id}' is not known") from None
        except PeeweeException as e:
            raise DataUnavailable(f"Graded picks for '{capper_id}': {e}") from e

    def get_performance(self, capper_id: str) -> Performance:
        graded = self.graded_picks(capper_id)
        return compute_performance(GradedPick(p.status, p.net_units) for p in graded)

    def get_market_record(self, capper_id: str, market: MarketType) -> Record | None:
        record = Record.empty()
        for pick in self.graded_picks(capper_id):
            try:
                if MarketType.parse(pick.market) is not market:
                    continue
            except InvalidMarket:
                continue
            status = PickStatus(pick.status)
            record += Record(int(status is PickStatus.WON),
                             int(status is PickStatus.LOST),
                             int(status is PickStatus.PUSH))
        return record

    def get_pending_picks(self, game_id: int | str, capper_ids: Iterable[str]) -> list[Pick]:
        capper_ids = list(capper_ids)
        if not capper_ids:
            return []
        try:
            query = (CapperPick
                     .select(CapperPick, Capper)
                     .join(Capper)
                     .where(CapperPick.game == game_id,
                            CapperPick.status == PickStatus.PENDING.value,
                            Capper.name << capper_ids)
                     .order_by(CapperPick.pick_ts.desc(), CapperPick.id.desc()))
            picks = [p.get_pick() for p in query]
        except PeeweeException as e:
            raise DataUnavailable(f"Pending picks for game {game_id}: {e}") from e
        log.debug(f"{len(picks)} pending picks for game {game_id}")
        return picks
