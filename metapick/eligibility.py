# -*- coding: utf-8 -*-

from typing import NamedTuple, TYPE_CHECKING
from collections import Counter
from collections.abc import Iterable

from .core import log, DataUnavailable
from .pick import PickStatus

if TYPE_CHECKING:
    from .feeds import PerformanceFeed

NET_UNITS_PREC = 2

##########
# Record #
##########

class Record(Counter):
    """Won/lost/push tally for a set of graded picks.  Emulates a list that looks
    like `[wins, losses, pushes]`, except it does some tabulation for us.
    """
    @staticmethod
    def empty() -> 'Record':
        return Record(0, 0, 0)

    def __init__(self, wins: int, losses: int, pushes: int):
        super().__init__({0: wins, 1: losses, 2: pushes})

    @property
    def wins(self) -> int:
        return self[0]

    @property
    def losses(self) -> int:
        return self[1]

    @property
    def pushes(self) -> int:
        return self[2]

    @property
    def win_rate(self) -> float:
        """Win percentage (0-100) of decided (non-push) picks
        """
        decided = self.wins + self.losses
        return self.wins / decided * 100.0 if decided else 0.0

###############
# Performance #
###############

class Performance(NamedTuple):
    wins:        int
    losses:      int
    pushes:      int
    net_units:   float
    win_rate:    float  # percent, 0-100
    total_picks: int

class GradedPick(NamedTuple):
    """Minimal representation of a graded pick, as needed for performance
    """
    status:    str
    net_units: float | None

def compute_performance(graded: Iterable[GradedPick]) -> Performance:
    """Tabulate capper performance from graded picks.  Pending picks (if passed
    in) are ignored.

    :raises DataUnavailable: if a graded pick has no net units delta (so that the
        record cannot be trusted)
    """
    record = Record.empty()
    net_units = 0.0
    for pick in graded:
        try:
            status = PickStatus(pick.status)
        except ValueError:
            raise DataUnavailable(f"Unknown pick status '{pick.status}'") from None
        if not status.is_graded:
            continue
        if pick.net_units is None:
            raise DataUnavailable(f"Graded pick ({pick.status}) missing net units")
        record += Record(int(status is PickStatus.WON),
                         int(status is PickStatus.LOST),
                         int(status is PickStatus.PUSH))
        net_units += pick.net_units

    return Performance(record.wins,
                       record.losses,
                       record.pushes,
                       round(net_units, NET_UNITS_PREC),
                       round(record.win_rate, 1),
                       record.total())

##################
# EligibleCapper #
##################

class CapperInfo(NamedTuple):
    id:   str           # lowercase capper name
    name: str | None    # display name

class EligibleCapper(NamedTuple):
    id:          str
    name:        str
    performance: Performance

    @property
    def net_units(self) -> float:
        return self.performance.net_units

# capper id -> performance (`None` if the data could not be obtained)
Snapshot = dict[str, Performance | None]

def take_snapshot(feed: 'PerformanceFeed', roster: Iterable[CapperInfo]) -> Snapshot:
    """Fetch current performance for each capper in the roster.  A failure for
    an individual capper is logged and recorded as `None` (i.e. the capper will
    not be eligible), and does not affect the rest of the roster.
    """
    snapshot = {}
    for capper in roster:
        try:
            snapshot[capper.id] = feed.get_performance(capper.id)
        except Exception as e:
            # fail closed, whatever the feed error
            log.warning(f"Performance unavailable for capper '{capper.id}': {e!r}")
            snapshot[capper.id] = None
    return snapshot

def is_eligible(perf: Performance | None) -> bool:
    """Strictly positive net units (after rounding) are required; no data (or no
    graded picks) means not eligible
    """
    if perf is None:
        return False
    return round(perf.net_units, NET_UNITS_PREC) > 0.0

def compute_eligibility(snapshot: Snapshot, names: dict[str, str] = None) -> list[EligibleCapper]:
    """Return the eligible cappers from the performance snapshot, ordered by
    capper id.  This is a pure function of its inputs.

    :param snapshot: performance by capper id (`None` for data unavailable)
    :param names: optional display names by capper id
    :return: eligible cappers (stable order)
    """
    names = names or {}
    eligible = []
    for capper_id in sorted(snapshot):
        perf = snapshot[capper_id]
        if not is_eligible(perf):
            log.debug(f"Capper '{capper_id}' not eligible ({perf})")
            continue
        eligible.append(EligibleCapper(capper_id, names.get(capper_id) or capper_id.upper(), perf))
    return eligible
