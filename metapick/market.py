# -*- coding: utf-8 -*-

from typing import NamedTuple
from enum import Enum

import regex as re

from .core import InvalidMarket
from .team import normalize_code

##############
# MarketType #
##############

class MarketType(Enum):
    """Bet market for a pick.  Raw market strings from pick sources (including
    sub-variants such as "total_over") are only ever interpreted by `parse()`;
    everything downstream works with the enum.
    """
    TOTAL     = 'total'
    SPREAD    = 'spread'
    MONEYLINE = 'moneyline'

    @classmethod
    def parse(cls, value: 'str | MarketType') -> 'MarketType':
        """Map a raw market string (case-insensitive) onto its `MarketType`

        :raises InvalidMarket: if the string does not represent a known market
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise InvalidMarket(f"Market '{value}' is not a string")
        market = MARKET_VARIANTS.get(value.strip().lower())
        if not market:
            raise InvalidMarket(f"Unknown market '{value}'")
        return market

    def __str__(self) -> str:
        return self.value

MARKET_VARIANTS = {'total':       MarketType.TOTAL,
                   'total_over':  MarketType.TOTAL,
                   'total_under': MarketType.TOTAL,
                   'totals':      MarketType.TOTAL,
                   'spread':      MarketType.SPREAD,
                   'spread_home': MarketType.SPREAD,
                   'spread_away': MarketType.SPREAD,
                   'spreads':     MarketType.SPREAD,
                   'moneyline':   MarketType.MONEYLINE,
                   'ml':          MarketType.MONEYLINE}

#########
# Sides #
#########

UNKNOWN = 'UNKNOWN'
OVER    = 'OVER'
UNDER   = 'UNDER'

def fmt_line(line: float, signed: bool = False) -> str:
    """Format a line value compactly (e.g. "225.5", "-4.5", "+3"), such that it
    parses back to the identical float
    """
    text = repr(float(line))
    if text.endswith('.0'):
        text = text[:-2]
    if signed and not text.startswith('-'):
        text = '+' + text
    return text

class TotalSide(NamedTuple):
    direction: str           # OVER or UNDER
    line:      float | None

    @property
    def key(self) -> str:
        return self.direction

    @property
    def selection(self) -> str:
        if self.line is None:
            return self.direction
        return f"{self.direction} {fmt_line(self.line)}"

class SpreadSide(NamedTuple):
    team: str                # canonical team code
    line: float | None       # signed, from the POV of `team`

    @property
    def key(self) -> str:
        return self.team

    @property
    def selection(self) -> str:
        if self.line is None:
            return self.team
        return f"{self.team} {fmt_line(self.line, signed=True)}"

class MoneylineSide(NamedTuple):
    team: str

    @property
    def key(self) -> str:
        return self.team

    @property
    def line(self) -> None:
        return None

    @property
    def selection(self) -> str:
        return self.team

class UnknownSide(NamedTuple):
    selection: str           # raw (unparseable) selection, for reporting

    @property
    def key(self) -> str:
        return UNKNOWN

    @property
    def line(self) -> None:
        return None

Side = TotalSide | SpreadSide | MoneylineSide | UnknownSide

def is_known(side: Side) -> bool:
    return not isinstance(side, UnknownSide)

def opposite_direction(direction: str) -> str:
    return UNDER if direction == OVER else OVER

##############
# parse_side #
##############

TOTAL_LINE_PAT  = re.compile(r'(\d+\.?\d*)')
SPREAD_LINE_PAT = re.compile(r'([+-]?\d+\.?\d*)$')
TEAM_CODE_PAT   = re.compile(r'[A-Z]{2,4}')

def parse_side(selection: str, market: MarketType) -> Side:
    """Parse a pick's raw selection string into its canonical side for the market.
    Never raises: anything that cannot be interpreted comes back as `UnknownSide`.

    Examples:
      - "OVER 225.5" (total)  -> TotalSide('OVER', 225.5)
      - "LAL -4.5" (spread)   -> SpreadSide('LAL', -4.5)
      - "lal" (moneyline)     -> MoneylineSide('LAL')
    """
    if not isinstance(selection, str):
        return UnknownSide(str(selection))
    text = selection.strip()

    if market is MarketType.TOTAL:
        upper = text.upper()
        if OVER in upper:
            direction = OVER
        elif UNDER in upper:
            direction = UNDER
        else:
            return UnknownSide(selection)
        m = TOTAL_LINE_PAT.search(text)
        return TotalSide(direction, float(m.group(1)) if m else None)

    if market is MarketType.SPREAD:
        parts = text.split()
        if not parts:
            return UnknownSide(selection)
        team = normalize_code(parts[0])
        if not TEAM_CODE_PAT.fullmatch(team) or team in (OVER, UNDER):
            return UnknownSide(selection)
        line = None
        if len(parts) > 1:
            m = SPREAD_LINE_PAT.search(text)
            line = float(m.group(1)) if m else None
        return SpreadSide(team, line)

    if market is MarketType.MONEYLINE:
        if not text:
            return UnknownSide(selection)
        return MoneylineSide(normalize_code(text))

    return UnknownSide(selection)
