#!/usr/bin/env python
# -*- coding: utf-8 -*-

import sys
from typing import NamedTuple
from datetime import datetime, timedelta
from enum import Enum
from pprint import pformat

from peewee import *

from .core import cfg
from .db_core import BaseModel
from .team import Team

DFLT_LOOKAHEAD = 4.0  # hours

##############
# GameStatus #
##############

class GameStatus(Enum):
    SCHEDULED = 'scheduled'
    LIVE      = 'live'
    FINAL     = 'final'

############
# GameInfo #
############

class GameInfo(NamedTuple):
    """Context/schedule info for a game (i.e. everything the consensus engine is
    entitled to know about it)
    """
    id:        int
    sport:     str
    datetime:  datetime
    home_team: str  # team code
    away_team: str  # team code

    @property
    def matchup(self) -> str:
        return f"{self.away_team} @ {self.home_team}"

########
# Game #
########

class Game(BaseModel):
    """Represents a single game played or scheduled (`datetime` is the scheduled
    start time, naive local time consistent with `now` values passed to
    `upcoming_games()`)
    """
    sport     = TextField(default='nba')
    datetime  = DateTimeField()
    home_team = ForeignKeyField(Team, column_name='home_team',
                                object_id_name='home_team_code',
                                backref='home_games')
    away_team = ForeignKeyField(Team, column_name='away_team',
                                object_id_name='away_team_code',
                                backref='away_games')
    status    = TextField(default=GameStatus.SCHEDULED.value)
    home_pts  = IntegerField(null=True)
    away_pts  = IntegerField(null=True)

    class Meta:
        indexes = (
            # make sure games are not double-loaded
            (('sport', 'datetime', 'home_team', 'away_team'), True),
        )

    @property
    def matchup(self) -> str:
        return f"{self.away_team_code} @ {self.home_team_code}"

    def get_info(self) -> GameInfo:
        """Return just the context/schedule fields as a NamedTuple
        """
        return GameInfo._make((self.id,
                               self.sport,
                               self.datetime,
                               self.home_team_code,
                               self.away_team_code))

def upcoming_games(now: datetime, hours: float = None, sport: str = None) -> list[GameInfo]:
    """Return scheduled games starting within the lookahead window (`now` through
    `now + hours`), in start time order.  This is the only place wall-clock time
    enters the consensus process, and it is passed in by the caller.
    """
    if hours is None:
        hours = (cfg.config('consensus') or {}).get('lookahead_hours') or DFLT_LOOKAHEAD
    until = now + timedelta(hours=hours)
    query = (Game
             .select()
             .where(Game.status == GameStatus.SCHEDULED.value,
                    Game.datetime >= now,
                    Game.datetime <= until)
             .order_by(Game.datetime, Game.id))
    if sport:
        query = query.where(Game.sport == sport)
    return [game.get_info() for game in query]

########
# Main #
########

def main() -> int:
    """Get game by primary key

    Usage: game.py <game_id>
    """
    if len(sys.argv) != 2:
        print("Usage: game.py <game_id>", file=sys.stderr)
        return -1
    game_id = int(sys.argv[1])
    game = Game.get_by_id(game_id)

    pp_params = {'sort_dicts': False}
    print(pformat(game.__data__, **pp_params))
    return 0

if __name__ == '__main__':
    sys.exit(main())
