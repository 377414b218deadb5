# -*- coding: utf-8 -*-

from datetime import datetime

import pytest

from metapick.core import DataUnavailable, DataError
from metapick.market import MarketType
from metapick.team import Team
from metapick.game import Game, GameStatus, upcoming_games
from metapick.capper import Capper, CapperPick
from metapick.capper.__main__ import pick_data_iter
from metapick.feeds import DbFeed
from metapick.engine import Engine

NOW = datetime(2025, 1, 15, 17, 0)

@pytest.fixture
def db_data(test_db):
    """Two teams, three games (one within the default lookahead window), and a
    small set of cappers with graded and pending picks
    """
    Team.create(code='LAL', name='Lakers', full_name='Los Angeles Lakers')
    Team.create(code='BOS', name='Celtics', full_name='Boston Celtics')
    past = Game.create(datetime=datetime(2025, 1, 10, 19, 30), home_team='LAL',
                       away_team='BOS', status=GameStatus.FINAL.value,
                       home_pts=118, away_pts=112)
    game = Game.create(datetime=datetime(2025, 1, 15, 19, 30), home_team='BOS',
                       away_team='LAL')
    Game.create(datetime=datetime(2025, 1, 17, 19, 30), home_team='LAL', away_team='BOS')

    cappers = {name: Capper.create(name=name, display_name=name.upper())
               for name in ('shiva', 'ifrit', 'nexus', 'deep')}
    Capper.create(name='oracle', display_name='ORACLE', active=False)

    graded = [('shiva', 'total', 'won', 0.91),
              ('shiva', 'spread', 'lost', -1.0),
              ('shiva', 'total', 'won', 1.82),
              ('ifrit', 'total', 'won', 0.91),
              ('nexus', 'total', 'lost', -1.1),
              ('deep',  'total', 'won', 5.0)]
    for name, market, status, net_units in graded:
        CapperPick.create(capper=cappers[name], game=past, market=market,
                          selection="OVER 220", status=status, net_units=net_units,
                          pick_ts=datetime(2025, 1, 10, 12, 0))

    pending = [('shiva', "OVER 225.5", '[{"key": "pace", "name": "Pace", "value": 2.1}]'),
               ('ifrit', "OVER 225.5", None),
               ('nexus', "UNDER 225.5", None)]
    for name, selection, factors in pending:
        CapperPick.create(capper=cappers[name], game=game, market='total',
                          selection=selection, units=2.0, confidence=7.0, tier='Rare',
                          tier_score=6.0, factors=factors,
                          pick_ts=datetime(2025, 1, 15, 12, 0))
    return game

def test_roster(db_data):
    roster = DbFeed().get_roster()
    # meta-capper and inactive cappers excluded
    assert [c.id for c in roster] == ['ifrit', 'nexus', 'shiva']
    assert roster[0].name == 'IFRIT'

def test_performance(db_data):
    feed = DbFeed()
    perf = feed.get_performance('shiva')
    assert (perf.wins, perf.losses, perf.pushes) == (2, 1, 0)
    assert perf.net_units == 1.73

    assert feed.get_performance('nexus').net_units == -1.1
    with pytest.raises(DataUnavailable):
        feed.get_performance('unknown')

def test_market_record(db_data):
    record = DbFeed().get_market_record('shiva', MarketType.TOTAL)
    assert (record.wins, record.losses) == (2, 0)

def test_pending_picks(db_data):
    picks = DbFeed().get_pending_picks(db_data.id, ['shiva', 'nexus'])
    assert sorted(p.capper_id for p in picks) == ['nexus', 'shiva']

    shiva = next(p for p in picks if p.capper_id == 'shiva')
    assert shiva.is_pending
    assert shiva.game_id == db_data.id
    assert shiva.capper_name == 'SHIVA'
    assert shiva.top_factor.name == 'Pace'

    assert DbFeed().get_pending_picks(db_data.id, []) == []

def test_upcoming_games(db_data):
    games = upcoming_games(NOW, hours=4)
    assert [g.id for g in games] == [db_data.id]
    assert games[0].matchup == "LAL @ BOS"
    assert len(upcoming_games(NOW, hours=72)) == 2

def test_engine_with_db(db_data):
    feed = DbFeed()
    engine = Engine(feed, feed, markets=['total'], meta_capper='deep')
    result = engine.run(g.id for g in upcoming_games(NOW))

    # nexus has negative net units, so the consensus is unopposed
    assert [c.id for c in result.eligible] == ['ifrit', 'shiva']
    assert len(result.meta_picks) == 1
    assert result.meta_picks[0].selection == "OVER 225.5"
    assert result.meta_picks[0].factor_confluence[0].factor_key == 'pace'

def test_pick_data_iter(db_data):
    entries = [{'capper': 'SHIVA', 'game_id': db_data.id, 'market': 'total',
                'selection': "UNDER 225.5", 'factors': [{'key': 'pace', 'value': -1.0}]}]
    pick_data = list(pick_data_iter(entries, NOW))
    assert pick_data[0]['capper'].name == 'shiva'
    assert pick_data[0]['pick_ts'] == NOW
    assert pick_data[0]['factors'] == '[{"key": "pace", "value": -1.0}]'

    with pytest.raises(DataError):
        list(pick_data_iter([{'capper': 'nobody', 'game_id': db_data.id}], NOW))
