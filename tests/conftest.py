# -*- coding: utf-8 -*-

import sys
from pathlib import Path
from datetime import datetime, timedelta

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

import pytest
from peewee import SqliteDatabase

from metapick.market import MarketType, parse_side
from metapick.pick import Pick
from metapick.db_admin import ALL_MODELS

BASE_TS = datetime(2025, 1, 15, 12, 0)

@pytest.fixture
def make_pick():
    """Factory for pending picks; `market` may be passed as `MarketType`, and the
    side is parsed from `selection` unless `parsed=False`
    """
    counter = iter(range(1, 10000))

    def _make_pick(capper_id: str, selection: str, market: MarketType | str = MarketType.TOTAL,
                   game_id: int = 1, units: float = 2.0, confidence: float = 6.0,
                   tier: str = 'Rare', tier_score: float = 5.5, factors: tuple = (),
                   net_units: float = 5.0, parsed: bool = True, **kwargs) -> Pick:
        pick_id = next(counter)
        pick = Pick(id=kwargs.pop('id', pick_id),
                    capper_id=capper_id,
                    game_id=game_id,
                    market=str(market),
                    selection=selection,
                    units=units,
                    confidence=confidence,
                    pick_ts=kwargs.pop('pick_ts', BASE_TS + timedelta(minutes=pick_id)),
                    tier=tier,
                    tier_score=tier_score,
                    factors=tuple(factors),
                    capper_net_units=net_units,
                    **kwargs)
        if parsed:
            pick = pick._replace(side=parse_side(selection, MarketType.parse(market)))
        return pick

    return _make_pick

@pytest.fixture
def test_db():
    """In-memory database bound to all models, for the duration of the test
    """
    test_db = SqliteDatabase(':memory:', pragmas={'foreign_keys': 1})
    with test_db.bind_ctx(ALL_MODELS):
        test_db.create_tables(ALL_MODELS)
        yield test_db
    test_db.close()
