# -*- coding: utf-8 -*-

from datetime import datetime, timezone

import pytest

from metapick.core import LogicError
from metapick.market import MarketType
from metapick.consensus import (split_markets, latest_picks, parse_picks, pair_groups,
                                group_and_pair, consensus_line)

def by_side(groups):
    return {(g.game_id, g.side): g for g in groups}

class TestPairGroups:
    def test_opposed_pair_is_mirrored(self, make_pick):
        picks = [make_pick('shiva',  "OVER 225.5"),
                 make_pick('ifrit',  "OVER 225.5"),
                 make_pick('nexus',  "OVER 226"),
                 make_pick('oracle', "UNDER 225.5")]
        groups = by_side(pair_groups(picks, MarketType.TOTAL))

        assert set(groups) == {(1, 'OVER'), (1, 'UNDER')}
        over, under = groups[(1, 'OVER')], groups[(1, 'UNDER')]
        assert over.agreement_count == 3
        assert over.disagreement_count == 1
        assert over.disagreeing == under.agreeing
        assert under.disagreeing == over.agreeing
        assert over.line == 225.5

    def test_every_pick_agrees_in_exactly_one_group(self, make_pick):
        picks = [make_pick('shiva',  "OVER 225.5", game_id=1),
                 make_pick('ifrit',  "UNDER 225.5", game_id=1),
                 make_pick('nexus',  "UNDER 231", game_id=2),
                 make_pick('oracle', "OVER 231", game_id=2),
                 make_pick('shiva',  "OVER 219", game_id=3)]
        groups = pair_groups(picks, MarketType.TOTAL)

        agreeing = [p.id for g in groups for p in g.agreeing]
        assert sorted(agreeing) == sorted(p.id for p in picks)
        for group in groups:
            # disagreeing picks are always for the same game
            assert all(p.game_id == group.game_id for p in group.disagreeing)

    def test_unopposed_group(self, make_pick):
        picks = [make_pick('shiva', "OVER 225.5"),
                 make_pick('ifrit', "OVER 225.5")]
        groups = pair_groups(picks, MarketType.TOTAL)

        assert len(groups) == 1
        assert groups[0].side == 'OVER'
        assert groups[0].disagreeing == ()

    def test_spread_sides_pair_by_team(self, make_pick):
        picks = [make_pick('shiva', "LAL -4.5", MarketType.SPREAD),
                 make_pick('ifrit', "lal -5", MarketType.SPREAD),
                 make_pick('nexus', "BOS +4.5", MarketType.SPREAD)]
        groups = by_side(pair_groups(picks, MarketType.SPREAD))

        assert set(groups) == {(1, 'LAL'), (1, 'BOS')}
        assert groups[(1, 'LAL')].capper_ids == ['ifrit', 'shiva']
        assert groups[(1, 'LAL')].disagreeing == groups[(1, 'BOS')].agreeing

    def test_independent_of_input_order(self, make_pick):
        picks = [make_pick('shiva',  "OVER 225.5"),
                 make_pick('ifrit',  "UNDER 225.5"),
                 make_pick('nexus',  "OVER 225.5")]
        forward = pair_groups(picks, MarketType.TOTAL)
        reverse = pair_groups(list(reversed(picks)), MarketType.TOTAL)
        assert forward == reverse

    def test_unparsed_pick(self, make_pick):
        picks = [make_pick('shiva', "OVER 225.5", parsed=False)]
        with pytest.raises(LogicError):
            pair_groups(picks, MarketType.TOTAL)

class TestPickFiltering:
    def test_split_markets_rejects_unknown(self, make_pick):
        picks = [make_pick('shiva', "OVER 225.5", 'total_over'),
                 make_pick('ifrit', "LAL -4.5", 'spread'),
                 make_pick('nexus', "LeBron over 27.5", 'player_props', parsed=False)]
        by_market, rejects = split_markets(picks)

        assert [p.capper_id for p in by_market[MarketType.TOTAL]] == ['shiva']
        assert [p.capper_id for p in by_market[MarketType.SPREAD]] == ['ifrit']
        assert len(rejects) == 1
        assert rejects[0].capper_id == 'nexus'
        assert rejects[0].kind == 'market'

    def test_unparseable_selection_counts_for_neither_side(self, make_pick):
        picks = [make_pick('shiva', "LAL -4.5", MarketType.SPREAD, parsed=False),
                 make_pick('ifrit', "garbage", MarketType.SPREAD, parsed=False)]
        parsed, rejects = parse_picks(picks, MarketType.SPREAD)

        assert [p.capper_id for p in parsed] == ['shiva']
        assert parsed[0].side.key == 'LAL'
        assert [(r.capper_id, r.kind) for r in rejects] == [('ifrit', 'parse')]

    def test_latest_pick_per_capper(self, make_pick):
        old = make_pick('shiva', "OVER 225.5", pick_ts=datetime(2025, 1, 15, 9, 0))
        new = make_pick('shiva', "UNDER 226", pick_ts=datetime(2025, 1, 15, 11, 0))
        other = make_pick('ifrit', "OVER 225.5")
        latest = latest_picks([new, old, other])

        assert len(latest) == 2
        assert new in latest
        assert old not in latest

    def test_latest_pick_tie_goes_to_higher_id(self, make_pick):
        ts = datetime(2025, 1, 15, 11, 0)
        older = make_pick('shiva', "OVER 225.5", id=9, pick_ts=ts)
        newer = make_pick('shiva', "UNDER 225.5", id=10, pick_ts=ts)

        assert latest_picks([older, newer]) == [newer]
        assert latest_picks([newer, older]) == [newer]

    def test_latest_pick_without_timestamp(self, make_pick):
        untimed = make_pick('shiva', "OVER 225.5", pick_ts=None)
        aware = make_pick('shiva', "UNDER 225.5",
                          pick_ts=datetime(2025, 1, 15, 11, 0, tzinfo=timezone.utc))

        assert latest_picks([untimed, aware]) == [aware]
        assert latest_picks([untimed]) == [untimed]

    def test_group_and_pair_ignores_graded(self, make_pick):
        picks = [make_pick('shiva', "OVER 225.5"),
                 make_pick('ifrit', "UNDER 225.5", status='lost'),
                 make_pick('nexus', "OVER 225.5")]
        groups = group_and_pair(picks, MarketType.TOTAL)

        assert len(groups) == 1
        assert groups[0].capper_ids == ['nexus', 'shiva']
        assert groups[0].disagreement_count == 0

def test_consensus_line(make_pick):
    picks = [make_pick('shiva', "OVER 226"),
             make_pick('ifrit', "OVER 225.5"),
             make_pick('nexus', "OVER 225.5")]
    assert consensus_line(picks) == 225.5
    assert consensus_line([make_pick('shiva', "OVER")]) is None
