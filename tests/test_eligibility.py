# -*- coding: utf-8 -*-

import pytest

from metapick.core import DataUnavailable
from metapick.eligibility import (Record, Performance, GradedPick, CapperInfo,
                                  compute_performance, is_eligible, take_snapshot,
                                  compute_eligibility)
from metapick.feeds import PerformanceFeed

def perf(net_units: float) -> Performance:
    return Performance(10, 8, 1, net_units, 55.6, 19)

class FakePerformanceFeed(PerformanceFeed):
    def __init__(self, perfs: dict, failing: set = None):
        self.perfs = perfs
        self.failing = failing or set()

    def get_roster(self):
        return [CapperInfo(c, c.upper()) for c in self.perfs]

    def get_performance(self, capper_id):
        if capper_id in self.failing:
            raise DataUnavailable(f"No data for {capper_id}")
        if self.perfs[capper_id] == 'boom':
            raise ValueError("unexpected feed failure")
        return self.perfs[capper_id]

class TestRecord:
    def test_win_rate(self):
        assert Record(3, 1, 2).win_rate == 75.0
        assert Record.empty().win_rate == 0.0

    def test_accumulate(self):
        record = Record.empty()
        record += Record(1, 0, 0)
        record += Record(0, 1, 1)
        assert isinstance(record, Record)
        assert (record.wins, record.losses, record.pushes) == (1, 1, 1)

class TestComputePerformance:
    def test_tabulation(self):
        graded = [GradedPick('won', 1.0),
                  GradedPick('won', 0.91),
                  GradedPick('lost', -1.1),
                  GradedPick('push', 0.0),
                  GradedPick('pending', None)]
        perf = compute_performance(graded)
        assert (perf.wins, perf.losses, perf.pushes) == (2, 1, 1)
        assert perf.net_units == 0.81
        assert perf.win_rate == 66.7
        assert perf.total_picks == 4

    def test_no_picks(self):
        perf = compute_performance([])
        assert perf.net_units == 0.0
        assert perf.total_picks == 0
        assert not is_eligible(perf)

    def test_missing_net_units(self):
        with pytest.raises(DataUnavailable):
            compute_performance([GradedPick('won', 1.0), GradedPick('lost', None)])

    def test_unknown_status(self):
        with pytest.raises(DataUnavailable):
            compute_performance([GradedPick('voided', 0.0)])

class TestEligibility:
    @pytest.mark.parametrize("net_units,eligible", [
        (0.0,   False),
        (0.004, False),
        (-3.2,  False),
        (0.01,  True),
        (12.5,  True),
    ])
    def test_threshold(self, net_units, eligible):
        assert is_eligible(perf(net_units)) is eligible

    def test_no_data(self):
        assert not is_eligible(None)

    def test_compute_eligibility(self):
        snapshot = {'shiva':  perf(1.0),
                    'ifrit':  perf(4.2),
                    'nexus':  perf(0.0),
                    'oracle': None}
        eligible = compute_eligibility(snapshot, {'ifrit': 'IFRIT'})
        assert [c.id for c in eligible] == ['ifrit', 'shiva']
        assert [c.name for c in eligible] == ['IFRIT', 'SHIVA']
        assert eligible[0].net_units == 4.2

    def test_snapshot_fails_closed(self):
        feed = FakePerformanceFeed({'shiva':  perf(1.0),
                                    'ifrit':  perf(2.0),
                                    'nexus':  'boom',
                                    'oracle': perf(3.0)},
                                   failing={'oracle'})
        snapshot = take_snapshot(feed, feed.get_roster())
        assert snapshot['nexus'] is None
        assert snapshot['oracle'] is None
        assert [c.id for c in compute_eligibility(snapshot)] == ['ifrit', 'shiva']
