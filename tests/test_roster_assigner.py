"""
Tests for greedy roster slot assignment.
"""

import random

import pytest

from conftest import make_hitter, make_pitcher
from draft_engine.models.settings import RosterConfig, SlotTemplate
from draft_engine.services.roster_assigner import RosterAssigner


def _occupants(slots):
    return {s.label: (s.player.player_id if s.player else None) for s in slots}


class TestRosterAssigner:
    """Test suite for RosterAssigner."""

    @pytest.fixture
    def assigner(self):
        return RosterAssigner()

    def test_fills_specific_slot_before_flex_and_bench(self, assigner, settings):
        catcher = make_hitter('c1', positions=('C',), overall_rank=1)

        slots = assigner.assign([catcher], settings.roster_config)

        assert _occupants(slots)['C'] == 'c1'
        assert _occupants(slots)['UTIL'] is None

    def test_overflow_goes_to_util_then_bench(self, assigner, settings):
        catchers = [make_hitter(f"c{i}", positions=('C',), overall_rank=i) for i in range(1, 4)]

        slots = assigner.assign(catchers, settings.roster_config)
        occupants = _occupants(slots)

        assert occupants['C'] == 'c1'
        assert occupants['UTIL'] == 'c2'
        assert occupants['BN1'] == 'c3'

    def test_better_ranked_player_starts(self, assigner, settings):
        worse = make_hitter('worse', positions=('C',), overall_rank=50)
        better = make_hitter('better', positions=('C',), overall_rank=5)

        occupants = _occupants(assigner.assign([worse, better], settings.roster_config))

        assert occupants['C'] == 'better'
        assert occupants['UTIL'] == 'worse'

    def test_adp_breaks_rank_ties(self, assigner, settings):
        a = make_hitter('a', positions=('C',), adp=40)
        b = make_hitter('b', positions=('C',), adp=10)

        occupants = _occupants(assigner.assign([a, b], settings.roster_config))

        assert occupants['C'] == 'b'

    def test_unranked_players_sort_last(self, assigner, settings):
        unranked = make_hitter('u', positions=('C',))
        ranked = make_hitter('r', positions=('C',), overall_rank=300)

        occupants = _occupants(assigner.assign([unranked, ranked], settings.roster_config))

        assert occupants['C'] == 'r'

    def test_multi_position_player_takes_first_specific_slot(self, assigner, settings):
        middle = make_hitter('mi', positions=('2B', 'SS'), overall_rank=1)

        occupants = _occupants(assigner.assign([middle], settings.roster_config))

        assert occupants['2B'] == 'mi'
        assert occupants['SS'] is None

    def test_more_specific_slot_wins_within_priority(self, assigner):
        config = RosterConfig(slots=(
            SlotTemplate('CI', ('1B', '3B')),
            SlotTemplate('1B', ('1B',)),
        ))
        first = make_hitter('fb', positions=('1B',), overall_rank=1)

        occupants = _occupants(assigner.assign([first], config))

        assert occupants['1B'] == 'fb'
        assert occupants['CI'] is None

    def test_util_takes_any_hitter_and_p_any_pitcher(self, assigner):
        config = RosterConfig(slots=(
            SlotTemplate('UTIL', ('C',)),
            SlotTemplate('P', ('SP',)),
        ))
        dh = make_hitter('dh', positions=('DH',), overall_rank=1)
        closer = make_pitcher('rp', positions=('RP',), overall_rank=2)

        occupants = _occupants(assigner.assign([dh, closer], config))

        assert occupants == {'UTIL': 'dh', 'P': 'rp'}

    def test_pitcher_never_lands_in_util(self, assigner):
        config = RosterConfig(slots=(SlotTemplate('UTIL', ('C', 'OF', 'DH')),))

        slots = assigner.assign([make_pitcher('sp')], config)

        assert slots[0].player is None

    def test_player_without_slot_is_left_out(self, assigner, settings):
        outfielders = [make_hitter(f"of{i}", overall_rank=i) for i in range(10)]

        slots = assigner.assign(outfielders, settings.roster_config)
        placed = assigner.assigned_players(slots)

        # OF1-3, UTIL, BN1-3
        assert len(placed) == 7
        assert {p.player_id for p in placed} == {f"of{i}" for i in range(7)}

    def test_order_independent_and_idempotent(self, assigner, settings, sample_catalog):
        players = sample_catalog[:22]
        shuffled = list(players)
        random.Random(7).shuffle(shuffled)

        first = _occupants(assigner.assign(players, settings.roster_config))
        second = _occupants(assigner.assign(shuffled, settings.roster_config))
        third = _occupants(assigner.assign(players, settings.roster_config))

        assert first == second == third

    def test_never_double_assigns(self, assigner, settings, sample_catalog):
        slots = assigner.assign(sample_catalog, settings.roster_config)
        ids = [s.player.player_id for s in slots if s.player is not None]

        assert len(ids) == len(set(ids))
        assert len({s.slot_id for s in slots}) == len(slots)

    def test_template_slots_are_not_mutated(self, assigner, settings):
        template = settings.roster_config.expand()

        assigner.assign([make_hitter('c', positions=('C',))], template)

        assert all(s.player is None for s in template)

    def test_empty_configuration(self, assigner):
        assert assigner.assign([make_hitter('a')], RosterConfig()) == []

    def test_open_slot_counts(self, assigner, settings):
        slots = assigner.assign([make_hitter('c', positions=('C',))], settings.roster_config)

        assert assigner.count_open_bench(slots) == 3
        assert assigner.count_open_starting(slots) == 16
        assert len(assigner.open_slots(slots)) == 19
