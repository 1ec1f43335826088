"""Pytest configuration and fixtures for tests."""
import pytest

from draft_engine.models.player import Player
from draft_engine.models.settings import LeagueSettings, RosterConfig, SlotTemplate
from draft_engine.services.league_defaults import default_league_settings


def make_hitter(player_id, positions=('OF',), name=None, **stats):
    """Hitter with a full-season line unless overridden."""
    line = dict(ab=550, h=150, r=80, hr=25, rbi=80, sb=10, bb=55, hbp=5, sf=5)
    line.update(stats)
    return Player(
        player_id=player_id,
        name=name or f"Hitter {player_id}",
        team='TST',
        positions=tuple(positions),
        hitter_or_pitcher='hitter',
        **line
    )


def make_pitcher(player_id, positions=('SP',), name=None, **stats):
    """Starter with a full-season line unless overridden."""
    line = dict(ip=180, er=70, ha=160, bba=50, w=12, sv=0, k=190, qs=16, hld=0)
    line.update(stats)
    return Player(
        player_id=player_id,
        name=name or f"Pitcher {player_id}",
        team='TST',
        positions=tuple(positions),
        hitter_or_pitcher='pitcher',
        **line
    )


@pytest.fixture
def settings():
    """Default 12-team league settings."""
    return default_league_settings()


@pytest.fixture
def small_settings():
    """Four-team league with a compact roster."""
    return LeagueSettings(
        num_teams=4,
        categories=default_league_settings().categories,
        roster_config=RosterConfig(slots=(
            SlotTemplate('C', ('C',)),
            SlotTemplate('SS', ('SS',)),
            SlotTemplate('OF', ('OF',)),
            SlotTemplate('UTIL', ('C', '1B', '2B', '3B', 'SS', 'OF', 'DH')),
            SlotTemplate('SP', ('SP',)),
            SlotTemplate('RP', ('RP',)),
            SlotTemplate('BN1', ('C', '1B', '2B', '3B', 'SS', 'OF', 'DH', 'SP', 'RP')),
        )),
        targets={},
        bench_multiplier=0.2,
        competitive_threshold_z=0.0,
    )


@pytest.fixture
def sample_catalog():
    """Forty ranked players: 24 hitters and 16 pitchers with interleaved ranks."""
    players = []
    hitter_positions = [('C',), ('1B',), ('2B',), ('3B',), ('SS',), ('OF',), ('OF',), ('2B', 'SS')]
    for i in range(24):
        players.append(make_hitter(
            f"h{i}",
            positions=hitter_positions[i % len(hitter_positions)],
            overall_rank=float(2 * i + 1),
            adp=float(2 * i + 1),
            hr=35 - i,
            r=100 - i * 2,
            rbi=100 - i * 2,
            sb=5 + (i % 5) * 4,
            h=170 - i * 2,
        ))
    for i in range(16):
        rank = float(2 * i + 2)
        if i % 4 == 3:
            players.append(make_pitcher(
                f"p{i}", positions=('RP',), overall_rank=rank, adp=rank,
                ip=70, er=22 + i, ha=55, bba=20, k=85, sv=30, w=4, qs=0,
            ))
        else:
            players.append(make_pitcher(
                f"p{i}", overall_rank=rank, adp=rank, k=230 - i * 6, er=55 + i * 2,
            ))
    return players
