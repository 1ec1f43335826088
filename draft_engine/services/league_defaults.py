"""
Default league configuration.

Represents a standard 12-team 5x5 rotisserie league. Targets and spreads
anchor z-scores whenever no simulated league distributions are available.

Simulation tunables can be overridden from the environment:
- DRAFT_ENGINE_SIM_ITERATIONS
- DRAFT_ENGINE_SIM_SEED
- DRAFT_ENGINE_SIM_RANDOMNESS
"""
import logging
import os
from typing import Dict, Optional

from draft_engine.models.player import HITTER, PITCHER
from draft_engine.models.settings import (
    HIGHER,
    LOWER,
    CategoryDef,
    LeagueSettings,
    RosterConfig,
    SlotTemplate,
)


logger = logging.getLogger(__name__)

HITTER_POSITIONS = ('C', '1B', '2B', '3B', 'SS', 'OF', 'DH')
ALL_POSITIONS = HITTER_POSITIONS + ('SP', 'RP')

DEFAULT_HITTER_CATEGORIES = (
    CategoryDef('R', 'Runs', HIGHER, True, HITTER),
    CategoryDef('HR', 'Home Runs', HIGHER, True, HITTER),
    CategoryDef('RBI', 'RBI', HIGHER, True, HITTER),
    CategoryDef('SB', 'Stolen Bases', HIGHER, True, HITTER),
    CategoryDef('AVG', 'Batting Avg', HIGHER, True, HITTER),
    CategoryDef('OBP', 'On-Base Pct', HIGHER, False, HITTER),
)

DEFAULT_PITCHER_CATEGORIES = (
    CategoryDef('W', 'Wins', HIGHER, True, PITCHER),
    CategoryDef('SV', 'Saves', HIGHER, True, PITCHER),
    CategoryDef('K', 'Strikeouts', HIGHER, True, PITCHER),
    CategoryDef('ERA', 'ERA', LOWER, True, PITCHER),
    CategoryDef('WHIP', 'WHIP', LOWER, True, PITCHER),
    CategoryDef('QS', 'Quality Starts', HIGHER, False, PITCHER),
    CategoryDef('HLD', 'Holds', HIGHER, False, PITCHER),
)

DEFAULT_ROSTER_CONFIG = RosterConfig(slots=(
    SlotTemplate('C', ('C',)),
    SlotTemplate('1B', ('1B',)),
    SlotTemplate('2B', ('2B',)),
    SlotTemplate('3B', ('3B',)),
    SlotTemplate('SS', ('SS',)),
    SlotTemplate('OF1', ('OF',)),
    SlotTemplate('OF2', ('OF',)),
    SlotTemplate('OF3', ('OF',)),
    SlotTemplate('UTIL', HITTER_POSITIONS),
    SlotTemplate('SP1', ('SP',)),
    SlotTemplate('SP2', ('SP',)),
    SlotTemplate('SP3', ('SP',)),
    SlotTemplate('SP4', ('SP',)),
    SlotTemplate('SP5', ('SP',)),
    SlotTemplate('RP1', ('RP',)),
    SlotTemplate('RP2', ('RP',)),
    SlotTemplate('P', ('SP', 'RP')),
    SlotTemplate('BN1', ALL_POSITIONS),
    SlotTemplate('BN2', ALL_POSITIONS),
    SlotTemplate('BN3', ALL_POSITIONS),
))

# "Aim for" totals of a competitive roster in a 12-team league
DEFAULT_TARGETS: Dict[str, float] = {
    'R': 850,
    'HR': 220,
    'RBI': 830,
    'SB': 120,
    'AVG': 0.265,
    'OBP': 0.340,
    'W': 70,
    'SV': 75,
    'K': 1200,
    'ERA': 3.70,
    'WHIP': 1.18,
    'QS': 80,
    'HLD': 60,
}

# Approximate spread of full-season team totals across 12 teams
DEFAULT_STDEVS: Dict[str, float] = {
    'R': 65,
    'HR': 30,
    'RBI': 60,
    'SB': 30,
    'AVG': 0.012,
    'OBP': 0.012,
    'W': 10,
    'SV': 20,
    'K': 120,
    'ERA': 0.40,
    'WHIP': 0.06,
    'QS': 12,
    'HLD': 15,
}

DEFAULT_NUM_TEAMS = 12
DEFAULT_BENCH_MULTIPLIER = 0.2
DEFAULT_COMPETITIVE_THRESHOLD_Z = 0.0

# League distribution simulation
SIM_ITERATIONS_DEFAULT = 160
SIM_SEED_DEFAULT = 1337
SIM_RANDOMNESS_DEFAULT = 14.0  # std of rank noise; higher = more draft variance

_SIM_ITERATIONS_ENV = 'DRAFT_ENGINE_SIM_ITERATIONS'
_SIM_SEED_ENV = 'DRAFT_ENGINE_SIM_SEED'
_SIM_RANDOMNESS_ENV = 'DRAFT_ENGINE_SIM_RANDOMNESS'


def default_league_settings() -> LeagueSettings:
    """Full default settings (fresh object each call)."""
    return LeagueSettings(
        num_teams=DEFAULT_NUM_TEAMS,
        categories=DEFAULT_HITTER_CATEGORIES + DEFAULT_PITCHER_CATEGORIES,
        roster_config=DEFAULT_ROSTER_CONFIG,
        targets=dict(DEFAULT_TARGETS),
        bench_multiplier=DEFAULT_BENCH_MULTIPLIER,
        competitive_threshold_z=DEFAULT_COMPETITIVE_THRESHOLD_Z,
    )


def _env_int(name: str, default: int, *, min_value: Optional[int] = None) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Invalid int for %s: %s; using default %d", name, raw, default)
        return default
    if min_value is not None:
        value = max(min_value, value)
    return value


def _env_float(name: str, default: float, *, clamp_min: Optional[float] = None) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Invalid float for %s: %s; using default %.2f", name, raw, default)
        return default
    if clamp_min is not None:
        value = max(clamp_min, value)
    return value


def simulation_iterations() -> int:
    return _env_int(_SIM_ITERATIONS_ENV, SIM_ITERATIONS_DEFAULT, min_value=1)


def simulation_seed() -> int:
    return _env_int(_SIM_SEED_ENV, SIM_SEED_DEFAULT)


def simulation_randomness() -> float:
    return _env_float(_SIM_RANDOMNESS_ENV, SIM_RANDOMNESS_DEFAULT, clamp_min=0.0)
