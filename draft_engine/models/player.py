"""Player projection model used by the valuation engine."""
from dataclasses import dataclass, fields, replace
from typing import Dict, Optional, Tuple


HITTER = 'hitter'
PITCHER = 'pitcher'
ROLES = (HITTER, PITCHER)

PITCHER_POSITIONS = ('SP', 'RP', 'P')
KNOWN_POSITIONS = ('C', '1B', '2B', '3B', 'SS', 'OF', 'DH', 'SP', 'RP')

# Counting components the aggregator sums (ratio stats are derived from these)
HITTER_STAT_FIELDS = ('ab', 'h', 'r', 'hr', 'rbi', 'sb', 'bb', 'hbp', 'sf')
PITCHER_STAT_FIELDS = ('ip', 'er', 'ha', 'bba', 'w', 'sv', 'k', 'qs', 'hld')

# Unranked players sort after everyone else
RANK_SENTINEL = 999999.0

# Risk assumed for players whose projection source carries none
DEFAULT_RISK = 0.3


@dataclass(frozen=True)
class Player:
    """A single projected player. Never mutated once built."""
    player_id: str
    name: str
    team: str
    positions: Tuple[str, ...]  # e.g. ("C", "1B") or ("SP", "RP")
    hitter_or_pitcher: str = HITTER

    # Hitter projections
    ab: Optional[float] = None
    h: Optional[float] = None
    r: Optional[float] = None
    hr: Optional[float] = None
    rbi: Optional[float] = None
    sb: Optional[float] = None
    bb: Optional[float] = None
    hbp: Optional[float] = None
    sf: Optional[float] = None
    # Pre-computed rate stats (display only; totals use components)
    avg: Optional[float] = None
    obp: Optional[float] = None

    # Pitcher projections
    w: Optional[float] = None
    sv: Optional[float] = None
    k: Optional[float] = None
    ip: Optional[float] = None
    er: Optional[float] = None
    ha: Optional[float] = None  # hits allowed
    bba: Optional[float] = None  # walks allowed
    era: Optional[float] = None
    whip: Optional[float] = None
    qs: Optional[float] = None
    hld: Optional[float] = None

    # Draft meta
    adp: Optional[float] = None
    overall_rank: Optional[float] = None
    risk: Optional[float] = None  # 0-1, 0 = safest

    def __post_init__(self):
        if not self.player_id:
            raise ValueError("player_id must be a non-empty string")
        positions = tuple(p.upper() for p in self.positions)
        if not positions:
            raise ValueError(f"Player {self.player_id!r} has no eligible positions")
        object.__setattr__(self, 'positions', positions)

        if self.hitter_or_pitcher not in ROLES:
            raise ValueError(
                f"Player {self.player_id!r} has unknown role {self.hitter_or_pitcher!r}"
            )
        pitcher_only = all(p in PITCHER_POSITIONS for p in positions)
        if pitcher_only and self.hitter_or_pitcher != PITCHER:
            raise ValueError(
                f"Player {self.player_id!r} only has pitcher positions but is tagged as a hitter"
            )
        if self.risk is not None and not 0.0 <= self.risk <= 1.0:
            raise ValueError(f"Player {self.player_id!r} risk {self.risk} is outside [0, 1]")

    @property
    def is_pitcher(self) -> bool:
        return self.hitter_or_pitcher == PITCHER

    @property
    def is_hitter(self) -> bool:
        return self.hitter_or_pitcher == HITTER

    @property
    def stat_fields(self) -> Tuple[str, ...]:
        """Counting fields that belong to this player's role."""
        return PITCHER_STAT_FIELDS if self.is_pitcher else HITTER_STAT_FIELDS

    @property
    def effective_risk(self) -> float:
        return DEFAULT_RISK if self.risk is None else self.risk

    def stat(self, name: str) -> float:
        """Projection for a stat, with missing values read as zero."""
        value = getattr(self, name.lower(), None)
        if value is None:
            return 0.0
        return float(value)

    def rank_key(self) -> Tuple[float, float, str]:
        """
        Ordering used when placing players into slots.

        Overall rank first, ADP as tie-break, player id last so equal ranks
        still give the same order regardless of input order.
        """
        rank = self.overall_rank if self.overall_rank is not None else RANK_SENTINEL
        adp = self.adp if self.adp is not None else RANK_SENTINEL
        return (rank, adp, self.player_id)

    def base_rank(self) -> float:
        """Single rank number: overall rank, else ADP, else the sentinel."""
        if self.overall_rank is not None:
            return float(self.overall_rank)
        if self.adp is not None:
            return float(self.adp)
        return RANK_SENTINEL

    def with_scaled_stats(self, scale: float) -> 'Player':
        """Copy of this player with role-appropriate counting stats scaled."""
        changes = {}
        for name in self.stat_fields:
            value = getattr(self, name)
            if value is not None:
                changes[name] = value * scale
        return replace(self, **changes)

    def to_dict(self) -> Dict:
        """Convert player to dictionary, dropping absent projections."""
        data = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            data[f.name] = list(value) if f.name == 'positions' else value
        return data

    @classmethod
    def from_dict(cls, data: dict) -> 'Player':
        """Create player from dictionary."""
        known = {f.name for f in fields(cls)}
        kwargs = {key: value for key, value in data.items() if key in known}
        positions = kwargs.get('positions') or ()
        if isinstance(positions, str):
            positions = [p.strip() for p in positions.replace('/', ',').split(',') if p.strip()]
        kwargs['positions'] = tuple(positions)
        return cls(**kwargs)
