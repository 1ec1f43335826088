"""League settings, category definitions and roster slot structures."""
import re
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Tuple

from draft_engine.models.player import HITTER, ROLES, Player


HIGHER = 'higher'
LOWER = 'lower'
DIRECTIONS = (HIGHER, LOWER)

# Slot priority classes used by the roster assigner (lower fills first)
STARTING_PRIORITY = 1
FLEX_PRIORITY = 2
BENCH_PRIORITY = 3

MIN_TEAMS = 2
MAX_BENCH_MULTIPLIER = 0.9

# Flex labels may carry a slot number (UTIL2, P1)
_UTIL_LABEL = re.compile(r'UTIL\d*')
_PITCHER_FLEX_LABEL = re.compile(r'P\d*')


def is_bench_label(label: str) -> bool:
    return label.upper().startswith('BN')


def is_util_label(label: str) -> bool:
    return _UTIL_LABEL.fullmatch(label.upper()) is not None


def is_pitcher_flex_label(label: str) -> bool:
    return _PITCHER_FLEX_LABEL.fullmatch(label.upper()) is not None


def slot_priority(label: str) -> int:
    """Priority class for a slot label: starting, then flex, then bench."""
    if is_bench_label(label):
        return BENCH_PRIORITY
    if is_util_label(label) or is_pitcher_flex_label(label):
        return FLEX_PRIORITY
    return STARTING_PRIORITY


@dataclass(frozen=True)
class CategoryDef:
    """A scoring category."""
    key: str
    label: str
    direction: str = HIGHER  # "higher" for counting stats, "lower" for ERA/WHIP
    enabled: bool = True
    role: str = HITTER

    def __post_init__(self):
        if self.direction not in DIRECTIONS:
            raise ValueError(f"Category {self.key!r} has unknown direction {self.direction!r}")
        if self.role not in ROLES:
            raise ValueError(f"Category {self.key!r} has unknown role {self.role!r}")

    @property
    def lower_is_better(self) -> bool:
        return self.direction == LOWER


@dataclass(frozen=True)
class SlotTemplate:
    """One entry of a roster configuration."""
    label: str
    eligible_positions: Tuple[str, ...]

    def __post_init__(self):
        object.__setattr__(
            self, 'eligible_positions', tuple(p.upper() for p in self.eligible_positions)
        )


@dataclass
class RosterSlot:
    """
    Scratch slot built fresh for every assignment pass.

    Flex slots ignore their position list for eligibility: UTIL takes any
    hitter and P takes any pitcher. The list still counts for specificity.
    """
    slot_id: str
    label: str
    eligible_positions: Tuple[str, ...]
    player: Optional[Player] = None

    @property
    def is_bench(self) -> bool:
        return is_bench_label(self.label)

    @property
    def is_flex(self) -> bool:
        return is_util_label(self.label) or is_pitcher_flex_label(self.label)

    @property
    def is_open(self) -> bool:
        return self.player is None

    @property
    def priority(self) -> int:
        return slot_priority(self.label)

    def accepts(self, player: Player) -> bool:
        """Whether the player is eligible for this slot (ignores occupancy)."""
        if is_util_label(self.label):
            return player.is_hitter
        if is_pitcher_flex_label(self.label):
            return player.is_pitcher
        return any(pos in self.eligible_positions for pos in player.positions)


@dataclass(frozen=True)
class RosterConfig:
    """Ordered list of slot templates."""
    slots: Tuple[SlotTemplate, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, 'slots', tuple(self.slots))

    def __len__(self) -> int:
        return len(self.slots)

    def expand(self) -> List[RosterSlot]:
        """Build a fresh, empty slot list."""
        return [
            RosterSlot(
                slot_id=f"{template.label}_{idx + 1}",
                label=template.label,
                eligible_positions=template.eligible_positions,
            )
            for idx, template in enumerate(self.slots)
        ]

    def to_dict(self) -> Dict:
        return {
            'slots': [
                {'label': s.label, 'eligible_positions': list(s.eligible_positions)}
                for s in self.slots
            ]
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'RosterConfig':
        return cls(slots=tuple(
            SlotTemplate(label=s['label'], eligible_positions=tuple(s.get('eligible_positions', ())))
            for s in data.get('slots', [])
        ))


@dataclass(frozen=True)
class LeagueSettings:
    """League-wide configuration the engine reads."""
    num_teams: int
    categories: Tuple[CategoryDef, ...]
    roster_config: RosterConfig
    targets: Mapping[str, float] = field(default_factory=dict)  # fallback means for z-scores
    bench_multiplier: float = 0.2
    competitive_threshold_z: float = 0.0

    def __post_init__(self):
        object.__setattr__(self, 'categories', tuple(self.categories))
        object.__setattr__(self, 'targets', dict(self.targets))

    @property
    def active_categories(self) -> List[CategoryDef]:
        return [c for c in self.categories if c.enabled]

    @property
    def roster_size(self) -> int:
        return len(self.roster_config)

    def to_dict(self) -> Dict:
        """Convert settings to dictionary."""
        return {
            'num_teams': self.num_teams,
            'categories': [
                {
                    'key': c.key,
                    'label': c.label,
                    'direction': c.direction,
                    'enabled': c.enabled,
                    'role': c.role,
                }
                for c in self.categories
            ],
            'roster_config': self.roster_config.to_dict(),
            'targets': dict(self.targets),
            'bench_multiplier': self.bench_multiplier,
            'competitive_threshold_z': self.competitive_threshold_z,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'LeagueSettings':
        """
        Create settings from dictionary.

        Team count is raised to at least 2 and the bench multiplier clamped
        to [0, 0.9]; callers building settings directly are trusted as-is.
        """
        bench = float(data.get('bench_multiplier', 0.2))
        return cls(
            num_teams=max(MIN_TEAMS, int(data.get('num_teams', MIN_TEAMS))),
            categories=tuple(CategoryDef(**c) for c in data.get('categories', [])),
            roster_config=RosterConfig.from_dict(data.get('roster_config', {})),
            targets={k: float(v) for k, v in data.get('targets', {}).items()},
            bench_multiplier=min(MAX_BENCH_MULTIPLIER, max(0.0, bench)),
            competitive_threshold_z=float(data.get('competitive_threshold_z', 0.0)),
        )
