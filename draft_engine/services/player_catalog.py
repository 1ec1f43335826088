"""Normalize raw player records and index the in-memory catalog."""
import logging
import math
from typing import Dict, Iterable, List, Mapping, Optional

from draft_engine.models.draft import DraftState
from draft_engine.models.player import HITTER, KNOWN_POSITIONS, PITCHER, ROLES, Player


logger = logging.getLogger(__name__)

_NUMERIC_FIELDS = (
    'ab', 'h', 'r', 'hr', 'rbi', 'sb', 'bb', 'hbp', 'sf', 'avg', 'obp',
    'w', 'sv', 'k', 'ip', 'er', 'ha', 'bba', 'era', 'whip', 'qs', 'hld',
    'adp', 'overall_rank',
)


def _to_float(value) -> Optional[float]:
    """Parse a numeric field; anything unusable becomes None."""
    if value is None or value == '':
        return None
    try:
        number = float(value)
    except (ValueError, TypeError):
        return None
    if not math.isfinite(number):
        return None
    return number


def _round_half_up(value: float) -> float:
    return float(math.floor(value + 0.5))


def _clamp01(value) -> Optional[float]:
    number = _to_float(value)
    if number is None:
        return None
    return max(0.0, min(1.0, number))


def normalize_positions(positions) -> List[str]:
    """Upper-case, trim and de-duplicate positions; keep only known codes."""
    if isinstance(positions, str):
        positions = positions.replace('/', ',').split(',')
    if not isinstance(positions, (list, tuple)):
        return []
    normalized = []
    for pos in positions:
        code = str(pos).strip().upper()
        # a bare "P" says nothing about SP vs RP
        if code == 'P':
            continue
        if code in KNOWN_POSITIONS and code not in normalized:
            normalized.append(code)
    return normalized


def normalize_player(raw: Mapping) -> Player:
    """
    Build a Player from a loosely-typed record.

    Role is inferred from positions when absent, risk is clamped to [0, 1],
    unparseable numbers are dropped, and missing H / ER components are
    back-filled from AVG / ERA so ratio math has something to sum.
    """
    positions = normalize_positions(raw.get('positions'))
    role = raw.get('hitter_or_pitcher')
    if role not in ROLES:
        role = PITCHER if ('SP' in positions or 'RP' in positions) else HITTER
    if not positions:
        positions = ['SP'] if role == PITCHER else ['OF']
    elif role == HITTER and all(p in ('SP', 'RP') for p in positions):
        role = PITCHER

    stats: Dict[str, Optional[float]] = {name: _to_float(raw.get(name)) for name in _NUMERIC_FIELDS}

    if role == HITTER:
        if stats['ab'] is not None and stats['avg'] is not None and stats['h'] is None:
            stats['h'] = _round_half_up(stats['ab'] * stats['avg'])
    else:
        if stats['ip'] is not None and stats['era'] is not None and stats['er'] is None:
            stats['er'] = _round_half_up(stats['era'] * stats['ip'] / 9)

    return Player(
        player_id=str(raw.get('player_id', '')).strip(),
        name=str(raw.get('name') or '').strip(),
        team=str(raw.get('team') or '').strip().upper(),
        positions=tuple(positions),
        hitter_or_pitcher=role,
        risk=_clamp01(raw.get('risk')),
        **stats,
    )


class PlayerCatalog:
    """Read-only index of normalized players."""

    def __init__(self, players: Iterable[Player]):
        self._players: List[Player] = []
        self._by_id: Dict[str, Player] = {}
        for player in players:
            if player.player_id in self._by_id:
                logger.warning("Duplicate player id %s; keeping the first entry", player.player_id)
                continue
            self._players.append(player)
            self._by_id[player.player_id] = player

    @classmethod
    def from_records(cls, records: Iterable[Mapping]) -> 'PlayerCatalog':
        """Normalize raw records; records that still fail validation are skipped."""
        players = []
        for record in records:
            try:
                players.append(normalize_player(record))
            except ValueError as e:
                logger.warning("Skipping player record %r: %s", record.get('player_id'), e)
        return cls(players)

    def __len__(self) -> int:
        return len(self._players)

    def __iter__(self):
        return iter(self._players)

    @property
    def players(self) -> List[Player]:
        return list(self._players)

    def get(self, player_id: str) -> Optional[Player]:
        return self._by_id.get(player_id)

    def available(self, drafted_ids: Iterable[str]) -> List[Player]:
        """Players not yet drafted, in catalog order."""
        drafted = set(drafted_ids)
        return [p for p in self._players if p.player_id not in drafted]

    def resolve(self, player_ids: Iterable[str]) -> List[Player]:
        """Players for the given ids, in the given order; unknown ids are skipped."""
        return [self._by_id[pid] for pid in player_ids if pid in self._by_id]

    def my_roster(self, state: DraftState) -> List[Player]:
        return self.resolve(state.my_player_ids())

    def available_for(self, state: DraftState) -> List[Player]:
        return self.available(state.drafted_ids())
