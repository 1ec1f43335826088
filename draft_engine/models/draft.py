"""Draft state for the drafter using the coach."""
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Dict, List, Optional, Set, Tuple


@dataclass(frozen=True)
class DraftPick:
    """Represents a single pick made by the drafter."""
    player_id: str
    round: Optional[int] = None
    overall_pick: Optional[int] = None
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat())


@dataclass(frozen=True)
class DraftState:
    """
    Picks made so far plus the drafter's risk preference.

    Every transition returns a new state; drafting a player that is already
    taken returns the state unchanged.
    """
    my_picks: Tuple[DraftPick, ...] = ()
    other_picks: Tuple[str, ...] = ()  # player ids taken by other teams
    risk_tolerance: float = 0.5  # 0 = conservative, 1 = aggressive

    def __post_init__(self):
        object.__setattr__(self, 'my_picks', tuple(self.my_picks))
        object.__setattr__(self, 'other_picks', tuple(self.other_picks))
        object.__setattr__(self, 'risk_tolerance', min(1.0, max(0.0, float(self.risk_tolerance))))

    def my_player_ids(self) -> List[str]:
        """Get list of player IDs on my team, in pick order."""
        return [pick.player_id for pick in self.my_picks]

    def drafted_ids(self) -> Set[str]:
        """Get all drafted player IDs."""
        drafted = set(self.my_player_ids())
        drafted.update(self.other_picks)
        return drafted

    def next_overall_pick(self) -> int:
        return len(self.drafted_ids()) + 1

    def draft_for_me(
        self,
        player_id: str,
        round: Optional[int] = None,
        overall_pick: Optional[int] = None
    ) -> 'DraftState':
        if player_id in self.drafted_ids():
            return self
        pick = DraftPick(player_id=player_id, round=round, overall_pick=overall_pick)
        return replace(self, my_picks=self.my_picks + (pick,))

    def draft_for_other(self, player_id: str) -> 'DraftState':
        if player_id in self.drafted_ids():
            return self
        return replace(self, other_picks=self.other_picks + (player_id,))

    def remove_last_my_pick(self) -> 'DraftState':
        if not self.my_picks:
            return self
        return replace(self, my_picks=self.my_picks[:-1])

    def undraft_other(self, player_id: str) -> 'DraftState':
        return replace(
            self, other_picks=tuple(pid for pid in self.other_picks if pid != player_id)
        )

    def with_risk_tolerance(self, risk_tolerance: float) -> 'DraftState':
        return replace(self, risk_tolerance=risk_tolerance)

    def to_dict(self) -> Dict:
        """Convert draft state to dictionary."""
        return {
            'my_picks': [pick.__dict__.copy() for pick in self.my_picks],
            'other_picks': list(self.other_picks),
            'risk_tolerance': self.risk_tolerance,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'DraftState':
        """Create draft state from dictionary."""
        picks = tuple(DraftPick(**pick_data) for pick_data in data.get('my_picks', []))
        return cls(
            my_picks=picks,
            other_picks=tuple(data.get('other_picks', [])),
            risk_tolerance=float(data.get('risk_tolerance', 0.5)),
        )
