"""Place drafted players into roster slots."""
from typing import Iterable, List, Optional, Sequence, Union

from draft_engine.models.player import Player
from draft_engine.models.settings import RosterConfig, RosterSlot


class RosterAssigner:
    """
    Greedy, deterministic slot assignment.

    Players are placed best-first (overall rank, then ADP, then player id).
    Each one takes the open slot it is eligible for with the lowest priority
    class (starting, then UTIL/P flex, then bench), preferring the slot with
    the fewest listed positions. This is a heuristic, not an optimal
    matching: a later player can end up unplaced even though shuffling
    earlier placements would have made room. Simulated league baselines are
    built with the same heuristic, so changing it shifts every z-score.
    """

    def assign(
        self,
        players: Iterable[Player],
        slots: Union[RosterConfig, Sequence[RosterSlot]]
    ) -> List[RosterSlot]:
        """
        Assign players to a fresh copy of the given slots.

        Args:
            players: Drafted players, in any order.
            slots: A roster configuration or a template slot list. Template
                slots are copied and their occupants ignored.

        Returns:
            A new slot list. Players with no eligible open slot are left out;
            slots with no eligible player stay empty.
        """
        assigned = self._fresh_slots(slots)

        for player in sorted(players, key=Player.rank_key):
            target = self.best_open_slot(player, assigned)
            if target is not None:
                target.player = player

        return assigned

    @staticmethod
    def _fresh_slots(slots: Union[RosterConfig, Sequence[RosterSlot]]) -> List[RosterSlot]:
        if isinstance(slots, RosterConfig):
            return slots.expand()
        return [
            RosterSlot(slot_id=s.slot_id, label=s.label, eligible_positions=s.eligible_positions)
            for s in slots
        ]

    @staticmethod
    def best_open_slot(player: Player, slots: Sequence[RosterSlot]) -> Optional[RosterSlot]:
        """Most suitable open slot for a player, or None if nothing fits."""
        candidates = [s for s in slots if s.is_open and s.accepts(player)]
        if not candidates:
            return None
        # min() keeps the first of equal keys, so roster order breaks ties
        return min(candidates, key=lambda s: (s.priority, len(s.eligible_positions)))

    @staticmethod
    def open_slots(slots: Sequence[RosterSlot]) -> List[RosterSlot]:
        return [s for s in slots if s.is_open]

    @staticmethod
    def fillable_slots(player: Player, slots: Sequence[RosterSlot]) -> List[RosterSlot]:
        """Open slots the player is eligible for, in roster order."""
        return [s for s in slots if s.is_open and s.accepts(player)]

    @staticmethod
    def count_open_bench(slots: Sequence[RosterSlot]) -> int:
        return sum(1 for s in slots if s.is_open and s.is_bench)

    @staticmethod
    def count_open_starting(slots: Sequence[RosterSlot]) -> int:
        return sum(1 for s in slots if s.is_open and not s.is_bench)

    @staticmethod
    def assigned_players(slots: Sequence[RosterSlot]) -> List[Player]:
        return [s.player for s in slots if s.player is not None]
