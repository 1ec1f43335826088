"""Snake draft ordering."""


class DraftOrder:
    """Pick order for a snake draft: direction reverses every round."""

    @staticmethod
    def round_number(pick_index: int, total_teams: int) -> int:
        """0-based round for a 0-based overall pick index."""
        return pick_index // total_teams

    @classmethod
    def team_index_for_pick(cls, pick_index: int, total_teams: int) -> int:
        """
        Team (0-based) on the clock for a given pick.

        Args:
            pick_index: The overall pick (0-indexed)
            total_teams: Total number of teams

        Returns:
            Team index. Even rounds run 0..N-1, odd rounds N-1..0.
        """
        pick_in_round = pick_index % total_teams
        if cls.round_number(pick_index, total_teams) % 2 == 0:
            return pick_in_round
        return total_teams - 1 - pick_in_round
