"""Aggregate player projections into roster category totals."""
from dataclasses import asdict, dataclass
from typing import Dict, Iterable, List, Sequence, Tuple

from draft_engine.models.player import HITTER_STAT_FIELDS, PITCHER_STAT_FIELDS, Player
from draft_engine.models.settings import LOWER, RosterSlot


# Shrinkage priors for ratio stats while a roster is still small. A roster
# with few AB/IP gets pulled toward the league mean instead of swinging
# wildly (or reading a perfect 0.00 ERA with no pitchers at all).
PRIOR_AB = 1000.0  # roughly 15-20% of a full roster's AB
PRIOR_IP = 200.0  # roughly 10-15% of a full staff's IP

# At or above these the raw ratio is used as-is
STABLE_AB = 3500.0
STABLE_IP = 900.0


@dataclass(frozen=True)
class RosterTotals:
    """Counting sums plus ratio stats computed from summed components."""
    # Hitter counting
    R: float = 0.0
    HR: float = 0.0
    RBI: float = 0.0
    SB: float = 0.0
    # Hitter denominators
    AB: float = 0.0
    H: float = 0.0
    BB: float = 0.0
    HBP: float = 0.0
    SF: float = 0.0
    # Hitter ratios
    AVG: float = 0.0
    OBP: float = 0.0
    # Pitcher counting
    W: float = 0.0
    SV: float = 0.0
    K: float = 0.0
    QS: float = 0.0
    HLD: float = 0.0
    # Pitcher denominators
    IP: float = 0.0
    ER: float = 0.0
    HA: float = 0.0
    BBA: float = 0.0
    # Pitcher ratios
    ERA: float = 0.0
    WHIP: float = 0.0

    def value(self, key: str) -> float:
        """Raw value for a category key; unknown keys read as zero."""
        return float(getattr(self, key, 0.0))

    @property
    def obp_numerator(self) -> float:
        return self.H + self.BB + self.HBP

    @property
    def obp_denominator(self) -> float:
        return self.AB + self.BB + self.HBP + self.SF

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


def _ratio(numerator: float, denominator: float) -> float:
    return numerator / denominator if denominator > 0 else 0.0


class StatAggregator:
    """Calculates roster totals and the category values used for z-scores."""

    def calculate_totals(self, weighted_players: Iterable[Tuple[Player, float]]) -> RosterTotals:
        """
        Sum weighted projections into roster totals.

        Args:
            weighted_players: (player, weight) pairs. Weight is 1.0 for a
                starter and the league bench multiplier for a bench slot.

        Returns:
            RosterTotals. Ratio categories are always summed numerator over
            summed denominator, never an average of per-player ratios.
        """
        sums = {name: 0.0 for name in HITTER_STAT_FIELDS + PITCHER_STAT_FIELDS}

        for player, weight in weighted_players:
            for name in player.stat_fields:
                sums[name] += player.stat(name) * weight

        ab, h, bb, hbp, sf = sums['ab'], sums['h'], sums['bb'], sums['hbp'], sums['sf']
        ip, er, ha, bba = sums['ip'], sums['er'], sums['ha'], sums['bba']

        return RosterTotals(
            R=sums['r'],
            HR=sums['hr'],
            RBI=sums['rbi'],
            SB=sums['sb'],
            AB=ab,
            H=h,
            BB=bb,
            HBP=hbp,
            SF=sf,
            AVG=_ratio(h, ab),
            OBP=_ratio(h + bb + hbp, ab + bb + hbp + sf),
            W=sums['w'],
            SV=sums['sv'],
            K=sums['k'],
            QS=sums['qs'],
            HLD=sums['hld'],
            IP=ip,
            ER=er,
            HA=ha,
            BBA=bba,
            ERA=_ratio(er * 9, ip),
            WHIP=_ratio(bba + ha, ip),
        )

    def totals_for_players(self, players: Iterable[Player]) -> RosterTotals:
        """Totals with every player counted at full weight."""
        return self.calculate_totals((player, 1.0) for player in players)

    def totals_from_slots(self, slots: Sequence[RosterSlot], bench_multiplier: float) -> RosterTotals:
        """Totals for an assigned roster; bench slots count at the discount."""
        return self.calculate_totals(self.weighted_players(slots, bench_multiplier))

    @staticmethod
    def weighted_players(slots: Sequence[RosterSlot], bench_multiplier: float) -> List[Tuple[Player, float]]:
        return [
            (slot.player, bench_multiplier if slot.is_bench else 1.0)
            for slot in slots
            if slot.player is not None
        ]

    def category_value_for_z(self, totals: RosterTotals, key: str, mean: float) -> float:
        """
        Category value fed into a z-score.

        Counting categories pass through. Ratio categories are stabilized:
        no denominator at all reads as the league mean, a large enough
        denominator uses the raw ratio, anything in between is blended with
        a prior sample sitting exactly at the mean.
        """
        if key == 'AVG':
            return self._shrink(totals.H, totals.AB, mean, PRIOR_AB, STABLE_AB)
        if key == 'OBP':
            return self._shrink(
                totals.obp_numerator, totals.obp_denominator, mean, PRIOR_AB, STABLE_AB
            )
        if key == 'ERA':
            # ERA is per nine innings, so the prior works in earned runs
            if totals.IP <= 0:
                return mean
            if totals.IP >= STABLE_IP:
                return totals.ERA
            prior_er = mean * PRIOR_IP / 9
            return (totals.ER + prior_er) * 9 / (totals.IP + PRIOR_IP)
        if key == 'WHIP':
            return self._shrink(totals.BBA + totals.HA, totals.IP, mean, PRIOR_IP, STABLE_IP)
        return totals.value(key)

    @staticmethod
    def _shrink(numerator: float, denominator: float, mean: float, prior: float, stable: float) -> float:
        if denominator <= 0:
            return mean
        if denominator >= stable:
            return numerator / denominator
        return (numerator + mean * prior) / (denominator + prior)

    @staticmethod
    def z_score(value: float, mean: float, std: float, direction: str) -> float:
        """Sign-normalized z-score: positive always means ahead of the league."""
        if std == 0:
            return 0.0
        if direction == LOWER:
            return (mean - value) / std
        return (value - mean) / std


def format_stat(key: str, value: float) -> str:
    """Display formatting for a category value."""
    if key in ('AVG', 'OBP'):
        return f"{value:.3f}"
    if key in ('ERA', 'WHIP'):
        return f"{value:.2f}"
    return str(int(round(value)))
