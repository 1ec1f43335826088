"""Z-score based marginal value recommendations for draft picks."""
import logging
import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from draft_engine.models.player import Player
from draft_engine.models.settings import CategoryDef, LeagueSettings, RosterSlot
from draft_engine.services.league_defaults import DEFAULT_STDEVS, DEFAULT_TARGETS
from draft_engine.services.league_simulator import LeagueDistributions
from draft_engine.services.roster_assigner import RosterAssigner
from draft_engine.services.stat_aggregator import RosterTotals, StatAggregator


logger = logging.getLogger(__name__)

# Draft bonus for positions with thin replacement level
POSITION_SCARCITY_BONUS = {
    'C': 0.15,
    'SS': 0.08,
    '2B': 0.05,
    '3B': 0.03,
    '1B': 0.0,
    'OF': 0.0,
    'SP': 0.05,
    'RP': 0.02,
    'DH': -0.05,
}
LAST_SLOT_BONUS = 0.1
BENCH_ONLY_PENALTY = 0.1

# Category weighting
DEFICIT_ALPHA = 0.55
MAX_DEFICIT = 2.5
AHEAD_MARGIN = 1.5
AHEAD_DAMPEN = 0.25
MIN_WEIGHT = 0.4
MAX_WEIGHT = 2.8

# Risk: projection scaling and preference adjustment
RISK_FLOOR_HAIRCUT = 0.28
RISK_CEILING_BUMP = 0.10
CONSERVATIVE_PENALTY = 0.55
UPSIDE_BONUS = 0.12

# Early-draft well-roundedness bonus
EARLY_DRAFT_FILL = 0.3
HELPED_DELTA = 0.02
MULTI_CATEGORY_WEIGHT = 0.3

# ADP awareness
ELITE_ADP = 150.0
ELITE_BONUS = 0.5
REACH_GRACE = 20.0
REACH_SCALE = 80.0
REACH_RATE = 0.2
MAX_REACH_PENALTY = 0.25

# Explanation thresholds
EXPLAIN_DELTA = 0.01
MAX_EXPLAINED = 3
CAN_WAIT_MARGIN = 0.9
MAX_CAN_WAIT = 2


def clamp01(value: float) -> float:
    """Clamp to [0, 1]; non-finite input reads as 0."""
    if value is None or not math.isfinite(value):
        return 0.0
    return max(0.0, min(1.0, value))


@dataclass(frozen=True)
class CategoryImpact:
    before: float
    after: float
    delta: float


@dataclass(frozen=True)
class Recommendation:
    """A scored candidate with per-category impact and explanations."""
    player: Player
    total_z_gain: float
    category_impact: Dict[str, CategoryImpact] = field(default_factory=dict)
    raw_impact: Dict[str, CategoryImpact] = field(default_factory=dict)
    explanation: str = ''
    position_note: str = ''

    def to_dict(self) -> Dict:
        return {
            'player': self.player.to_dict(),
            'total_z_gain': self.total_z_gain,
            'category_impact': {k: v.__dict__.copy() for k, v in self.category_impact.items()},
            'raw_impact': {k: v.__dict__.copy() for k, v in self.raw_impact.items()},
            'explanation': self.explanation,
            'position_note': self.position_note,
        }


def apply_risk_for_scoring(player: Player, risk_tolerance: float) -> Player:
    """
    Scale a player's counting projections for the drafter's risk appetite.

    Conservative drafters see a playing-time haircut of up to 28% of the
    player's risk, aggressive ones a ceiling bump of up to 10%.
    """
    risk = clamp01(player.effective_risk)
    tolerance = clamp01(risk_tolerance)

    floor_scale = 1 - risk * RISK_FLOOR_HAIRCUT
    ceiling_scale = 1 + risk * RISK_CEILING_BUMP
    scale = floor_scale + (ceiling_scale - floor_scale) * tolerance

    if abs(scale - 1) < 1e-6:
        return player
    return player.with_scaled_stats(scale)


def position_scarcity_score(player: Player, open_slots: Sequence[RosterSlot]) -> float:
    """Positional bonus for a candidate given the slots still open."""
    fillable = [s for s in open_slots if s.is_open and s.accepts(player)]
    dedicated = [s for s in fillable if not s.is_bench and not s.is_flex]

    bonus = max(POSITION_SCARCITY_BONUS.get(pos, 0.0) for pos in player.positions)

    # Last open dedicated slot this player could fill
    if len(dedicated) == 1:
        bonus += LAST_SLOT_BONUS

    if fillable and all(s.is_bench for s in fillable):
        bonus -= BENCH_ONLY_PENALTY

    return bonus


def category_weights(
    z_scores: Dict[str, float],
    categories: Sequence[CategoryDef],
    threshold: float
) -> Dict[str, float]:
    """
    Emphasis per category from current standing.

    Categories below the competitive threshold are boosted by how far
    behind they are; those comfortably ahead are dampened.
    """
    weights = {}
    for category in categories:
        z = z_scores.get(category.key, 0.0)
        deficit = threshold - z
        boost = 1 + DEFICIT_ALPHA * min(deficit, MAX_DEFICIT) if deficit > 0 else 1.0
        dampen = 1 - AHEAD_DAMPEN if z > threshold + AHEAD_MARGIN else 1.0
        weights[category.key] = max(MIN_WEIGHT, min(MAX_WEIGHT, boost * dampen))
    return weights


def generate_explanation(
    impact: Dict[str, CategoryImpact],
    categories: Sequence[CategoryDef],
    current_z: Dict[str, float],
    threshold: float
) -> str:
    """Human-readable reason for a recommendation."""
    improvements = [
        c for c in categories if c.key in impact and impact[c.key].delta > EXPLAIN_DELTA
    ]
    improvements.sort(key=lambda c: impact[c.key].delta, reverse=True)
    top = improvements[:MAX_EXPLAINED]

    parts = []
    if top:
        boost = f"Boosts {', '.join(c.label for c in top)}"
        needed = [c.label for c in top if current_z.get(c.key, 0.0) < threshold]
        if needed:
            boost += f" where you need it most ({', '.join(needed)})"
        parts.append(boost)

    ahead = [c.label for c in categories if current_z.get(c.key, 0.0) > threshold + CAN_WAIT_MARGIN]
    if ahead:
        parts.append(
            f"You can wait on {', '.join(ahead[:MAX_CAN_WAIT])} (already competitive there)"
        )

    if not parts:
        return "No meaningful category gain."
    return '. '.join(parts) + '.'


def generate_position_note(player: Player, open_slots: Sequence[RosterSlot]) -> str:
    fillable = [s for s in open_slots if s.is_open and s.accepts(player)]
    starting = [s for s in fillable if not s.is_bench]
    if starting:
        return f"Fills {starting[0].label} slot"
    if fillable:
        return "Bench spot"
    return "No open slot"


class RecommendationEngine:
    """
    Scores available players by simulated z-score gain.

    For each candidate: add them to the roster, reassign slots, re-aggregate,
    and sum weighted z-score deltas across categories, then layer on
    position scarcity, an early-draft breadth bonus, risk preference and
    ADP context. Coefficients are empirically tuned; keep them exact.
    """

    def __init__(
        self,
        settings: LeagueSettings,
        distributions: Optional[LeagueDistributions] = None,
        assigner: Optional[RosterAssigner] = None,
        aggregator: Optional[StatAggregator] = None
    ):
        self.settings = settings
        self.distributions = distributions
        self.assigner = assigner or RosterAssigner()
        self.aggregator = aggregator or StatAggregator()

    def baseline(self, key: str) -> Tuple[float, float]:
        """(mean, std) for a category: simulated if available, else configured."""
        dist = self.distributions.get(key) if self.distributions is not None else None
        if dist is not None:
            return dist.mean, dist.std
        mean = self.settings.targets.get(key, DEFAULT_TARGETS.get(key, 0.0))
        std = DEFAULT_STDEVS.get(key, 1.0)
        return float(mean), float(std)

    def z_scores(self, totals: RosterTotals) -> Dict[str, float]:
        """Z-score per active category for the given totals."""
        scores = {}
        for category in self.settings.active_categories:
            mean, std = self.baseline(category.key)
            value = self.aggregator.category_value_for_z(totals, category.key, mean)
            scores[category.key] = self.aggregator.z_score(value, mean, std, category.direction)
        return scores

    def assign(self, players: Sequence[Player]) -> List[RosterSlot]:
        return self.assigner.assign(players, self.settings.roster_config)

    def roster_totals(self, players: Sequence[Player]) -> RosterTotals:
        """Totals for a roster after slot assignment and bench discount."""
        slots = self.assign(players)
        return self.aggregator.totals_from_slots(slots, self.settings.bench_multiplier)

    def current_z_scores(self, players: Sequence[Player]) -> Dict[str, float]:
        return self.z_scores(self.roster_totals(players))

    def get_recommendations(
        self,
        available_players: Sequence[Player],
        my_players: Sequence[Player],
        risk_tolerance: float,
        current_overall_pick: Optional[int] = None,
        top_n: int = 5
    ) -> List[Recommendation]:
        """
        Get top N draft recommendations.

        Args:
            available_players: Undrafted players to score.
            my_players: Players already on the drafter's roster.
            risk_tolerance: 0 = conservative, 1 = aggressive (clamped).
            current_overall_pick: Overall pick number, enables reach penalty.
            top_n: Number of recommendations to return.

        Returns:
            Recommendations sorted by total weighted z-gain, best first.
            Candidates that fit no open slot are silently left out.
        """
        if top_n <= 0:
            return []
        tolerance = clamp01(risk_tolerance)
        active = self.settings.active_categories
        threshold = self.settings.competitive_threshold_z
        slot_count = len(self.settings.roster_config)

        current_slots = self.assign(my_players)
        open_slots = self.assigner.open_slots(current_slots)
        current_totals = self.aggregator.totals_from_slots(current_slots, self.settings.bench_multiplier)
        current_z = self.z_scores(current_totals)
        weights = category_weights(current_z, active, threshold)

        scored = []
        for player in available_players:
            # With open slots, only consider players who can fit one
            if open_slots and not self.assigner.fillable_slots(player, open_slots):
                continue

            scoring_player = apply_risk_for_scoring(player, tolerance)
            next_slots = self.assign(list(my_players) + [scoring_player])
            if not any(s.player is scoring_player for s in next_slots):
                continue
            next_totals = self.aggregator.totals_from_slots(next_slots, self.settings.bench_multiplier)
            next_z = self.z_scores(next_totals)

            category_impact = {}
            raw_impact = {}
            total = 0.0
            for category in active:
                key = category.key
                before_z, after_z = current_z[key], next_z[key]
                delta = after_z - before_z
                category_impact[key] = CategoryImpact(before_z, after_z, delta)

                before_raw, after_raw = current_totals.value(key), next_totals.value(key)
                raw_impact[key] = CategoryImpact(before_raw, after_raw, after_raw - before_raw)

                total += delta * weights.get(key, 1.0)

            total += position_scarcity_score(player, open_slots)
            total += self._multi_category_bonus(category_impact, len(active), len(my_players), slot_count)
            total += self._risk_preference(player, tolerance)
            total += self._adp_adjustment(player, current_overall_pick)

            scored.append(Recommendation(
                player=player,
                total_z_gain=total,
                category_impact=category_impact,
                raw_impact=raw_impact,
                explanation=generate_explanation(category_impact, active, current_z, threshold),
                position_note=generate_position_note(player, open_slots),
            ))

        # stable sort: equal scores keep input order
        scored.sort(key=lambda rec: rec.total_z_gain, reverse=True)

        if scored:
            logger.debug(
                "Scored %d candidates: min %.3f, max %.3f, top %s",
                len(scored),
                scored[-1].total_z_gain,
                scored[0].total_z_gain,
                [f"{r.player.name}: {r.total_z_gain:.3f}" for r in scored[:3]],
            )
        else:
            logger.debug("No recommendations: no available player fits an open slot")

        return scored[:top_n]

    @staticmethod
    def _multi_category_bonus(
        impact: Dict[str, CategoryImpact],
        active_count: int,
        drafted_count: int,
        slot_count: int
    ) -> float:
        """Reward breadth while most of the roster is still open."""
        if active_count == 0 or slot_count == 0:
            return 0.0
        fill = drafted_count / slot_count
        if fill >= EARLY_DRAFT_FILL:
            return 0.0
        helped = sum(1 for imp in impact.values() if imp.delta > HELPED_DELTA)
        return (helped / active_count) * MULTI_CATEGORY_WEIGHT * (1 - fill)

    @staticmethod
    def _risk_preference(player: Player, tolerance: float) -> float:
        risk = clamp01(player.effective_risk)
        conservative_penalty = risk * (1 - tolerance) * CONSERVATIVE_PENALTY
        upside_bonus = risk * tolerance * UPSIDE_BONUS
        return upside_bonus - conservative_penalty

    @staticmethod
    def _adp_adjustment(player: Player, current_overall_pick: Optional[int]) -> float:
        """Elite-talent bonus, minus a penalty for reaching well ahead of ADP."""
        if player.adp is None or player.adp <= 0:
            return 0.0
        adjustment = max(0.0, (ELITE_ADP - player.adp) / ELITE_ADP) * ELITE_BONUS

        if current_overall_pick:
            reach = player.adp - current_overall_pick
            if reach > REACH_GRACE:
                adjustment -= min(MAX_REACH_PENALTY, ((reach - REACH_GRACE) / REACH_SCALE) * REACH_RATE)
        return adjustment


def get_recommendations(
    available_players: Sequence[Player],
    my_players: Sequence[Player],
    settings: LeagueSettings,
    distributions: Optional[LeagueDistributions],
    risk_tolerance: float,
    current_overall_pick: Optional[int] = None,
    top_n: int = 5
) -> List[Recommendation]:
    """Convenience wrapper around RecommendationEngine for a single pass."""
    engine = RecommendationEngine(settings, distributions)
    return engine.get_recommendations(
        available_players,
        my_players,
        risk_tolerance,
        current_overall_pick=current_overall_pick,
        top_n=top_n,
    )
