"""Monte Carlo estimate of league-wide category distributions."""
import logging
import math
import time
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence

import numpy as np

from draft_engine.models.player import HITTER, PITCHER, PITCHER_POSITIONS, Player
from draft_engine.models.settings import LeagueSettings, is_pitcher_flex_label
from draft_engine.services import league_defaults
from draft_engine.services.draft_order import DraftOrder
from draft_engine.services.random_source import Mulberry32
from draft_engine.services.roster_assigner import RosterAssigner
from draft_engine.services.stat_aggregator import StatAggregator


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CategoryDistribution:
    """Estimated league mean and spread for one category."""
    mean: float
    std: float


@dataclass(frozen=True)
class LeagueDistributions:
    """Per-category distributions plus the number of team samples behind them."""
    samples: int = 0
    categories: Mapping[str, CategoryDistribution] = field(default_factory=dict)

    def get(self, key: str) -> Optional[CategoryDistribution]:
        return self.categories.get(key)

    def to_dict(self) -> Dict:
        return {
            'samples': self.samples,
            'categories': {
                key: {'mean': dist.mean, 'std': dist.std}
                for key, dist in self.categories.items()
            },
        }


@dataclass(frozen=True)
class TeamTargets:
    """How many hitters and pitchers each simulated team drafts."""
    hitter_target: int
    pitcher_target: int
    roster_size: int


class LeagueSimulator:
    """
    Simulates full-league drafts to build z-score reference distributions.

    Each iteration orders the pool by rank plus Gaussian noise, runs a snake
    draft where teams fill hitter and pitcher quotas, assigns every roster
    to slots and records each team's category totals. It does not model
    human preference beyond rank/ADP, noise and role need; the aim is a
    stable reference frame, not a forecast.
    """

    def __init__(
        self,
        assigner: Optional[RosterAssigner] = None,
        aggregator: Optional[StatAggregator] = None
    ):
        self.assigner = assigner or RosterAssigner()
        self.aggregator = aggregator or StatAggregator()

    def simulate(
        self,
        players: Sequence[Player],
        settings: LeagueSettings,
        iterations: Optional[int] = None,
        seed: Optional[int] = None,
        randomness: Optional[float] = None
    ) -> LeagueDistributions:
        """
        Estimate (mean, std) of each enabled category for a full roster.

        Args:
            players: Full player catalog.
            settings: League settings.
            iterations: Number of simulated drafts (env/default if None).
            seed: Seed for the generator (env/default if None).
            randomness: Std of the noise added to each player's rank.

        Returns:
            LeagueDistributions. With no teams or no slots there are no
            samples and the category map is empty, so callers fall back to
            configured targets.
        """
        iterations = league_defaults.simulation_iterations() if iterations is None else iterations
        seed = league_defaults.simulation_seed() if seed is None else seed
        randomness = league_defaults.simulation_randomness() if randomness is None else randomness

        active = settings.active_categories
        targets = self.team_targets(settings)
        if settings.num_teams < 1 or targets.roster_size == 0 or iterations < 1:
            logger.debug("Nothing to simulate (teams=%s, slots=%s)", settings.num_teams, targets.roster_size)
            return LeagueDistributions()

        started = time.perf_counter()
        rng = Mulberry32(seed)
        values_by_category: Dict[str, List[float]] = {c.key: [] for c in active}

        for _ in range(iterations):
            order = self._draft_order(players, rng, randomness)
            rosters = self._run_draft(order, settings.num_teams, targets)

            for roster in rosters:
                slots = self.assigner.assign(roster, settings.roster_config)
                totals = self.aggregator.totals_from_slots(slots, settings.bench_multiplier)
                for category in active:
                    values_by_category[category.key].append(totals.value(category.key))

        categories = {
            key: self._summarize(values) for key, values in values_by_category.items()
        }
        samples = max((len(v) for v in values_by_category.values()), default=0)

        logger.debug(
            "Simulated %d drafts (%d team samples) in %.2fs",
            iterations, samples, time.perf_counter() - started
        )
        return LeagueDistributions(samples=samples, categories=categories)

    @staticmethod
    def team_targets(settings: LeagueSettings) -> TeamTargets:
        """
        Hitter and pitcher quotas derived from the roster configuration.

        Bench slots are split in the ratio of starting hitter to starting
        pitcher slots: the hitter share is rounded, pitchers get the rest.
        """
        hitter_start = 0
        pitcher_start = 0
        bench = 0

        for slot in settings.roster_config.expand():
            if slot.is_bench:
                bench += 1
                continue
            is_pitcher_slot = is_pitcher_flex_label(slot.label) or any(
                pos in PITCHER_POSITIONS for pos in slot.eligible_positions
            )
            if is_pitcher_slot:
                pitcher_start += 1
            else:
                hitter_start += 1

        total_start = hitter_start + pitcher_start
        # floor(x + 0.5) so exact halves round up
        bench_hitters = int(math.floor(bench * hitter_start / total_start + 0.5)) if total_start > 0 else 0
        bench_pitchers = bench - bench_hitters

        return TeamTargets(
            hitter_target=hitter_start + bench_hitters,
            pitcher_target=pitcher_start + bench_pitchers,
            roster_size=len(settings.roster_config),
        )

    @staticmethod
    def _draft_order(players: Sequence[Player], rng: Mulberry32, randomness: float) -> List[Player]:
        # One noise draw per player, in catalog order, before sorting
        keyed = [(player.base_rank() + rng.gauss() * randomness, player) for player in players]
        keyed.sort(key=lambda item: item[0])
        return [player for _, player in keyed]

    def _run_draft(self, order: List[Player], num_teams: int, targets: TeamTargets) -> List[List[Player]]:
        remaining = list(order)
        rosters: List[List[Player]] = [[] for _ in range(num_teams)]
        hitters = [0] * num_teams
        pitchers = [0] * num_teams

        for pick in range(num_teams * targets.roster_size):
            if not remaining:
                break
            team = DraftOrder.team_index_for_pick(pick, num_teams)
            role = self._desired_role(hitters[team], pitchers[team], targets)
            chosen = remaining.pop(self._choose_index(remaining, role))

            rosters[team].append(chosen)
            if chosen.is_hitter:
                hitters[team] += 1
            else:
                pitchers[team] += 1

        return rosters

    @staticmethod
    def _desired_role(hitters: int, pitchers: int, targets: TeamTargets) -> str:
        need_hitter = hitters < targets.hitter_target
        need_pitcher = pitchers < targets.pitcher_target
        if need_hitter and not need_pitcher:
            return HITTER
        if need_pitcher and not need_hitter:
            return PITCHER

        # Both (or neither) needed: larger remaining-need fraction wins, ties go to hitters
        hitter_need = (targets.hitter_target - hitters) / max(1, targets.hitter_target)
        pitcher_need = (targets.pitcher_target - pitchers) / max(1, targets.pitcher_target)
        return PITCHER if pitcher_need > hitter_need else HITTER

    @staticmethod
    def _choose_index(remaining: List[Player], role: str) -> int:
        """First remaining player of the role, else the best remaining overall."""
        for idx, player in enumerate(remaining):
            if player.hitter_or_pitcher == role:
                return idx
        return 0

    @staticmethod
    def _summarize(values: List[float]) -> CategoryDistribution:
        if not values:
            return CategoryDistribution(mean=0.0, std=1.0)
        arr = np.asarray(values, dtype=float)
        mean = float(arr.mean())
        std = float(arr.std(ddof=1)) if arr.size > 1 else 0.0
        if not std > 0:
            # keeps z-score division defined
            std = 1.0
        return CategoryDistribution(mean=mean, std=std)


def simulate_league_distributions(
    players: Sequence[Player],
    settings: LeagueSettings,
    iterations: Optional[int] = None,
    seed: Optional[int] = None,
    randomness: Optional[float] = None
) -> LeagueDistributions:
    """Recompute distributions from scratch for a (catalog, settings) pair."""
    return LeagueSimulator().simulate(
        players, settings, iterations=iterations, seed=seed, randomness=randomness
    )
