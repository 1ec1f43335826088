"""Run league simulations off the interactive path and keep the newest result."""
import hashlib
import json
import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Optional, Sequence

from draft_engine.models.player import Player
from draft_engine.models.settings import LeagueSettings
from draft_engine.services.league_simulator import LeagueDistributions, LeagueSimulator


logger = logging.getLogger(__name__)


class DistributionService:
    """
    Recomputes league distributions whenever the catalog or settings change.

    Every request gets a generation number. A finished simulation is only
    published if no newer request was made in the meantime; older results
    are dropped, never merged. Inputs that match the last published result
    are served from cache.
    """

    def __init__(
        self,
        simulator: Optional[LeagueSimulator] = None,
        iterations: Optional[int] = None,
        seed: Optional[int] = None,
        randomness: Optional[float] = None,
        max_workers: int = 1
    ):
        self.simulator = simulator or LeagueSimulator()
        self.iterations = iterations
        self.seed = seed
        self.randomness = randomness
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix='league-sim')
        self._lock = threading.Lock()
        self._generation = 0
        self._latest: Optional[LeagueDistributions] = None
        self._latest_fingerprint: Optional[str] = None

    @property
    def latest(self) -> Optional[LeagueDistributions]:
        """Most recent published distributions, or None before the first run."""
        with self._lock:
            return self._latest

    def fingerprint(self, players: Sequence[Player], settings: LeagueSettings) -> str:
        """Hash of everything a simulation result depends on."""
        payload = {
            'players': [p.to_dict() for p in players],
            'settings': settings.to_dict(),
            'options': [self.iterations, self.seed, self.randomness],
        }
        encoded = json.dumps(payload, sort_keys=True, default=str).encode()
        return hashlib.md5(encoded).hexdigest()

    def submit(self, players: Sequence[Player], settings: LeagueSettings) -> 'Future[LeagueDistributions]':
        """
        Start a background recomputation.

        Returns a future for this request's own result. The result only
        becomes `latest` if this is still the newest request when it finishes.
        """
        fingerprint = self.fingerprint(players, settings)
        with self._lock:
            self._generation += 1
            generation = self._generation
            if fingerprint == self._latest_fingerprint and self._latest is not None:
                done: Future = Future()
                done.set_result(self._latest)
                return done

        return self._executor.submit(self._run, generation, fingerprint, list(players), settings)

    def recompute(self, players: Sequence[Player], settings: LeagueSettings) -> LeagueDistributions:
        """Synchronous variant of submit()."""
        return self.submit(players, settings).result()

    def _run(
        self,
        generation: int,
        fingerprint: str,
        players: Sequence[Player],
        settings: LeagueSettings
    ) -> LeagueDistributions:
        result = self.simulator.simulate(
            players,
            settings,
            iterations=self.iterations,
            seed=self.seed,
            randomness=self.randomness,
        )
        with self._lock:
            if generation != self._generation:
                logger.info(
                    "Discarding superseded simulation (generation %d, newest %d)",
                    generation, self._generation
                )
                return result
            self._latest = result
            self._latest_fingerprint = fingerprint
        return result

    def shutdown(self, wait: bool = True):
        self._executor.shutdown(wait=wait)

    def __enter__(self) -> 'DistributionService':
        return self

    def __exit__(self, exc_type, exc, tb):
        self.shutdown()
