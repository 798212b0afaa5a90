"""Weight Sweep: samples the path engine while one edge's weight walks a range.

Invariants:
    - Every swept weight is positive: start > 0, step > 0
    - Weights run from start to stop inclusive by step; the upper bound tolerates
      SWEEP_EPSILON of float drift and the accumulator is re-rounded to 10 places per step
    - Every sample works on a deep copy of the base graph: the base is never mutated
    - A missing route is a normal sample (cost = math.inf, path = []), not an error
    - pick_best returns the minimum-cost sample, ties resolved to the earliest weight

Design Decisions:
    - Steps run sequentially: each one copies and mutates its own graph
    - Timing uses time.perf_counter; it is the only non-deterministic field of a sample
"""

import copy
import math
import time
from dataclasses import dataclass, field

from graphledger.core.domain_types import Graph
from graphledger.core.moderation_rules import round_weight
from graphledger.core.path_engine import PathEngine

SWEEP_EPSILON: float = 1e-9


@dataclass(frozen=True)
class SweepSample:
    weight: float
    cost: float
    execution_time_ms: float
    path: list[str] = field(default_factory=list)

    @property
    def path_found(self) -> bool:
        return math.isfinite(self.cost)


def validate_sweep_bounds(start: float, stop: float, step: float) -> str | None:
    """Return an error message when the range cannot be swept, else None."""
    values = (start, stop, step)
    if any(isinstance(v, bool) or not isinstance(v, (int, float)) for v in values):
        return "start, stop and step must be numbers"
    if not all(math.isfinite(v) for v in values):
        return "start, stop and step must be finite"
    if step <= 0:
        return "step must be greater than 0"
    if start <= 0:
        return "start must be greater than 0: edge weights are positive"
    if stop <= start:
        return "stop must be greater than start"
    return None


def count_sweep_steps(start: float, stop: float, step: float) -> int:
    return math.floor((stop - start) / step + SWEEP_EPSILON) + 1


def sweep_weights(start: float, stop: float, step: float) -> list[float]:
    """Sampled weights, start to stop inclusive."""
    weights: list[float] = []
    w = start
    while w <= stop + SWEEP_EPSILON:
        weights.append(w)
        w = round(w + step, 10)
    return weights


def run_sweep(
    base_graph: Graph,
    source: str,
    target: str,
    origin: str,
    goal: str,
    weights: list[float],
    engine: PathEngine,
) -> list[SweepSample]:
    """Run the path engine once per weight with source -> target overridden."""
    samples: list[SweepSample] = []
    for w in weights:
        tested = round_weight(w)
        graph = copy.deepcopy(base_graph)
        graph[source][target] = tested
        started = time.perf_counter()
        result = engine.find_path(graph, origin, goal)
        elapsed_ms = (time.perf_counter() - started) * 1000
        samples.append(SweepSample(
            weight=tested,
            cost=result.cost if result else math.inf,
            execution_time_ms=round(elapsed_ms, 4),
            path=list(result.path) if result else [],
        ))
    return samples


def pick_best(samples: list[SweepSample]) -> SweepSample | None:
    if not samples:
        return None
    # min() keeps the first of equal keys
    return min(samples, key=lambda s: s.cost)
