"""Independent restarts from several initial points.

Each start is a separate :func:`optimize` run with its own state, so runs can
execute on a thread pool without coordination. Results are compared only
after every run has finished.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from ..logging import get_logger
from .controller import optimize
from .core import Array, OptimizeConfig, OptimizeResult, Problem
from .utils import as_vector

logger = get_logger(__name__)


@dataclass(frozen=True)
class MultiStartResult:
    """All runs in input order plus the best converged one."""

    results: Tuple[OptimizeResult, ...]
    best: Optional[OptimizeResult]

    @property
    def n_converged(self) -> int:
        return sum(1 for res in self.results if res.success)


def multistart(
    problem: Problem,
    starts: Iterable[Array],
    config: Optional[OptimizeConfig] = None,
    max_workers: Optional[int] = None,
) -> MultiStartResult:
    """Run :func:`optimize` from every start and keep the lowest converged value.

    Parameters
    ----------
    problem:
        Problem shared by all runs. Its callables must be safe to call from
        several threads when ``max_workers`` is greater than one.
    starts:
        Initial points; all are validated before any run starts.
    config:
        Configuration shared by all runs.
    max_workers:
        Thread-pool size. ``None`` or 1 runs the starts sequentially.
    """
    points = [as_vector(s, problem.dim, name=f"starts[{i}]") for i, s in enumerate(starts)]
    if not points:
        raise ValueError("multistart needs at least one initial point.")

    def run(x0: Array) -> OptimizeResult:
        return optimize(problem, x0, config)

    if max_workers is None or max_workers <= 1:
        results = [run(x0) for x0 in points]
    else:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            results = list(pool.map(run, points))

    converged = [res for res in results if res.success]
    best = min(converged, key=lambda res: res.fun) if converged else None
    logger.info("multistart: %d of %d runs converged", len(converged), len(results))
    return MultiStartResult(results=tuple(results), best=best)


__all__ = ["MultiStartResult", "multistart"]
