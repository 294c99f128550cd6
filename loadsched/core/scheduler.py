"""
Event scheduler for consumption requests.

Turns a collection of requests into one time-ordered, lazily generated stream
of runs. The stream starts at time 0.0 and is potentially infinite: as long as
one request has a schedule it never ends on its own, so the consumer has to
bound it (see :func:`loadsched.core.utils.runs_between`).
"""

import heapq
import logging
from collections.abc import Iterator, Mapping
from typing import Dict, List, Optional, Set, Tuple

from loadsched.core.errors import UnknownTriggerTargetError
from loadsched.core.randomness import get_random_source
from loadsched.core.request import Request
from loadsched.core.run import Run

logger = logging.getLogger(__name__)


class Requests(Mapping):
    """Read-only mapping of request names to requests.

    Owns every request for the whole scheduling session; runs refer back to
    their request by name.
    """

    def __init__(self, requests: Optional[Mapping] = None):
        self._requests: Dict[str, Request] = dict(requests or {})

    def __getitem__(self, name: str) -> Request:
        return self._requests[name]

    def __iter__(self):
        return iter(self._requests)

    def __len__(self):
        return len(self._requests)

    def __repr__(self):
        return f"{self.__class__.__name__}({sorted(self._requests)})"

    def lookup(self, name: str, source: Optional[str] = None) -> Request:
        """Return the request called ``name``.

        Args:
            name (str): Name to look up.
            source (str, optional): Request referring to ``name``, reported in the error.

        Raises:
            UnknownTriggerTargetError: If no request is called ``name``.
        """
        try:
            return self._requests[name]
        except KeyError:
            raise UnknownTriggerTargetError(name, source=source) from None

    def scheduled(self) -> List[str]:
        """Names of the requests that recur on their own."""
        return [name for name, request in self._requests.items() if request.schedule is not None]

    def dangling_triggers(self) -> List[Tuple[str, str]]:
        """``(source, target)`` pairs of triggers whose target does not exist."""
        return [
            (name, trigger.other)
            for name, request in self._requests.items()
            for trigger in request.trigger
            if trigger.other not in self._requests
        ]

    def trigger_cycles(self) -> List[str]:
        """Names of the requests that trigger themselves, directly or through others."""
        graph = {
            name: {t.other for t in request.trigger if t.other in self._requests}
            for name, request in self._requests.items()
        }
        cyclic = []
        for name in graph:
            seen: Set[str] = set()
            stack = list(graph[name])
            while stack:
                current = stack.pop()
                if current == name:
                    cyclic.append(name)
                    break
                if current in seen:
                    continue
                seen.add(current)
                stack.extend(graph[current])
        return cyclic

    def schedule(self, rng=None, raise_on_error: bool = True) -> "EventScheduler":
        """Start a new, independent stream of runs at time 0.0."""
        return EventScheduler(self, rng=rng, raise_on_error=raise_on_error)


class RunQueue:
    """Priority queue of pending runs, earliest run first."""

    def __init__(self):
        self._heap: List[Run] = []

    def __len__(self):
        return len(self._heap)

    def push(self, run: Run) -> None:
        heapq.heappush(self._heap, run)

    def pop(self) -> Run:
        return heapq.heappop(self._heap)

    def peek(self) -> Run:
        return self._heap[0]


class EventScheduler(Iterator):
    """Iterator over the runs of all requests in increasing order of their start.

    On construction the first run of every scheduled request is computed. Each
    step pops the earliest pending run, queues the next recurrence of its request
    (unless the run was itself triggered) and queues one triggered run per trigger
    of the request, starting exactly when the popped run ends.

    The iterator is potentially infinite; stop consuming it to stop it. To start
    over, create a new scheduler.

    Args:
        requests (Requests): The requests to schedule. Not modified.
        rng (RandomSource | numpy.random.Generator, optional): Source of randomness.
        raise_on_error (bool): If True, a trigger naming an unknown request raises
            :class:`UnknownTriggerTargetError` (with the popped run attached as ``run``).
            If False, the error is logged and collected in ``errors`` and the run is
            returned as usual.
    """

    def __init__(self, requests: Requests, rng=None, raise_on_error: bool = True):
        if not isinstance(requests, Requests):
            requests = Requests(requests)
        self.requests = requests
        self.rng = get_random_source(rng)
        self.raise_on_error = raise_on_error
        self.errors: List[UnknownTriggerTargetError] = []
        self._queue = RunQueue()

        for name, request in requests.items():
            if request.schedule is None:
                continue
            start_at = request.next_after(0.0, self.rng)
            self._queue.push(Run.create(name, request, start_at, False, self.rng))
        logger.debug(f"Scheduler seeded with {len(self._queue)} of {len(requests)} requests")

    def __iter__(self):
        return self

    @property
    def pending(self) -> int:
        """Number of runs waiting in the queue."""
        return len(self._queue)

    def peek(self) -> Optional[Run]:
        """The run the next step will return, without consuming it."""
        return self._queue.peek() if self._queue else None

    def __next__(self) -> Run:
        if not self._queue:
            raise StopIteration
        run = self._queue.pop()
        logger.debug(f"Next run '{run.name}' at {run.start_at:.3f} h (triggered: {run.triggered})")

        if not run.triggered:
            next_time = run.request.next_after(run.end_at, self.rng)
            self._queue.push(Run.create(run.name, run.request, next_time, False, self.rng))

        missing = []
        for trigger in run.request.trigger:
            try:
                target = self.requests.lookup(trigger.other, source=run.name)
            except UnknownTriggerTargetError as exc:
                missing.append(exc)
                continue
            self._queue.push(Run.create(trigger.other, target, run.end_at, True, self.rng))

        if missing:
            for exc in missing:
                logger.error(f"{exc} (run at {run.start_at:.3f} h)")
            self.errors.extend(missing)
            if self.raise_on_error:
                error = missing[0]
                error.run = run
                raise error

        return run
