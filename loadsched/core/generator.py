import logging
from typing import Any, Dict, List, Mapping, Optional, Tuple

import numpy as np
import pandas as pd
from tqdm import tqdm

from loadsched.constants import Columns as C
from loadsched.constants import Keys as K
from loadsched.core.loader import load_requests, parse_requests
from loadsched.core.randomness import RandomSource
from loadsched.core.scheduler import Requests
from loadsched.core.utils import runs_between, runs_to_frame, window_from_index


class Generator:
    def __init__(self, logging_level=logging.WARNING, raise_on_error: bool = False):
        """
        Initializes the Generator.

        Args:
            logging_level (int): Logging level (e.g., logging.WARNING).
            raise_on_error (bool): Whether to raise exceptions on errors.
        """
        logging.basicConfig(format="%(asctime)s - %(levelname)s - %(message)s", level=logging_level)
        self.logger = logging.getLogger(__name__)
        self.sites: Dict[str, Requests] = {}
        self.raise_on_error = raise_on_error

    def add_sites(self, sites: Mapping[str, Any]):
        """
        Adds sites to the generator.

        Args:
            sites (Mapping): Site name mapped to its :class:`Requests` or to the raw
                ``consumption`` mapping of a site definition.

        Raises:
            ConfigValidationError: If a raw definition is invalid.
            TypeError: If the input type is unsupported.
        """
        if not isinstance(sites, Mapping):
            raise TypeError("Input must be a mapping of site names to requests.")
        for name, requests in sites.items():
            if not isinstance(requests, Requests):
                requests = parse_requests(requests)
            if name in self.sites:
                self.logger.warning(f"Replacing site '{name}'")
            self.sites[name] = requests

    def add_site_file(self, path: str, name: Optional[str] = None):
        """
        Loads a site definition file and adds it to the generator.

        Args:
            path (str): YAML or JSON site definition.
            name (str, optional): Site name. Defaults to the file path.
        """
        self.add_sites({name or path: load_requests(path)})

    def generate(
        self,
        window: Tuple[float, float] | pd.DatetimeIndex,
        seed: Optional[int] = None,
        show_progress: bool = True,
    ) -> Tuple[pd.DataFrame, Dict[str, pd.DataFrame]]:
        """
        Generates the runs of every site within a time window.

        Args:
            window (tuple | pd.DatetimeIndex): Either ``(start, stop)`` in hours or the
                index of the reference data the runs are compared against. For an index,
                the window is derived with :func:`window_from_index` and the segment
                timestamps are anchored at midnight of its first day.
            seed (int, optional): Seed for reproducible results. Each site gets its own
                independent random stream spawned from it.
            show_progress (bool, optional): If True, display a progress bar. Defaults to True.

        Returns:
            Tuple[pd.DataFrame, Dict[str, pd.DataFrame]]: Summary per site and the
            run table (see :func:`runs_to_frame`) per site.

        Raises:
            ValueError: If no sites were added.
        """
        if not self.sites:
            raise ValueError("No sites have been added for processing.")

        origin = None
        if isinstance(window, pd.DatetimeIndex):
            origin = window[0].normalize()
            window = window_from_index(window)
        start, stop = window

        seeds = np.random.SeedSequence(seed).spawn(len(self.sites))
        iterator = tqdm(list(zip(self.sites.items(), seeds)), disable=not show_progress, unit="site")
        results = [
            self._safe_process_site(name, requests, start, stop, RandomSource(site_seed), origin)
            for (name, requests), site_seed in iterator
        ]
        return self._collect_results(results)

    def _process_site(
        self, name: str, requests: Requests, start: float, stop: float, rng: RandomSource, origin
    ) -> Dict[str, Any]:
        scheduler = requests.schedule(rng=rng, raise_on_error=self.raise_on_error)
        runs = list(runs_between(scheduler, start, stop))
        self.logger.debug(f"Site '{name}': {len(runs)} runs between {start} h and {stop} h")

        summary = {
            C.REQUESTS: len(requests),
            C.RUNS: len(runs),
            C.RUNS_TRIGGERED: sum(run.triggered for run in runs),
        }
        if scheduler.errors:
            summary[K.ERROR] = "; ".join(dict.fromkeys(str(exc) for exc in scheduler.errors))
        return {C.NAME: name, K.SUMMARY: summary, K.RUNS: runs_to_frame(runs, origin)}

    def _safe_process_site(self, name, requests, start, stop, rng, origin) -> Dict[str, Any]:
        """Wrapper around _process_site that captures exceptions per site.

        If raise_on_error is True, exceptions are propagated.
        Otherwise, returns a minimal result containing the error message in summary
        and an empty run table.
        """
        try:
            return self._process_site(name, requests, start, stop, rng, origin)
        except Exception as exc:  # noqa: BLE001
            if self.raise_on_error:
                raise
            self.logger.error(f"Site '{name}' failed: {exc}")
            return {C.NAME: name, K.SUMMARY: {K.ERROR: str(exc)}, K.RUNS: runs_to_frame([], origin)}

    def _collect_results(self, results: List[Dict[str, Any]]) -> Tuple[pd.DataFrame, Dict[str, pd.DataFrame]]:
        summaries = {}
        runs = {}

        for result in results:
            name = result[C.NAME]
            summaries[name] = result[K.SUMMARY]
            runs[name] = result[K.RUNS]

        summary_df = pd.DataFrame.from_dict(summaries, orient="index")
        return summary_df, runs
