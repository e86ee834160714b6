"""Event library store — reference vertices bucketed by incident energy.

Each bucket has a sampling cursor initialised to a random offset so that
results do not depend on the order vertices were written to disk.  Cursors
are kept in a list aligned with the sorted energy keys, so lookups never
compare floats for equality.
"""

from __future__ import annotations

import bisect
import logging
import pathlib
from collections.abc import Iterator

import numpy as np

from darkbrem.constants import MAX_SAMPLING_ITERATIONS
from darkbrem.core.errors import ConfigurationError
from darkbrem.core.library_parser import Library, parse_library
from darkbrem.models.config import DarkPhoton
from darkbrem.models.kinematics import OutgoingKinematics

logger = logging.getLogger(__name__)


class EventLibrary:
    """Read-only vertex library with per-bucket sampling cursors.

    Args:
        library: Mapping incident energy [GeV] → vertices.
        rng: Random generator for the initial cursor offsets.

    Raises:
        ConfigurationError: If *library* holds no vertices.
    """

    def __init__(
        self,
        library: Library,
        rng: np.random.Generator | None = None,
    ) -> None:
        energies = sorted(e for e, records in library.items() if records)
        if not energies:
            raise ConfigurationError(
                "Event library is empty; no dark brem vertices were parsed"
            )
        self._energies: list[float] = energies
        self._buckets: list[tuple[OutgoingKinematics, ...]] = [
            tuple(library[e]) for e in energies
        ]
        self._rng = rng or np.random.default_rng()
        self._cursors: list[int] = [
            int(self._rng.random() * len(bucket)) for bucket in self._buckets
        ]
        self._max_iterations = min(
            MAX_SAMPLING_ITERATIONS, min(len(b) for b in self._buckets),
        )

        logger.info(
            "Event library: %d vertices in %d energy buckets (%.4g – %.4g GeV)",
            len(self), len(self._energies), self._energies[0], self._energies[-1],
        )
        for energy, bucket in zip(self._energies, self._buckets):
            logger.debug("  %.6g GeV: %d vertices", energy, len(bucket))

    @classmethod
    def load(
        cls,
        path: str | pathlib.Path,
        dark_photon: DarkPhoton,
        rng: np.random.Generator | None = None,
    ) -> EventLibrary:
        """Build a library from a file or directory.

        Raises:
            ConfigurationError: If the path is unusable or yields no vertices.
            MalformedRowError: On a malformed CSV row.
        """
        library = parse_library(path, dark_photon.lhe_id, dark_photon.mass_GeV)
        if not library:
            raise ConfigurationError(
                f"No dark brem vertices found in library {str(path)!r}"
            )
        return cls(library, rng=rng)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def energies(self) -> tuple[float, ...]:
        """Reference incident energies [GeV], ascending."""
        return tuple(self._energies)

    @property
    def max_iterations(self) -> int:
        """Retry bound for rejection sampling: smallest bucket, capped."""
        return self._max_iterations

    def bucket(self, energy: float) -> tuple[OutgoingKinematics, ...]:
        """Vertices stored under the exact reference energy.

        Raises:
            KeyError: If *energy* is not a reference energy.
        """
        index = bisect.bisect_left(self._energies, energy)
        if index == len(self._energies) or self._energies[index] != energy:
            raise KeyError(f"No library bucket at {energy} GeV")
        return self._buckets[index]

    def items(self) -> Iterator[tuple[float, tuple[OutgoingKinematics, ...]]]:
        """(energy, vertices) pairs in ascending energy."""
        return zip(self._energies, self._buckets)

    def select_bucket(self, incident_energy: float) -> int:
        """Index of the smallest reference energy ≥ *incident_energy*.

        Energies above the library range map to the largest bucket.
        """
        index = bisect.bisect_left(self._energies, incident_energy)
        return min(index, len(self._energies) - 1)

    def sample(self, incident_energy: float) -> OutgoingKinematics:
        """Next vertex from the bucket nearest above *incident_energy*.

        Advances that bucket's cursor, wrapping at the end.

        Args:
            incident_energy: Total energy of the incident lepton [GeV].
        """
        index = self.select_bucket(incident_energy)
        bucket = self._buckets[index]
        cursor = self._cursors[index]
        record = bucket[cursor]
        self._cursors[index] = (cursor + 1) % len(bucket)
        return record

    def __len__(self) -> int:
        return sum(len(b) for b in self._buckets)
