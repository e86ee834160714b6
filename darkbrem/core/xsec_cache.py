"""Memoization of per-element cross sections.

Cross sections are keyed by a quantized ``(Z, A, E)`` triple packed into a
single integer: Z occupies the high digits, A is taken mod 1000 and the
kinetic energy (MeV, truncated) mod 1 500 000.  Inputs outside these ranges
alias onto other keys.  Entries are never evicted.
"""

from __future__ import annotations

import logging
from typing import Protocol

import numpy as np
from numpy.typing import NDArray

from darkbrem.constants import CACHE_MAX_A, CACHE_MAX_E_MEV
from darkbrem.core.errors import ConfigurationError

logger = logging.getLogger(__name__)


class CrossSectionCalculator(Protocol):
    """Anything able to compute a cross section per atom [pb]."""

    def compute_cross_section(
        self,
        kinetic_energy_MeV: float,
        A: float,
        Z: float,
    ) -> float: ...


class ElementXsecCache:
    """Cross-section memoization keyed by quantized (energy, A, Z).

    Args:
        model: Calculator used on cache misses. May be attached later.
    """

    def __init__(self, model: CrossSectionCalculator | None = None) -> None:
        self._model = model
        self._table: dict[int, float] = {}

    def attach(self, model: CrossSectionCalculator) -> None:
        """Set the calculator used on cache misses."""
        self._model = model

    @property
    def model(self) -> CrossSectionCalculator | None:
        return self._model

    @staticmethod
    def compute_key(energy_MeV: float, A: float, Z: float) -> int:
        """Pack (energy, A, Z) into a cache key."""
        return (int(Z) * CACHE_MAX_A + int(A)) * CACHE_MAX_E_MEV + int(energy_MeV)

    @staticmethod
    def decode_key(key: int) -> tuple[int, int, int]:
        """Unpack a cache key.

        Returns:
            (energy_MeV, A, Z) as truncated integers.
        """
        energy = key % CACHE_MAX_E_MEV
        A = (key // CACHE_MAX_E_MEV) % CACHE_MAX_A
        Z = key // CACHE_MAX_E_MEV // CACHE_MAX_A
        return energy, A, Z

    def get(self, energy_MeV: float, A: float, Z: float) -> float:
        """Cross section for the quantized inputs, computing it on a miss.

        Args:
            energy_MeV: Lepton kinetic energy [MeV].
            A: Atomic mass [amu].
            Z: Atomic number.

        Returns:
            Cross section [pb].

        Raises:
            ConfigurationError: If no calculator is attached.
        """
        key = self.compute_key(energy_MeV, A, Z)
        cached = self._table.get(key)
        if cached is not None:
            return cached
        if self._model is None:
            raise ConfigurationError(
                "No cross-section model attached to the element cache"
            )
        logger.debug(
            "Cross-section cache miss: E=%.3f MeV, A=%.3f, Z=%.1f", energy_MeV, A, Z,
        )
        xsec = self._model.compute_cross_section(energy_MeV, A, Z)
        self._table[key] = xsec
        return xsec

    def sweep(
        self,
        A: float,
        Z: float,
        start_MeV: float,
        stop_MeV: float,
        step_MeV: float,
    ) -> NDArray[np.float64]:
        """Fill the cache over an energy range for one element.

        Energies run from *start_MeV* to *stop_MeV* inclusive in steps of
        *step_MeV*.

        Returns:
            Cross sections [pb], one per scanned energy.

        Raises:
            ValueError: If *step_MeV* is not positive.
        """
        if step_MeV <= 0:
            raise ValueError(f"Energy step must be positive, got {step_MeV} MeV")
        energies = np.arange(start_MeV, stop_MeV + step_MeV, step_MeV)
        return np.array([self.get(float(e), A, Z) for e in energies])

    def rows(self) -> list[tuple[int, int, int, float]]:
        """Stored entries as ``(A, Z, energy_MeV, xsec_pb)``, sorted by key."""
        result = []
        for key in sorted(self._table):
            energy, A, Z = self.decode_key(key)
            result.append((A, Z, energy, self._table[key]))
        return result

    def clear(self) -> None:
        self._table.clear()

    def __len__(self) -> int:
        return len(self._table)

    def __contains__(self, key: int) -> bool:
        return key in self._table
