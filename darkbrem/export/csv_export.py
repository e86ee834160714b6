"""CSV export — event libraries, cross-section tables and scaled samples.

Plain UTF-8 without BOM: the library format is read back by the parser and
by external tools.  Floats are written with full round-trip precision.
"""

from __future__ import annotations

import csv
import math

import numpy as np
from numpy.typing import NDArray

from darkbrem.constants import (
    LIBRARY_CSV_HEADER,
    SCALED_CSV_HEADER,
    XSEC_TABLE_HEADER,
)
from darkbrem.core.event_library import EventLibrary
from darkbrem.core.xsec_cache import ElementXsecCache


class CsvExporter:
    """CSV file export operations."""

    def export_library(self, library: EventLibrary, output_path: str) -> int:
        """Write an event library in the 9-column CSV library format.

        Buckets are written in ascending energy, vertices in stored order.

        Args:
            library: Library to dump.
            output_path: Destination file path (.csv).

        Returns:
            Number of vertices written.
        """
        count = 0
        with open(output_path, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(LIBRARY_CSV_HEADER)
            for energy, bucket in library.items():
                for record in bucket:
                    lep = record.lepton
                    cm = record.center_momentum
                    writer.writerow([
                        repr(energy),
                        repr(lep.e), repr(lep.px), repr(lep.py), repr(lep.pz),
                        repr(cm.e), repr(cm.px), repr(cm.py), repr(cm.pz),
                    ])
                    count += 1
        return count

    def export_cross_section_table(
        self, cache: ElementXsecCache, output_path: str,
    ) -> None:
        """Write every cached cross section, sorted by cache key.

        Columns: A [au], Z [protons], Energy [MeV], Xsec [pb].
        """
        with open(output_path, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(XSEC_TABLE_HEADER)
            for A, Z, energy, xsec in cache.rows():
                writer.writerow([A, Z, energy, repr(float(xsec))])

    def export_scaled_samples(
        self,
        momenta: NDArray[np.float64],
        lepton_mass_GeV: float,
        output_path: str,
    ) -> None:
        """Write scaled recoil momenta with their total energies.

        Columns: recoil_energy, recoil_px, recoil_py, recoil_pz [GeV].

        Args:
            momenta: Array of shape (n, 3) [GeV/c].
            lepton_mass_GeV: Lepton mass used for the energy column [GeV].
            output_path: Destination file path (.csv).
        """
        m2 = lepton_mass_GeV * lepton_mass_GeV
        with open(output_path, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(SCALED_CSV_HEADER)
            for px, py, pz in np.asarray(momenta, dtype=np.float64).reshape(-1, 3):
                energy = math.sqrt(px * px + py * py + pz * pz + m2)
                writer.writerow([repr(float(v)) for v in (energy, px, py, pz)])
