"""Target material database — loads common targets from JSON.

Each entry lists its bulk density and elemental mass fractions; number
densities are derived on load (nᵢ = ρ wᵢ N_A / Aᵢ).

A host passes the loaded material straight to the process::

    tungsten = TargetService().get_target("W")
    step_length = process.mean_free_path(track, tungsten)
"""

import json
import logging
import pathlib

from darkbrem.models.target import TargetMaterial

logger = logging.getLogger(__name__)

_DEFAULT_DATA_FILE = pathlib.Path(__file__).resolve().parents[1] / "data" / "targets.json"


class TargetService:
    """Lookup of predefined target materials.

    Args:
        data_file: Path to the targets JSON file.  If *None*, the file
                   shipped with the package is used.
    """

    def __init__(self, data_file: str | pathlib.Path | None = None) -> None:
        self._data_file = pathlib.Path(data_file) if data_file is not None else _DEFAULT_DATA_FILE
        self._targets: dict[str, TargetMaterial] = {}
        self._load_targets()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def get_all_targets(self) -> list[TargetMaterial]:
        """Return all loaded targets."""
        return list(self._targets.values())

    def get_target_ids(self) -> list[str]:
        return list(self._targets)

    def get_target(self, target_id: str) -> TargetMaterial:
        """Return a single target by ID.

        Raises:
            KeyError: If *target_id* is not found.
        """
        try:
            return self._targets[target_id]
        except KeyError:
            raise KeyError(f"Unknown target material: {target_id!r}")

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _load_targets(self) -> None:
        if not self._data_file.exists():
            logger.warning("Target database not found: %s", self._data_file)
            return
        with open(self._data_file, encoding="utf-8") as f:
            raw = json.load(f)
        for entry in raw.get("targets", []):
            try:
                self._load_single(entry)
            except (KeyError, TypeError, ValueError):
                logger.exception(
                    "Failed to load target %s from %s",
                    entry.get("id", "?"), self._data_file,
                )

    def _load_single(self, entry: dict) -> None:
        components = [
            (c["symbol"], float(c["Z"]), float(c["A"]), float(c["weight_fraction"]))
            for c in entry["composition"]
        ]
        total = sum(w for *_, w in components)
        if abs(total - 1.0) > 1e-3:
            logger.warning(
                "Mass fractions of %s sum to %.4f, not 1", entry["id"], total,
            )
        material = TargetMaterial.from_mass_fractions(
            name=entry.get("name", entry["id"]),
            density_g_cm3=float(entry["density_g_cm3"]),
            components=components,
        )
        self._targets[entry["id"]] = material
