"""Target material data models.

Reference: material composition handling in the host transport engine.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from darkbrem.constants import AVOGADRO


@dataclass
class TargetElement:
    """Single element inside a target material.

    Attributes:
        symbol: Element symbol (e.g. "W").
        Z: Atomic number [protons].
        A: Atomic mass [g/mol].
        atoms_per_cm3: Number density of this element [atoms/cm³].
    """
    symbol: str
    Z: float
    A: float
    atoms_per_cm3: float


@dataclass
class TargetMaterial:
    """Material the lepton is traversing.

    Attributes:
        name: Display name.
        density_g_cm3: Bulk density [g/cm³].
        elements: Constituent elements with number densities.
    """
    name: str
    density_g_cm3: float
    elements: list[TargetElement] = field(default_factory=list)

    @classmethod
    def from_element(
        cls,
        symbol: str,
        Z: float,
        A: float,
        density_g_cm3: float,
    ) -> TargetMaterial:
        """Single-element material.

        n = ρ N_A / A
        """
        return cls(
            name=symbol,
            density_g_cm3=density_g_cm3,
            elements=[TargetElement(
                symbol=symbol,
                Z=Z,
                A=A,
                atoms_per_cm3=density_g_cm3 * AVOGADRO / A,
            )],
        )

    @classmethod
    def from_mass_fractions(
        cls,
        name: str,
        density_g_cm3: float,
        components: list[tuple[str, float, float, float]],
    ) -> TargetMaterial:
        """Compound or mixture from mass fractions.

        nᵢ = ρ wᵢ N_A / Aᵢ

        Args:
            name: Display name.
            density_g_cm3: Bulk density [g/cm³].
            components: ``(symbol, Z, A, weight_fraction)`` tuples.
        """
        elements = [
            TargetElement(
                symbol=symbol,
                Z=Z,
                A=A,
                atoms_per_cm3=density_g_cm3 * weight * AVOGADRO / A,
            )
            for symbol, Z, A, weight in components
        ]
        return cls(name=name, density_g_cm3=density_g_cm3, elements=elements)
