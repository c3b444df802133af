"""
Arithmetic formulas for seed planning.

These functions implement the small set of quantities the needs/stock
reconciliation relies on: the seed mass required for a planting order,
the balance between stock and need, and the coverage ratio.

All functions are pure: they depend solely on their inputs and do
not modify any external state. This makes them safe to unit test
individually.
"""

from math import inf
from typing import Optional, Union

Number = Union[int, float]


def seed_quantity_kg(number_of_plants: Optional[Number], coefficient: Optional[Number]) -> float:
    """Return the seed mass (kg) needed to raise ``number_of_plants``.

    Parameters
    ----------
    number_of_plants: int | float
        Number of plants requested by the planting project.
    coefficient: float | None
        Seeding coefficient of the species, in kg of seed per 1000 plants.
        An absent coefficient yields 0.

    Returns
    -------
    float
        ``number_of_plants / 1000 * coefficient``.
    """
    if not number_of_plants or not coefficient:
        return 0.0
    return (float(number_of_plants) / 1000.0) * float(coefficient)


def balance(needed: Number, stocked: Number) -> float:
    """Stocked minus needed; negative values are a deficit."""
    return float(stocked) - float(needed)


def coverage(needed: Number, stocked: Number) -> float:
    """Compute the coverage ratio of a need by the stock, in percent.

    When nothing is needed the ratio is undefined: it is reported as
    ``inf`` if there is stock anyway and as 100 when both are zero.
    """
    needed = float(needed)
    stocked = float(stocked)
    if needed > 0:
        return stocked / needed * 100.0
    return inf if stocked > 0 else 100.0


def covered_quantity(needed: Number, stocked: Number) -> float:
    """Part of the need actually covered by the stock (never above the need)."""
    return min(float(stocked), float(needed))
