"""Spending category taxonomy.

The taxonomy is fixed and ordered. It feeds the remote classification prompt
and bounds what the keyword rules may return. ``Uncategorized`` sits outside
the taxonomy and is only ever produced when nothing matched.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Category:
    name: str
    subcategories: tuple[str, ...] = ()


CATEGORIES: tuple[Category, ...] = (
    Category("Housing", ("Rent", "Mortgage", "Utilities", "Maintenance")),
    Category("Groceries"),
    Category("Dining", ("Restaurants", "Fast Food", "Coffee Shops")),
    Category("Transport", ("Gas", "Public Transit", "Parking", "Ride Share")),
    Category("Shopping", ("Clothing", "Electronics", "Home Goods")),
    Category("Health", ("Medical", "Pharmacy", "Fitness")),
    Category("Subscriptions", ("Streaming", "Software", "Memberships")),
    Category("Entertainment", ("Movies", "Events", "Hobbies")),
    Category("Travel", ("Flights", "Hotels", "Vacation")),
    Category("Income", ("Salary", "Freelance", "Investment")),
    Category("Transfers"),
)

UNCATEGORIZED = "Uncategorized"


def category_names(taxonomy: Sequence[Category] = CATEGORIES) -> list[str]:
    return [c.name for c in taxonomy]


def find_category(name: str, taxonomy: Sequence[Category] = CATEGORIES) -> Category | None:
    """Case-insensitive lookup of a top-level category by name."""

    key = name.strip().casefold()
    for c in taxonomy:
        if c.name.casefold() == key:
            return c
    return None


__all__ = ["Category", "CATEGORIES", "UNCATEGORIZED", "category_names", "find_category"]
