"""
Seed dataset shipped with the clinic application.

Tests only read these records; nothing here is ever created or modified
by the suite.
"""

from typing import Dict, FrozenSet, Tuple

# (first_name, last_name) of the owners present in a fresh database
KNOWN_OWNERS: Tuple[Tuple[str, str], ...] = (
    ("George", "Franklin"),
    ("Betty", "Davis"),
    ("Eduardo", "Rodriquez"),
    ("Harold", "Davis"),
    ("Peter", "McTavish"),
    ("Jean", "Coleman"),
    ("Jeff", "Black"),
    ("Maria", "Escobito"),
    ("David", "Schroeder"),
    ("Carlos", "Estaban"),
)

KNOWN_LAST_NAMES: FrozenSet[str] = frozenset(last for _, last in KNOWN_OWNERS)

# Seed owners per last name
OWNER_COUNT_BY_LAST_NAME: Dict[str, int] = {
    name: sum(1 for _, last in KNOWN_OWNERS if last == name) for name in KNOWN_LAST_NAMES
}

MULTI_MATCH_LAST_NAME = "Davis"      # search renders a list
SINGLE_MATCH_LAST_NAME = "Franklin"  # search redirects to details

# Ids that do not exist in the seed data
MISSING_OWNER_ID = 99999
MISSING_PET_ID = 99999
EXISTING_OWNER_ID = 1

DUPLICATE_OWNER_MESSAGE = "An owner with this information already exists"
NOT_FOUND_OWNER_TEXT = "couldn't find that owner"
NOT_FOUND_PET_TEXT = "couldn't find that pet"
BRAND_TEXT = "Emerald Grove Veterinary Clinic"


__all__ = [
    "KNOWN_OWNERS",
    "KNOWN_LAST_NAMES",
    "OWNER_COUNT_BY_LAST_NAME",
    "MULTI_MATCH_LAST_NAME",
    "SINGLE_MATCH_LAST_NAME",
    "MISSING_OWNER_ID",
    "MISSING_PET_ID",
    "EXISTING_OWNER_ID",
    "DUPLICATE_OWNER_MESSAGE",
    "NOT_FOUND_OWNER_TEXT",
    "NOT_FOUND_PET_TEXT",
    "BRAND_TEXT",
]
