"""
================================================================================
Test Data Factory
================================================================================

Factories for synthetic clinic entities used to fill application forms.

Features:
- Process-wide, thread-safe uniqueness source injected into every factory
- Owners whose duplicate-detection key never collides with another default owner
- Caller overrides merged over generated defaults
- Future-dated visits (the application rejects visits in the past)

================================================================================
"""

from __future__ import annotations

import itertools
import random
import re
import string
import threading
import uuid
from dataclasses import asdict, dataclass, replace
from datetime import date, timedelta
from typing import Any, Dict, Optional, Tuple


# ================================================================================
# Uniqueness Source
# ================================================================================

_ALPHABET = string.ascii_lowercase
_TELEPHONE_SPACE = 10 ** 10


def _encode_letters(number: int, width: int) -> str:
    """Encode a non-negative integer as fixed-width lowercase letters."""
    letters = []
    for _ in range(width):
        number, remainder = divmod(number, len(_ALPHABET))
        letters.append(_ALPHABET[remainder])
    return "".join(reversed(letters))


class UniquenessSource:
    """
    Monotonic, thread-safe source of unique tokens for one test-run process.

    Each process (pytest-xdist worker) creates one instance at session start.
    The run seed is drawn at random (uuid4), so workers started in the same
    instant or with recycled process ids still get unrelated token streams;
    the counter keeps tokens from the same process distinct.

    Usage:
        source = UniquenessSource()
        source.next_sequence()   # 1, 2, 3 ...
        source.next_suffix()     # 'kqzabd' style letter suffix
    """

    SUFFIX_WIDTH = 8

    def __init__(self, seed: Optional[int] = None):
        """
        Args:
            seed: Fixed run seed (tests). Defaults to a random per-process seed.
        """
        if seed is None:
            seed = uuid.uuid4().int
        self.seed = seed % (len(_ALPHABET) ** self.SUFFIX_WIDTH)
        self._counter = itertools.count(1)
        self._lock = threading.Lock()

    def next_sequence(self) -> int:
        """Return the next counter value (starts at 1)."""
        with self._lock:
            return next(self._counter)

    def next_suffix(self) -> str:
        """Return a unique lowercase letter suffix."""
        sequence = self.next_sequence()
        space = len(_ALPHABET) ** self.SUFFIX_WIDTH
        return _encode_letters((self.seed + sequence) % space, self.SUFFIX_WIDTH)

    def next_telephone(self) -> str:
        """Return a unique 10-digit telephone number."""
        sequence = self.next_sequence()
        return f"{(self.seed * 7919 + sequence) % _TELEPHONE_SPACE:010d}"


# ================================================================================
# Data Models
# ================================================================================

_TELEPHONE_NOISE = re.compile(r"[\s-]")


def normalize_telephone(telephone: Optional[str]) -> str:
    """Drop spaces and dashes, the way the application compares numbers."""
    if telephone is None:
        return ""
    return _TELEPHONE_NOISE.sub("", telephone)


@dataclass(frozen=True)
class SyntheticOwner:
    """Owner record as typed into the owner form."""
    first_name: str
    last_name: str
    address: str
    city: str
    telephone: str

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def dedup_key(self) -> Tuple[str, str, str]:
        """
        Business key used by the application to reject duplicate owners.

        Names compare trimmed and case-insensitively; the telephone compares
        exactly after spaces and dashes are removed. Address and city are not
        part of the key.
        """
        return (
            self.first_name.strip().lower(),
            self.last_name.strip().lower(),
            normalize_telephone(self.telephone),
        )

    def with_changes(self, **changes: Any) -> "SyntheticOwner":
        """Return a copy with some fields replaced."""
        return replace(self, **changes)

    def form_values(self) -> Dict[str, str]:
        """Map form input ids to values."""
        return {
            "firstName": self.first_name,
            "lastName": self.last_name,
            "address": self.address,
            "city": self.city,
            "telephone": self.telephone,
        }

    def as_dict(self) -> Dict[str, str]:
        return asdict(self)


@dataclass(frozen=True)
class SyntheticVisit:
    """Visit record as typed into the visit form."""
    visit_date: date
    description: str

    @property
    def date_text(self) -> str:
        return self.visit_date.isoformat()


# ================================================================================
# Factory Base
# ================================================================================

class DataFactoryBase:
    """
    Base class for synthetic data factories.

    Holds the injected uniqueness source and small random helpers. Random
    values only decorate records; uniqueness never depends on them.
    """

    # Prefix for all auto-generated names
    PREFIX = "Autotest"

    def __init__(self, uniqueness: UniquenessSource, rng: Optional[random.Random] = None):
        """
        Args:
            uniqueness: Shared uniqueness source for this process
            rng: Random generator for decorative values (seedable in tests)
        """
        self.uniqueness = uniqueness
        self._rng = rng or random.Random()
        self._generated_count = 0

    def _random_choice(self, options):
        return self._rng.choice(options)

    @property
    def generated_count(self) -> int:
        """Return count of generated records."""
        return self._generated_count


# ================================================================================
# Owner Factory
# ================================================================================

class OwnerFactory(DataFactoryBase):
    """
    Factory for owner form data.

    Every default owner carries a unique letter suffix in both names and a
    unique telephone, so two default owners never share a dedup key.
    """

    STREETS = ["Main St", "Oak Ave", "Maple Rd", "Cedar Ln", "Elm St", "Pine Ct"]
    CITIES = ["Madison", "Sun Prairie", "McFarland", "Windsor", "Monona", "Waunakee"]

    FIELDS = ("first_name", "last_name", "address", "city", "telephone")

    def create(self, **overrides: str) -> SyntheticOwner:
        """
        Create owner data, merging `overrides` over generated defaults.

        Args:
            **overrides: Any of first_name, last_name, address, city, telephone

        Returns:
            SyntheticOwner

        Raises:
            TypeError: Unknown field name in overrides
        """
        unknown = set(overrides) - set(self.FIELDS)
        if unknown:
            raise TypeError(f"Unknown owner field(s): {', '.join(sorted(unknown))}")

        suffix = self.uniqueness.next_suffix()
        defaults = {
            "first_name": f"{self.PREFIX}{suffix.capitalize()}",
            "last_name": f"Owner{suffix.capitalize()}",
            "address": f"{self._rng.randint(1, 9999)} {self._random_choice(self.STREETS)}",
            "city": self._random_choice(self.CITIES),
            "telephone": self.uniqueness.next_telephone(),
        }
        defaults.update(overrides)
        self._generated_count += 1
        return SyntheticOwner(**defaults)

    def create_duplicate_of(self, owner: SyntheticOwner) -> SyntheticOwner:
        """
        Create a record sharing `owner`'s dedup key with a different address
        and city.
        """
        suffix = self.uniqueness.next_suffix()
        return owner.with_changes(
            address=f"{self._rng.randint(1, 9999)} Other {suffix.capitalize()} St",
            city=f"Elsewhere {suffix.capitalize()}",
        )


# ================================================================================
# Visit Factory
# ================================================================================

class VisitFactory(DataFactoryBase):
    """Factory for visit form data."""

    REASONS = ["Annual checkup", "Vaccination", "Dental cleaning", "Follow-up", "Skin rash"]

    def create(
        self,
        visit_date: Optional[date] = None,
        description: Optional[str] = None,
        days_ahead: int = 7,
    ) -> SyntheticVisit:
        """
        Create visit data dated in the future with a unique description.

        Args:
            visit_date: Explicit visit date
            description: Explicit description
            days_ahead: Offset from today used when no date is given
        """
        if visit_date is None:
            visit_date = date.today() + timedelta(days=days_ahead)
        if description is None:
            sequence = self.uniqueness.next_suffix()
            description = f"E2E {self._random_choice(self.REASONS)} {sequence}"
        self._generated_count += 1
        return SyntheticVisit(visit_date=visit_date, description=description)


# ================================================================================
# Composite Factory
# ================================================================================

class TestDataFactory:
    """
    Composite factory sharing one uniqueness source.

    Usage:
        factory = TestDataFactory(UniquenessSource())
        owner = factory.owner.create(first_name="John")
        visit = factory.visit.create()
    """

    __test__ = False  # not a pytest test class

    def __init__(self, uniqueness: UniquenessSource, seed: Optional[int] = None):
        rng = random.Random(seed)
        self.uniqueness = uniqueness
        self.owner = OwnerFactory(uniqueness, rng)
        self.visit = VisitFactory(uniqueness, rng)

    def create_owner(self, **overrides: str) -> SyntheticOwner:
        """Shortcut for `owner.create()`."""
        return self.owner.create(**overrides)

    def create_visit(self, **kwargs: Any) -> SyntheticVisit:
        """Shortcut for `visit.create()`."""
        return self.visit.create(**kwargs)

    @property
    def total_generated(self) -> int:
        return self.owner.generated_count + self.visit.generated_count


__all__ = [
    "UniquenessSource",
    "SyntheticOwner",
    "SyntheticVisit",
    "OwnerFactory",
    "VisitFactory",
    "TestDataFactory",
    "normalize_telephone",
]
