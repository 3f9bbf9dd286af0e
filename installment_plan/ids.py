"""Identifier generators for loans and installments.

The engine never checks uniqueness; it trusts the generator it is given.

Usage::

    ids = FakerIdGenerator(seed=42)
    ids.new_id("inst_")   # reproducible across runs with the same seed
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from faker import Faker


class IdGenerator(ABC):
    """Produces a fresh opaque string token on every call."""

    @abstractmethod
    def new_id(self, prefix: str = "") -> str:
        ...


class FakerIdGenerator(IdGenerator):
    """UUID4 identifiers from a Faker instance.

    Parameters
    ----------
    seed : int | None
        Seed for reproducible identifiers (tests, demos). ``None`` gives
        non-deterministic output.
    """

    def __init__(self, seed: int | None = None) -> None:
        self.fake = Faker()
        if seed is not None:
            self.fake.seed_instance(seed)

    def new_id(self, prefix: str = "") -> str:
        return f"{prefix}{self.fake.uuid4()}"

