"""Domain model: pack distributions, calculation results and pack configurations."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone


def _now() -> datetime:
    return datetime.now(timezone.utc)


class PackDistribution(dict):
    """Mapping of pack size to the number of packs of that size."""

    def total_items(self) -> int:
        return sum(size * quantity for size, quantity in self.items())

    def total_packs(self) -> int:
        return sum(self.values())

    def is_empty(self) -> bool:
        return not self or self.total_packs() == 0

    def can_fulfill(self, order_quantity: int) -> bool:
        return self.total_items() >= order_quantity


@dataclass
class Calculation:
    """The outcome of one pack calculation."""

    pack_sizes: tuple[int, ...]
    order_quantity: int
    distribution: PackDistribution
    total_items: int
    total_packs: int
    items_overage: int
    calculation_time: timedelta
    calculation_time_ms: int
    created_at: datetime = field(default_factory=_now)
    id: str = ""
    user_id: str = ""

    def get_distribution(self) -> PackDistribution:
        """Return a copy of the distribution."""
        return PackDistribution(self.distribution)


def new_calculation(
    pack_sizes: Iterable[int],
    order_quantity: int,
    distribution: Mapping[int, int],
    calculation_time: timedelta,
) -> Calculation:
    """Build a calculation, deriving its totals and overage from the distribution."""
    dist = PackDistribution(distribution)
    total_items = dist.total_items()
    return Calculation(
        pack_sizes=tuple(pack_sizes),
        order_quantity=order_quantity,
        distribution=dist,
        total_items=total_items,
        total_packs=dist.total_packs(),
        items_overage=max(total_items - order_quantity, 0),
        calculation_time=calculation_time,
        calculation_time_ms=calculation_time // timedelta(milliseconds=1),
        created_at=_now(),
    )


@dataclass
class Pack:
    """A pack configuration of a given size."""

    size: int
    name: str = ""
    active: bool = True
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)
    id: str = ""

    def is_valid(self) -> bool:
        return self.size > 0

    def deactivate(self) -> None:
        self.active = False
        self.updated_at = _now()

    def update(self, size: int, name: str) -> None:
        self.size = size
        self.name = name
        self.updated_at = _now()


def new_pack(size: int, name: str) -> Pack:
    """Create an active pack with matching creation and update times."""
    now = _now()
    return Pack(size=size, name=name, active=True, created_at=now, updated_at=now)