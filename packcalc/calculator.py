"""Finding the pack combination that fulfils an order with least overage."""

from __future__ import annotations

from collections.abc import Iterable

from packcalc.errors import (
    CalculationFailedError,
    EmptyPackSizesError,
    InvalidOrderQuantityError,
    InvalidPackSizeError,
)
from packcalc.model import PackDistribution


class PackCalculator:
    """Chooses packs minimising overage first and pack count second."""

    def calculate(self, pack_sizes: Iterable[int], order_quantity: int) -> PackDistribution:
        sizes = list(pack_sizes)
        if not sizes:
            raise EmptyPackSizesError()
        if order_quantity <= 0:
            raise InvalidOrderQuantityError()
        if any(size <= 0 for size in sizes):
            raise InvalidPackSizeError()

        # Larger packs come first, so they win ties.
        sizes = sorted(set(sizes), reverse=True)

        overage = [0] * (order_quantity + 1)
        packs = [0] * (order_quantity + 1)
        choice = [0] * (order_quantity + 1)

        for remaining in range(1, order_quantity + 1):
            best: tuple[int, int] | None = None
            best_size = 0
            for size in sizes:
                rest = remaining - size
                if rest <= 0:
                    candidate = (-rest, 1)
                else:
                    candidate = (overage[rest], packs[rest] + 1)
                if best is None or candidate < best:
                    best, best_size = candidate, size
            overage[remaining], packs[remaining] = best
            choice[remaining] = best_size

        distribution = PackDistribution()
        remaining = order_quantity
        while remaining > 0:
            size = choice[remaining]
            distribution[size] = distribution.get(size, 0) + 1
            remaining -= size

        if not distribution.can_fulfill(order_quantity):
            raise CalculationFailedError("unable to fulfill order")
        return distribution