"""Application service that runs pack calculations and records their outcome."""

from __future__ import annotations

import time
from collections.abc import Iterable
from datetime import timedelta

from packcalc import logger
from packcalc.calculator import PackCalculator
from packcalc.errors import DomainError
from packcalc.model import Calculation, new_calculation


class PackService:
    """Computes optimal pack distributions and wraps them as calculations."""

    def __init__(self) -> None:
        self._calculator = PackCalculator()

    def calculate_optimal(self, pack_sizes: Iterable[int], order_quantity: int) -> Calculation:
        """Calculate the best distribution for an order; domain errors propagate."""
        sizes = list(pack_sizes)
        start = time.perf_counter_ns()

        logger.debug(
            "Starting pack calculation",
            {"pack_sizes": sizes, "order_quantity": order_quantity},
        )

        try:
            distribution = self._calculator.calculate(sizes, order_quantity)
        except DomainError as exc:
            logger.error(
                "Pack calculation failed",
                {"pack_sizes": sizes, "order_quantity": order_quantity, "error": str(exc)},
            )
            raise

        elapsed_ns = time.perf_counter_ns() - start
        calculation_time = timedelta(microseconds=elapsed_ns / 1_000)

        result = new_calculation(
            sorted(sizes, reverse=True), order_quantity, distribution, calculation_time
        )
        result.id = str(time.time_ns())

        logger.debug(
            "Pack calculation completed",
            {
                "calculation_id": result.id,
                "total_items": result.total_items,
                "total_packs": result.total_packs,
                "items_overage": result.items_overage,
                "duration_ms": elapsed_ns // 1_000_000,
            },
        )
        return result