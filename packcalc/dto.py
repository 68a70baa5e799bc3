"""Request and response shapes of the HTTP API."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from packcalc.durations import format_duration
from packcalc.model import Calculation, Pack


class ValidationError(ValueError):
    """A decoded request breaks one or more field rules.

    ``failures`` holds (field, rule) pairs, such as ("PackSizes", "min").
    """

    def __init__(self, struct: str, failures: list[tuple[str, str]]) -> None:
        self.struct = struct
        self.failures = failures
        super().__init__(
            "\n".join(
                f"Key: '{struct}.{name}' Error:Field validation for '{name}' failed on the '{rule}' tag"
                for name, rule in failures
            )
        )


@dataclass
class CalculationRequest:
    pack_sizes: list[int] | None
    order_quantity: int


@dataclass
class SimpleCalculationRequest:
    order_quantity: int


@dataclass
class CalculationResponse:
    id: str
    packs_used: dict[int, int]
    total_items: int
    total_packs: int
    items_overage: int
    calculation_time: str
    success: bool

    def to_dict(self) -> dict[str, Any]:
        packs = sorted((str(size), count) for size, count in self.packs_used.items())
        return {
            "id": self.id,
            "packs_used": dict(packs),
            "total_items": self.total_items,
            "total_packs": self.total_packs,
            "items_overage": self.items_overage,
            "calculation_time": self.calculation_time,
            "success": self.success,
        }


@dataclass
class HealthResponse:
    status: str
    time: str
    version: str = ""

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"status": self.status}
        if self.version:
            data["version"] = self.version
        data["time"] = self.time
        return data


@dataclass
class CreatePackRequest:
    size: int
    name: str


@dataclass
class UpdatePackRequest:
    size: int
    name: str


def _rfc3339(moment: datetime) -> str:
    text = moment.strftime("%Y-%m-%dT%H:%M:%S")
    fraction = f"{moment.microsecond:06d}".rstrip("0")
    if fraction:
        text += "." + fraction
    offset = moment.strftime("%z")
    if not offset or offset == "+0000":
        return text + "Z"
    return f"{text}{offset[:3]}:{offset[3:5]}"


@dataclass
class PackResponse:
    id: str
    size: int
    name: str
    active: bool
    created_at: datetime
    updated_at: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "size": self.size,
            "name": self.name,
            "active": self.active,
            "created_at": _rfc3339(self.created_at),
            "updated_at": _rfc3339(self.updated_at),
        }


@dataclass
class PackListResponse:
    packs: list[PackResponse]
    total: int

    def to_dict(self) -> dict[str, Any]:
        return {"packs": [pack.to_dict() for pack in self.packs], "total": self.total}


def _decode_int(value: Any, name: str) -> int:
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"cannot unmarshal {type(value).__name__} into field {name} of type int")
    if not -(2**63) <= value < 2**63:
        raise ValueError(f"number {value} overflows field {name} of type int")
    return value


def _validate(request: CalculationRequest) -> None:
    failures: list[tuple[str, str]] = []
    if request.pack_sizes is None:
        failures.append(("PackSizes", "required"))
    elif not request.pack_sizes:
        failures.append(("PackSizes", "min"))
    else:
        failures.extend(
            (f"PackSizes[{index}]", "gt") for index, size in enumerate(request.pack_sizes) if size <= 0
        )
    if request.order_quantity == 0:
        failures.append(("OrderQuantity", "required"))
    elif request.order_quantity < 0:
        failures.append(("OrderQuantity", "gt"))
    if failures:
        raise ValidationError("CalculationRequest", failures)


def parse_calculation_request(data: Any) -> CalculationRequest:
    """Build a request from decoded JSON and validate it.

    Raises TypeError or ValueError when the JSON has the wrong shape, and
    ValidationError when a field breaks its rules. Keys match case-insensitively.
    """
    data = {} if data is None else data
    if not isinstance(data, dict):
        raise TypeError(f"cannot unmarshal {type(data).__name__} into CalculationRequest")

    request = CalculationRequest(pack_sizes=None, order_quantity=0)
    for key, value in data.items():
        name = key.lower()
        if name == "pack_sizes":
            if value is not None and not isinstance(value, list):
                raise TypeError(f"cannot unmarshal {type(value).__name__} into field pack_sizes of type []int")
            request.pack_sizes = None if value is None else [_decode_int(item, name) for item in value]
        elif name == "order_quantity":
            request.order_quantity = _decode_int(value, name)

    _validate(request)
    return request


def to_calculation_response(result: Calculation) -> CalculationResponse:
    return CalculationResponse(
        id=result.id,
        packs_used=dict(result.get_distribution()),
        total_items=result.total_items,
        total_packs=result.total_packs,
        items_overage=result.items_overage,
        calculation_time=format_duration(result.calculation_time),
        success=True,
    )


def to_pack_response(pack: Pack) -> PackResponse:
    return PackResponse(
        id=pack.id,
        size=pack.size,
        name=pack.name,
        active=pack.active,
        created_at=pack.created_at,
        updated_at=pack.updated_at,
    )


def to_pack_list_response(packs: Iterable[Pack]) -> PackListResponse:
    responses = [to_pack_response(pack) for pack in packs]
    return PackListResponse(packs=responses, total=len(responses))