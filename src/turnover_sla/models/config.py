# src/turnover_sla/models/config.py
from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Mapping, Optional

# Semantic keys a raw column can be bound to
FIELD_KEYS: tuple[str, ...] = (
    "order_date",
    "shipping_date",
    "required_arrival_date",
    "status",
    "method",
    "product",
    "destination_country",
    "order_id",
    "customer",
)

DEFAULT_STATUS_MATCHERS: tuple[str, ...] = (
    "shipped",
    "shipped out",
    "delivered",
    "sampling finished",
)


class MonthBasis(str, Enum):
    SHIPPED = "shipped"
    SLA_DUE = "sla_due"
    ORDER = "order"

    @classmethod
    def coerce(cls, value: Any, default: "MonthBasis" | None = None) -> "MonthBasis":
        """Accept a MonthBasis or its string value; anything else -> default."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return default or cls.SHIPPED


def _pick(d: Mapping[str, Any], *names: str) -> Any:
    """First present key among `names` (camelCase and snake_case both accepted)."""
    for n in names:
        if n in d:
            return d[n]
    return None


def _column_name(v: Any) -> Optional[str]:
    if not isinstance(v, str):
        return None
    v = v.strip()
    return v or None


def _str_tuple(v: Any) -> tuple[str, ...]:
    if isinstance(v, str) or v is None:
        return ()
    try:
        return tuple(str(x) for x in v if x is not None)
    except TypeError:
        return ()


def _bool(v: Any, default: bool) -> bool:
    return v if isinstance(v, bool) else default


@dataclass(frozen=True)
class FieldMapping:
    order_date: Optional[str] = None
    shipping_date: Optional[str] = None
    required_arrival_date: Optional[str] = None
    status: Optional[str] = None
    method: Optional[str] = None
    product: Optional[str] = None
    destination_country: Optional[str] = None
    order_id: Optional[str] = None
    customer: Optional[str] = None

    def column_for(self, key: str) -> Optional[str]:
        return getattr(self, key, None) if key in FIELD_KEYS else None

    def is_mapped(self, key: str) -> bool:
        return bool(self.column_for(key))

    @classmethod
    def from_dict(cls, d: Optional[Mapping[str, Any]]) -> "FieldMapping":
        """Build from a loosely-typed dict. Unknown keys are ignored, blank values unset."""
        if not isinstance(d, Mapping):
            return cls()
        return cls(**{k: _column_name(d.get(k)) for k in FIELD_KEYS})

    def to_dict(self) -> dict[str, Optional[str]]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass(frozen=True)
class RulesConfig:
    exclude_china: bool = True
    status_matchers: tuple[str, ...] = DEFAULT_STATUS_MATCHERS
    status_regex: str = ""

    @classmethod
    def from_dict(cls, d: Optional[Mapping[str, Any]]) -> "RulesConfig":
        if not isinstance(d, Mapping):
            return cls()
        matchers = _pick(d, "statusMatchers", "status_matchers")
        regex = _pick(d, "statusRegex", "status_regex")
        return cls(
            exclude_china=_bool(
                _pick(d, "excludeChina", "exclude_china"), cls.exclude_china),
            status_matchers=_str_tuple(matchers) if matchers is not None
            else DEFAULT_STATUS_MATCHERS,
            status_regex=regex if isinstance(regex, str) else "",
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "excludeChina": self.exclude_china,
            "statusMatchers": list(self.status_matchers),
            "statusRegex": self.status_regex,
        }


@dataclass(frozen=True)
class FiltersConfig:
    methods: tuple[str, ...] = ()
    products: tuple[str, ...] = ()
    month_range: tuple[Optional[str], Optional[str]] = (None, None)
    delivery_not_required: bool = False
    month_basis: MonthBasis = field(default=MonthBasis.SHIPPED)

    @classmethod
    def from_dict(cls, d: Optional[Mapping[str, Any]]) -> "FiltersConfig":
        if not isinstance(d, Mapping):
            return cls()
        rng = _pick(d, "monthRange", "month_range")
        start = end = None
        if isinstance(rng, (list, tuple)) and len(rng) == 2:
            start, end = (_column_name(x) for x in rng)
        return cls(
            methods=_str_tuple(d.get("methods")),
            products=_str_tuple(d.get("products")),
            month_range=(start, end),
            delivery_not_required=_bool(
                _pick(d, "deliveryNotRequired", "delivery_not_required"), False),
            month_basis=MonthBasis.coerce(
                _pick(d, "monthBasis", "month_basis")),
        )

    def with_month_basis(self, basis: MonthBasis | str) -> "FiltersConfig":
        return FiltersConfig(
            methods=self.methods,
            products=self.products,
            month_range=self.month_range,
            delivery_not_required=self.delivery_not_required,
            month_basis=MonthBasis.coerce(basis, self.month_basis),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "methods": list(self.methods),
            "products": list(self.products),
            "monthRange": list(self.month_range),
            "deliveryNotRequired": self.delivery_not_required,
            "monthBasis": self.month_basis.value,
        }
