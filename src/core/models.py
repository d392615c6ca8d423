"""Typed records for supplier rows read from Supabase."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True, slots=True)
class ServiceOffering:
    """A service (exam) a supplier offers, with what we pay and what we charge."""

    servico: str
    valor_a_pagar: Any = None
    valor_a_cobrar: Any = None


@dataclass(frozen=True, slots=True)
class SupplierRecord:
    """One row of the supplier view. Coordinates are kept as the text we received."""

    id: Any
    name: str = ""
    city: Optional[str] = None
    state: Optional[str] = None
    latitude: Optional[str] = None
    longitude: Optional[str] = None
    services: Tuple[ServiceOffering, ...] = ()
    raw: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)


@dataclass(frozen=True, slots=True)
class Marker:
    """A point ready to be drawn on the map."""

    supplier_id: Any
    lat: float
    lng: float
    popup: str
