"""Utilities for turning Supabase supplier rows into map markers."""

import html
import logging
import math
from typing import Any, Dict, Iterable, List, Optional, Sequence

from src.core.models import Marker, ServiceOffering, SupplierRecord

logger = logging.getLogger(__name__)


def _text_or_none(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


def parse_offerings(raw_services: Any) -> tuple:
    if not isinstance(raw_services, list):
        return ()
    offerings = []
    for item in raw_services:
        if not isinstance(item, dict):
            continue
        offerings.append(
            ServiceOffering(
                servico=str(item.get("servico") or ""),
                valor_a_pagar=item.get("valor_a_pagar"),
                valor_a_cobrar=item.get("valor_a_cobrar"),
            )
        )
    return tuple(offerings)


def parse_supplier(row: Any) -> SupplierRecord:
    """Build a SupplierRecord from one view row, keeping the row itself as `raw`."""
    if not isinstance(row, dict):
        raise ValueError(f"supplier row must be an object, got {type(row).__name__}")
    if row.get("id_fornecedor") is None:
        raise ValueError("supplier row is missing id_fornecedor")

    return SupplierRecord(
        id=row["id_fornecedor"],
        name=str(row.get("nome") or ""),
        city=_text_or_none(row.get("cidade")),
        state=_text_or_none(row.get("estado")),
        latitude=_text_or_none(row.get("endereco_latitude")),
        longitude=_text_or_none(row.get("endereco_longitude")),
        services=parse_offerings(row.get("servicos")),
        raw=row,
    )


def parse_suppliers(rows: Iterable[Any]) -> List[SupplierRecord]:
    return [parse_supplier(row) for row in rows]


def parse_coordinate(value: Optional[str]) -> Optional[float]:
    """Parse coordinate text into a finite float, or None when it is not a number."""
    if value is None:
        return None
    try:
        number = float(str(value).strip())
    except ValueError:
        return None
    if not math.isfinite(number):
        return None
    return number


def format_amount(value: Any) -> str:
    if value is None:
        return "-"
    return str(value)


def popup_html(record: SupplierRecord, offerings: Sequence[ServiceOffering]) -> str:
    """Popup body: supplier name followed by each offering's payable/chargeable amounts."""
    parts = [
        "<div style='max-height:200px; overflow-y:auto; font-size:13px;'>",
        f"<b style='font-size:14px;'>{html.escape(record.name)}</b><br><br>",
    ]
    for offering in offerings:
        parts.append(
            '<div style="margin-bottom:4px;">'
            f"<b>{html.escape(offering.servico)}</b><br>"
            f"Pagar: R$ {html.escape(format_amount(offering.valor_a_pagar))} | "
            f"Cobrar: R$ {html.escape(format_amount(offering.valor_a_cobrar))}"
            "</div>"
        )
    parts.append("</div>")
    return "".join(parts)


def build_marker(record: SupplierRecord, offerings: Optional[Sequence[ServiceOffering]] = None) -> Optional[Marker]:
    lat = parse_coordinate(record.latitude)
    lng = parse_coordinate(record.longitude)
    if lat is None or lng is None:
        return None
    if offerings is None:
        offerings = record.services
    return Marker(supplier_id=record.id, lat=lat, lng=lng, popup=popup_html(record, offerings))


def build_markers(records: Iterable[SupplierRecord]) -> List[Marker]:
    """Markers for every record with usable coordinates; the rest are skipped silently."""
    markers = []
    for record in records:
        marker = build_marker(record)
        if marker is not None:
            markers.append(marker)
    return markers


def service_names(records: Iterable[SupplierRecord]) -> List[str]:
    names = {offering.servico for record in records for offering in record.services}
    return sorted(names)


def filter_markers(
    records: Iterable[SupplierRecord],
    search_text: str = "",
    selected_service: str = "",
) -> List[Marker]:
    """Markers the page shows for a given search box value and dropdown selection."""
    needle = (search_text or "").lower()
    markers = []
    for record in records:
        if needle not in record.name.lower():
            continue

        offerings: Sequence[ServiceOffering] = record.services
        if selected_service:
            offerings = [o for o in record.services if o.servico == selected_service]
            if not offerings:
                continue

        marker = build_marker(record, offerings)
        if marker is not None:
            markers.append(marker)
    return markers


def raw_rows(records: Iterable[SupplierRecord]) -> List[Dict[str, Any]]:
    return [record.raw for record in records]
