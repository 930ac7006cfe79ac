"""
Market record ingestion: raw API / CSV rows → validated ``MarketRecord``.

Source data arrives with inconsistent field names (the open-data API uses
``modal_price`` and ``arrival_date``; exported CSVs use ``Modal Price
(Rs./Quintal)`` and ``Reported Date``; hand-made files use ``Modal Price``).
``FIELD_ALIASES`` maps each canonical field to the ordered list of accepted
source names.  Names are matched case-insensitively and the first alias with
a non-empty value wins.

Row rules:
  - ``state``, ``district``, ``market``, ``variety`` must be non-empty
    (``variety`` may come from ``default_variety`` when the file is a
    single-variety export without a Variety column).
  - ``modal_price`` must parse to a positive number.
  - ``date`` must parse with one of ``DATE_FORMATS``.
  - Prices may carry ``₹``, thousands separators and whitespace.
  - Rows breaking any rule are skipped and counted; the count is logged.

Files:
  - ``.csv``  — header row required; parsed with ``csv.DictReader``.
  - ``.json`` — a list of objects, or an object with a ``records`` list
                (the open-data API response shape).
"""

from __future__ import annotations

import csv
import json
import logging
import re
from datetime import date, datetime
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional, Sequence

from pydantic import ValidationError

from mandi_forecaster.models.market import MarketRecord
from mandi_forecaster.models.price import PricePoint

logger = logging.getLogger(__name__)

FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "state":       ("state", "State Name"),
    "district":    ("district", "District Name"),
    "market":      ("market", "Market Name"),
    "variety":     ("variety", "commodity"),
    "group":       ("group", "category"),
    "arrivals":    ("arrivals", "Arrivals (Tonnes)"),
    "min_price":   ("min_price", "Min Price", "minPrice", "Min Price (Rs./Quintal)"),
    "max_price":   ("max_price", "Max Price", "maxPrice", "Max Price (Rs./Quintal)"),
    "modal_price": ("modal_price", "Modal Price", "modalPrice", "Modal Price (Rs./Quintal)"),
    "date":        ("date", "Reported Date", "arrival_date"),
}

DATE_FORMATS: tuple[str, ...] = (
    "%Y-%m-%d",
    "%d/%m/%Y",
    "%d-%m-%Y",
    "%d %b %Y",
    "%d-%b-%Y",
    "%d %B %Y",
)

_PRICE_JUNK = re.compile(r"[₹,\s]")


# ── Field resolution ──────────────────────────────────────────────────────────


def resolve_field(row: Mapping[str, Any], canonical: str) -> Optional[Any]:
    """Return the first non-empty value among the aliases of ``canonical``.

    Raises:
        KeyError: If ``canonical`` is not in ``FIELD_ALIASES``.
    """
    lowered = {str(k).strip().lower(): v for k, v in row.items()}
    for alias in FIELD_ALIASES[canonical]:
        value = lowered.get(alias.lower())
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        return value
    return None


def parse_price(value: Any) -> float:
    """Parse a price that may carry currency symbols or separators; ``0.0`` if unparseable."""
    if isinstance(value, bool) or value is None:
        return 0.0
    if isinstance(value, (int, float)):
        return float(value)
    try:
        return float(_PRICE_JUNK.sub("", str(value)))
    except ValueError:
        return 0.0


def parse_record_date(value: Any) -> Optional[date]:
    """Parse a reported date in any of ``DATE_FORMATS`` (or ISO datetime)."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    text = str(value).strip()
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        return None


def normalize_record(
    row: Mapping[str, Any],
    default_variety: Optional[str] = None,
) -> Optional[MarketRecord]:
    """Convert one raw row to a ``MarketRecord``; ``None`` if the row is unusable."""
    record_date = parse_record_date(resolve_field(row, "date"))
    if record_date is None:
        return None

    variety = resolve_field(row, "variety") or default_variety
    try:
        return MarketRecord(
            state=str(resolve_field(row, "state") or ""),
            district=str(resolve_field(row, "district") or ""),
            market=str(resolve_field(row, "market") or ""),
            variety=str(variety or ""),
            group=str(resolve_field(row, "group") or "").strip(),
            arrivals=parse_price(resolve_field(row, "arrivals")),
            min_price=parse_price(resolve_field(row, "min_price")),
            max_price=parse_price(resolve_field(row, "max_price")),
            modal_price=parse_price(resolve_field(row, "modal_price")),
            date=record_date,
        )
    except ValidationError:
        return None


def normalize_records(
    rows: Iterable[Mapping[str, Any]],
    default_variety: Optional[str] = None,
    source: str = "<rows>",
) -> list[MarketRecord]:
    """Normalize many rows, skipping unusable ones and logging the count."""
    records: list[MarketRecord] = []
    skipped = 0
    for row in rows:
        rec = normalize_record(row, default_variety)
        if rec is None:
            skipped += 1
        else:
            records.append(rec)

    if skipped:
        logger.warning("Skipped %d unusable row(s) from %s", skipped, source)
    logger.info("Loaded %d market records from %s", len(records), source)
    return records


# ── File loaders ──────────────────────────────────────────────────────────────


def parse_market_csv(
    path: Path,
    default_variety: Optional[str] = None,
) -> list[MarketRecord]:
    """Parse a market-records CSV file.

    Args:
        path:            CSV file with a header row.
        default_variety: Variety applied to rows without one.

    Returns:
        Validated records; unusable rows are skipped.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        ValueError: If the file has no header or no modal price column.
    """
    if not path.exists():
        raise FileNotFoundError(f"Market records file not found: {path}")

    with open(path, encoding="utf-8-sig", newline="") as f:
        reader = csv.DictReader(f)
        if reader.fieldnames is None:
            raise ValueError(f"CSV file is empty or has no header row: {path}")

        headers = {h.strip().lower() for h in reader.fieldnames if h}
        accepted = {a.lower() for a in FIELD_ALIASES["modal_price"]}
        if not headers & accepted:
            raise ValueError(
                f"CSV has no modal price column. Expected one of "
                f"{list(FIELD_ALIASES['modal_price'])}; found {sorted(headers)}"
            )
        rows = list(reader)

    return normalize_records(rows, default_variety, source=path.name)


def load_market_records(
    path: Path,
    default_variety: Optional[str] = None,
) -> list[MarketRecord]:
    """Load market records from a ``.csv`` or ``.json`` file.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        ValueError: On an unsupported extension or malformed JSON payload.
    """
    suffix = path.suffix.lower()
    if suffix == ".csv":
        return parse_market_csv(path, default_variety)
    if suffix != ".json":
        raise ValueError(f"Unsupported records format '{suffix}'. Use .csv or .json.")

    if not path.exists():
        raise FileNotFoundError(f"Market records file not found: {path}")

    try:
        with open(path, encoding="utf-8") as f:
            payload = json.load(f)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path.name}: {exc}") from exc

    if isinstance(payload, dict):
        payload = payload.get("records")
    if not isinstance(payload, list):
        raise ValueError(
            f"{path.name} must contain a list of records or an object with a 'records' list."
        )

    rows = [r for r in payload if isinstance(r, dict)]
    return normalize_records(rows, default_variety, source=path.name)


def to_price_points(
    records: Sequence[MarketRecord],
    variety: Optional[str] = None,
) -> list[PricePoint]:
    """Project records onto ``(date, modal_price)`` points, optionally for one variety."""
    return [
        PricePoint(timestamp=r.date, price=r.modal_price)
        for r in records
        if variety is None or r.variety == variety
    ]
