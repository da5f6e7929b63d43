# ownerportal/services/hostkit_gateway.py
"""
Invoice source for owner statements: the Hostkit `getInvoices` endpoint.

The only contract the rest of the app relies on is `fetch_invoices`, which
returns a (possibly empty) list of `Invoice` records or raises
`UpstreamUnavailable`. An empty list always means "no invoices in range",
never "Hostkit was down".
"""
import logging
import os
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional

import requests

from ..crypto_secrets import decrypt_api_key
from ..exceptions import UpstreamTimeout, UpstreamUnavailable
from ..models import Property
from ..periods import period_timestamps, period_window
from .records import Invoice

log = logging.getLogger("hostkit_gateway")

DEFAULT_TIMEOUT_SECONDS = 30.0


def _timeout() -> float:
    raw = os.getenv("HOSTKIT_TIMEOUT_SECONDS")
    try:
        return float(raw) if raw else DEFAULT_TIMEOUT_SECONDS
    except ValueError:
        log.warning("Ignoring invalid HOSTKIT_TIMEOUT_SECONDS=%r", raw)
        return DEFAULT_TIMEOUT_SECONDS


def _api_key_for(prop: Property) -> Optional[str]:
    if prop.hostkit_api_key:
        return decrypt_api_key(prop.hostkit_api_key)
    return os.getenv("HOSTKIT_API_KEY") or None


def _from_unix(raw: Any) -> Optional[datetime]:
    try:
        return datetime.fromtimestamp(int(raw), tz=timezone.utc)
    except (ValueError, OverflowError, OSError):
        log.warning("Unreadable invoice date %r", raw)
        return None


def _parse_invoice_date(raw: Any) -> Optional[datetime]:
    """Hostkit sends Unix seconds (int or numeric string); tolerate ISO strings too."""
    if raw is None or raw == "":
        return None
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        return _from_unix(raw)
    text = str(raw).strip()
    if text.isdigit():
        return _from_unix(text)
    try:
        dt = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        log.warning("Unreadable invoice date %r", raw)
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def normalize_invoice(raw: Dict[str, Any], index: int) -> Invoice:
    def first(*keys):
        for k in keys:
            v = raw.get(k)
            if v is not None and v != "":
                return v
        return None

    inv_id = first("id", "invoice_id")
    tax = first("vat", "tax")
    return Invoice(
        id=str(inv_id) if inv_id is not None else f"inv_{index}",
        name=first("name", "invoice_name", "description"),
        value=first("value", "amount", "total"),
        date=_parse_invoice_date(raw.get("date")),
        series=str(raw.get("series") or ""),
        tax=tax,
    )


def _extract_records(payload: Any, property_id: int) -> List[Dict[str, Any]]:
    if isinstance(payload, dict) and isinstance(payload.get("invoices"), list):
        payload = payload["invoices"]
    if not isinstance(payload, list):
        raise UpstreamUnavailable(property_id, f"unexpected response shape ({type(payload).__name__})")
    return [r for r in payload if isinstance(r, dict)]


def filter_invoices(
    invoices: List[Invoice],
    start: date,
    end: date,
    series: Optional[List[str]] = None,
) -> List[Invoice]:
    """Keep invoices of the property's series that fall inside the inclusive window."""
    lo, hi = period_window(start, end)
    allowed = set(series or [])
    kept: List[Invoice] = []
    for inv in invoices:
        if allowed and inv.series not in allowed:
            log.debug("Dropping invoice %s: series %r not in %s", inv.id, inv.series, sorted(allowed))
            continue
        if inv.date is not None and not (lo <= inv.date <= hi):
            log.debug("Dropping invoice %s: dated %s, outside %s..%s", inv.id, inv.date.isoformat(), start, end)
            continue
        kept.append(inv)
    return kept


def fetch_invoices(prop: Property, start: date, end: date) -> List[Invoice]:
    base_url = (os.getenv("HOSTKIT_API_URL") or "").rstrip("/")
    if not base_url:
        raise UpstreamUnavailable(prop.id, "HOSTKIT_API_URL is not configured")

    try:
        api_key = _api_key_for(prop)
    except RuntimeError as e:
        raise UpstreamUnavailable(prop.id, str(e))
    if not api_key:
        raise UpstreamUnavailable(prop.id, "no Hostkit API key configured")

    date_start, date_end = period_timestamps(start, end)
    params = {
        "APIKEY": api_key,
        "property_id": prop.hostkit_id or str(prop.id),
        "date_start": date_start,
        "date_end": date_end,
    }
    timeout = _timeout()

    log.info(
        "Fetching Hostkit invoices property=%s hostkit_id=%s window=%s..%s",
        prop.id, params["property_id"], start.isoformat(), end.isoformat(),
    )
    try:
        r = requests.get(f"{base_url}/getInvoices", params=params, timeout=timeout)
    except requests.Timeout:
        log.error("Hostkit timed out after %ss for property %s", timeout, prop.id)
        raise UpstreamTimeout(prop.id, timeout)
    except requests.RequestException as e:
        log.error("Hostkit request failed for property %s: %s", prop.id, e)
        raise UpstreamUnavailable(prop.id, str(e))

    if not r.ok:
        log.error("Hostkit answered %s for property %s: %s", r.status_code, prop.id, (r.text or "")[:200])
        raise UpstreamUnavailable(prop.id, f"HTTP {r.status_code}")

    try:
        payload = r.json()
    except ValueError:
        raise UpstreamUnavailable(prop.id, "response is not JSON")

    records = _extract_records(payload, prop.id)
    invoices = [normalize_invoice(raw, i) for i, raw in enumerate(records)]
    kept = filter_invoices(invoices, start, end, prop.invoice_series)
    log.info("Hostkit returned %d invoice(s) for property %s, %d in scope", len(invoices), prop.id, len(kept))
    return kept
