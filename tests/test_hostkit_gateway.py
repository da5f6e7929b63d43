import base64
from dataclasses import replace
from datetime import date, datetime, timezone

import pytest
import requests

from ownerportal.crypto_secrets import encrypt_api_key
from ownerportal.exceptions import UpstreamTimeout, UpstreamUnavailable
from ownerportal.models import Property
from ownerportal.services import hostkit_gateway
from ownerportal.services.hostkit_gateway import fetch_invoices, filter_invoices, normalize_invoice

from factories import make_invoice

JAN_1 = date(2025, 1, 1)
JAN_31 = date(2025, 1, 31)
TS_JAN_15 = 1736899200      # 2025-01-15T00:00:00Z
TS_JAN_31_EVENING = 1738364400  # 2025-01-31T23:00:00Z
TS_FEB_05 = 1738713600      # 2025-02-05T00:00:00Z


class FakeResponse:
    def __init__(self, payload=None, status_code=200, text=""):
        self._payload = payload
        self.status_code = status_code
        self.text = text

    @property
    def ok(self):
        return 200 <= self.status_code < 400

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


@pytest.fixture
def hostkit_env(monkeypatch):
    monkeypatch.setenv("HOSTKIT_API_URL", "https://hostkit.test/api/")
    monkeypatch.setenv("HOSTKIT_API_KEY", "general-key")
    monkeypatch.delenv("APP_SECRETS_KEY", raising=False)


@pytest.fixture
def prop():
    return Property(id=392776, name="Piece of Heaven", hostkit_id="HK-1001", invoice_series=["HEAVEN2025"])


@pytest.fixture
def fake_get(monkeypatch):
    calls = []

    def install(result):
        def _get(url, params=None, timeout=None):
            calls.append({"url": url, "params": params, "timeout": timeout})
            if isinstance(result, Exception):
                raise result
            return result

        monkeypatch.setattr(hostkit_gateway.requests, "get", _get)
        return calls

    return install


def raw_invoice(inv_id, value, ts=TS_JAN_15, series="HEAVEN2025", **extra):
    record = {"id": inv_id, "name": f"Guest {inv_id}", "value": value, "date": str(ts), "series": series}
    record.update(extra)
    return record


class TestFetchInvoices:

    def test_request_carries_credentials_and_inclusive_window(self, hostkit_env, prop, fake_get):
        calls = fake_get(FakeResponse([]))

        assert fetch_invoices(prop, JAN_1, JAN_31) == []

        call = calls[0]
        assert call["url"] == "https://hostkit.test/api/getInvoices"
        assert call["params"]["APIKEY"] == "general-key"
        assert call["params"]["property_id"] == "HK-1001"
        assert call["params"]["date_start"] == 1735689600   # 2025-01-01T00:00:00Z
        assert call["params"]["date_end"] == 1738367999     # 2025-01-31T23:59:59Z
        assert call["timeout"] == 30.0

    def test_timeout_is_configurable(self, hostkit_env, prop, fake_get, monkeypatch):
        monkeypatch.setenv("HOSTKIT_TIMEOUT_SECONDS", "5")
        calls = fake_get(FakeResponse([]))
        fetch_invoices(prop, JAN_1, JAN_31)
        assert calls[0]["timeout"] == 5.0

    def test_maps_and_filters_records(self, hostkit_env, prop, fake_get):
        fake_get(FakeResponse([
            raw_invoice(1, "100.00"),
            raw_invoice(2, "50.00", ts=TS_JAN_31_EVENING),
            raw_invoice(3, "70.00", series="LOTE82025"),
            raw_invoice(4, "80.00", ts=TS_FEB_05),
        ]))

        invoices = fetch_invoices(prop, JAN_1, JAN_31)

        assert [inv.id for inv in invoices] == ["1", "2"]
        assert invoices[0].value == "100.00"
        assert invoices[0].name == "Guest 1"
        assert invoices[0].date == datetime(2025, 1, 15, tzinfo=timezone.utc)

    def test_accepts_wrapped_invoice_list(self, hostkit_env, prop, fake_get):
        fake_get(FakeResponse({"invoices": [raw_invoice(9, "10.00")]}))
        assert [inv.id for inv in fetch_invoices(prop, JAN_1, JAN_31)] == ["9"]

    def test_timeout_is_surfaced(self, hostkit_env, prop, fake_get):
        fake_get(requests.Timeout("read timed out"))
        with pytest.raises(UpstreamTimeout) as exc:
            fetch_invoices(prop, JAN_1, JAN_31)
        assert exc.value.property_id == 392776

    def test_connection_error_is_not_an_empty_list(self, hostkit_env, prop, fake_get):
        fake_get(requests.ConnectionError("connection refused"))
        with pytest.raises(UpstreamUnavailable) as exc:
            fetch_invoices(prop, JAN_1, JAN_31)
        assert not isinstance(exc.value, UpstreamTimeout)

    def test_http_error_status(self, hostkit_env, prop, fake_get):
        fake_get(FakeResponse({"error": "bad key"}, status_code=401, text="bad key"))
        with pytest.raises(UpstreamUnavailable, match="HTTP 401"):
            fetch_invoices(prop, JAN_1, JAN_31)

    @pytest.mark.parametrize("payload", [{"error": "nope"}, "text", None, 42])
    def test_non_list_payload(self, hostkit_env, prop, fake_get, payload):
        fake_get(FakeResponse(payload))
        with pytest.raises(UpstreamUnavailable):
            fetch_invoices(prop, JAN_1, JAN_31)

    def test_non_json_payload(self, hostkit_env, prop, fake_get):
        fake_get(FakeResponse(ValueError("No JSON")))
        with pytest.raises(UpstreamUnavailable, match="not JSON"):
            fetch_invoices(prop, JAN_1, JAN_31)

    def test_missing_base_url(self, hostkit_env, prop, fake_get, monkeypatch):
        monkeypatch.delenv("HOSTKIT_API_URL")
        calls = fake_get(FakeResponse([]))
        with pytest.raises(UpstreamUnavailable, match="HOSTKIT_API_URL"):
            fetch_invoices(prop, JAN_1, JAN_31)
        assert calls == []

    def test_missing_api_key(self, hostkit_env, prop, fake_get, monkeypatch):
        monkeypatch.delenv("HOSTKIT_API_KEY")
        fake_get(FakeResponse([]))
        with pytest.raises(UpstreamUnavailable, match="API key"):
            fetch_invoices(prop, JAN_1, JAN_31)

    def test_uses_the_property_key_when_stored(self, hostkit_env, prop, fake_get, monkeypatch):
        monkeypatch.setenv("APP_SECRETS_KEY", base64.b64encode(b"k" * 32).decode("ascii"))
        prop.hostkit_api_key = encrypt_api_key("property-key")
        calls = fake_get(FakeResponse([]))

        fetch_invoices(prop, JAN_1, JAN_31)

        assert calls[0]["params"]["APIKEY"] == "property-key"

    def test_stored_key_without_secrets_key_is_an_upstream_error(self, hostkit_env, prop, fake_get):
        prop.hostkit_api_key = "c29tZXRoaW5n"
        fake_get(FakeResponse([]))
        with pytest.raises(UpstreamUnavailable, match="APP_SECRETS_KEY"):
            fetch_invoices(prop, JAN_1, JAN_31)

    def test_falls_back_to_portal_id_without_hostkit_id(self, hostkit_env, prop, fake_get):
        prop.hostkit_id = None
        calls = fake_get(FakeResponse([]))
        fetch_invoices(prop, JAN_1, JAN_31)
        assert calls[0]["params"]["property_id"] == "392776"


class TestNormalizeInvoice:

    def test_fallback_fields(self):
        inv = normalize_invoice({"invoice_id": 77, "description": "Stay", "amount": 12.5, "vat": "0.75"}, 0)
        assert inv.id == "77"
        assert inv.name == "Stay"
        assert inv.value == 12.5
        assert inv.tax == "0.75"
        assert inv.date is None
        assert inv.series == ""

    def test_generated_id_when_missing(self):
        assert normalize_invoice({"value": "1.00"}, 4).id == "inv_4"

    def test_iso_and_integer_dates(self):
        assert normalize_invoice({"date": TS_JAN_15}, 0).date == datetime(2025, 1, 15, tzinfo=timezone.utc)
        assert normalize_invoice({"date": "2025-01-15T10:30:00Z"}, 0).date == datetime(
            2025, 1, 15, 10, 30, tzinfo=timezone.utc)

    @pytest.mark.parametrize("raw", ["someday", 1735689600000, "1735689600000", float("nan"), 10 ** 20])
    def test_unreadable_date_is_dropped(self, raw):
        inv = normalize_invoice({"id": 1, "value": "10", "date": raw}, 0)
        assert inv.date is None
        assert inv.value == "10"


class TestFilterInvoices:

    def test_no_series_means_no_series_filter(self):
        invoices = [make_invoice(1, "1", series="A"), make_invoice(2, "2", series="B")]
        assert filter_invoices(invoices, JAN_1, JAN_31, None) == invoices

    def test_undated_invoices_are_kept(self):
        undated = replace(make_invoice(1, "1"), date=None)
        assert filter_invoices([undated], JAN_1, JAN_31, ["HEAVEN2025"]) == [undated]

    def test_window_edges_are_inclusive(self):
        first = make_invoice(1, "1", day=1)
        last = make_invoice(2, "2", day=31)
        assert filter_invoices([first, last], JAN_1, JAN_31) == [first, last]
