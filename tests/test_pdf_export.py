"""
PDF rendering and the unsaved-quote export endpoint.
"""

from unittest.mock import patch

import pytest

from reelquote.pdf_generator import QuotePDF, _fmt, _fmt_date, _safe, generate_quote_pdf
from reelquote.pricing import QuoteInput, calculate_quote


def _quote_dict(quote_payload, registry):
    return calculate_quote(QuoteInput.from_dict(quote_payload), registry).to_dict()


def _summary_labels(quote, meta=None):
    with patch.object(QuotePDF, "summary_row", autospec=True) as summary_row:
        generate_quote_pdf(quote, meta)
    return [call.args[1] for call in summary_row.call_args_list]


# --- Formatting ---

@pytest.mark.parametrize("amount, expected", [
    (1_850_000, "Rp 1.850.000"),
    (2_243_587.5, "Rp 2.243.588"),
    (0, "Rp 0"),
    (None, "Rp 0"),
])
def test_rupiah_format(amount, expected):
    assert _fmt(amount) == expected


def test_date_format():
    assert _fmt_date("2026-03-04T10:00:00Z") == "4/3/2026"


def test_safe_replaces_non_latin1():
    assert _safe("Kopi — “Kita”") == 'Kopi  -  "Kita"'


# --- Rendering ---

def test_pdf_generates_valid_bytes(quote_payload, registry):
    pdf_bytes = generate_quote_pdf(
        _quote_dict(quote_payload, registry),
        {"project_title": "Roastery Profile", "client_name": "Kopi Kita"},
    )
    assert isinstance(pdf_bytes, bytes)
    assert len(pdf_bytes) > 1000
    assert pdf_bytes[:5] == b"%PDF-"
    assert "/Count" in pdf_bytes.decode("latin-1")


def test_pdf_shows_client_price_when_margin_set(quote_payload, registry):
    labels = _summary_labels(_quote_dict(quote_payload, registry))
    assert labels[0] == "Base Crew"
    assert "Grand Total" in labels
    assert "Client Price" in labels
    assert "Estimated Nett Profit" in labels


def test_pdf_hides_client_price_without_margin(quote_payload, registry):
    del quote_payload["business"]
    labels = _summary_labels(_quote_dict(quote_payload, registry))
    assert "Grand Total" in labels
    assert "Client Price" not in labels
    assert "Estimated Nett Profit" not in labels


def test_pdf_with_no_lines(registry):
    quote = calculate_quote(
        QuoteInput.from_dict({"project_type": "social", "complexity": {"answers": [0] * 10}}),
        registry,
    ).to_dict()
    assert generate_quote_pdf(quote)[:5] == b"%PDF-"


# --- Endpoint ---

def test_export_endpoint_returns_pdf(client, quote_payload):
    quote = client.post("/api/quote/preview", json=quote_payload).json()
    response = client.post("/api/export/pdf", json={
        "quote": quote,
        "meta": {"project_title": "Roastery Profile", "client_name": "Kopi Kita"},
    })
    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert 'filename="quote-roastery-profile.pdf"' in response.headers["content-disposition"]
    assert response.content[:5] == b"%PDF-"


def test_export_without_meta(client, quote_payload):
    quote = client.post("/api/quote/preview", json=quote_payload).json()
    response = client.post("/api/export/pdf", json={"quote": quote})
    assert response.status_code == 200
    assert "quote-draft.pdf" in response.headers["content-disposition"]


def test_export_rejects_incomplete_quote(client):
    response = client.post("/api/export/pdf", json={"quote": {"project_type": "ads"}})
    assert response.status_code == 422
