"""
Tests for the shared XML parsing helpers.
"""
from datetime import date, datetime
from decimal import Decimal

import pytest
from lxml import etree

from xero_gateway.parsers import (
    attr,
    child_elements,
    format_bool,
    format_decimal,
    format_xero_date,
    parse_bool,
    parse_decimal,
    parse_document,
    parse_int,
    parse_xero_date,
    parse_xero_datetime,
    sanitize_xml,
    text,
)


def test_parse_xero_date():
    """Test date parsing from the formats Xero sends."""
    assert parse_xero_date("2024-04-01") == date(2024, 4, 1)
    assert parse_xero_date("2024-04-01T00:00:00") == date(2024, 4, 1)
    assert parse_xero_date("") is None
    assert parse_xero_date(None) is None
    assert parse_xero_date("not a date") is None


def test_parse_xero_datetime():
    assert parse_xero_datetime("2024-04-15T03:12:45") == datetime(2024, 4, 15, 3, 12, 45)
    # Seven fractional digits and a trailing Z
    assert parse_xero_datetime("2024-04-15T03:12:45.6210963Z") == datetime(2024, 4, 15, 3, 12, 45, 621096)
    assert parse_xero_datetime("2024-04-15T03:12:45.1") == datetime(2024, 4, 15, 3, 12, 45, 100000)
    assert parse_xero_datetime("2024-04-15") == datetime(2024, 4, 15)
    assert parse_xero_datetime("/Date(1713150765000)/") is None
    assert parse_xero_datetime(None) is None


def test_parse_decimal():
    assert parse_decimal("1,234.50") == Decimal("1234.50")
    assert parse_decimal("-4.50") == Decimal("-4.50")
    assert parse_decimal("") is None
    assert parse_decimal("abc") is None
    assert parse_decimal(None, Decimal("0")) == Decimal("0")


def test_parse_int():
    assert parse_int("31") == 31
    assert parse_int("12.0") == 12
    assert parse_int("x") is None


def test_parse_bool():
    assert parse_bool("true") is True
    assert parse_bool("False") is False
    assert parse_bool("Yes") is True
    assert parse_bool("0") is False
    assert parse_bool("maybe") is None
    assert parse_bool(None, False) is False


def test_text_and_attr():
    root = etree.fromstring('<Invoice status="OK"><Reference>  Ref 1  </Reference><Empty>  </Empty></Invoice>')
    assert text(root, "Reference") == "Ref 1"
    assert text(root, "Empty") is None
    assert text(root, "Missing", "dflt") == "dflt"
    assert text(None, "Reference") is None
    assert attr(root, "status") == "OK"
    assert attr(root, "missing") is None


def test_child_elements_skips_comments():
    root = etree.fromstring("<Items><!-- c --><Item /><?pi x?><Item /></Items>")
    assert [child.tag for child in child_elements(root)] == ["Item", "Item"]
    assert list(child_elements(None)) == []


def test_sanitize_xml_removes_control_chars():
    dirty = "<Narration>Pay\x01ment&#2; ok</Narration>"
    assert sanitize_xml(dirty) == "<Narration>Payment ok</Narration>"
    assert sanitize_xml("") == ""


def test_parse_document_accepts_bytes_and_str():
    assert parse_document(b"<Response><Status>OK</Status></Response>").tag == "Response"
    root = parse_document("<Response>\n  <Status>OK</Status>\n</Response>")
    assert root[0].tag == "Status"


def test_parse_document_rejects_garbage():
    with pytest.raises(etree.XMLSyntaxError):
        parse_document("not xml")


def test_parse_document_rejects_invalid_utf8_bytes():
    with pytest.raises(UnicodeDecodeError):
        parse_document(b"<Response><Name>Caf\xe9</Name></Response>")


def test_formatters():
    assert format_xero_date(date(2024, 4, 1)) == "2024-04-01"
    assert format_xero_date(datetime(2024, 4, 1, 12, 0)) == "2024-04-01"
    assert format_xero_date(None) is None
    assert format_decimal(Decimal("12.50")) == "12.50"
    assert format_decimal(3) == "3"
    assert format_decimal(None) is None
    assert format_bool(True) == "true"
    assert format_bool(False) == "false"
    assert format_bool(None) is None
