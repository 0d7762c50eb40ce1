"""
XML helpers shared by the response dispatcher and the model codecs.
"""

from .base import (
    sanitize_xml,
    parse_document,
    child_elements,
    text,
    attr,
    parse_xero_date,
    parse_xero_datetime,
    parse_decimal,
    parse_int,
    parse_bool,
    format_xero_date,
    format_decimal,
    format_bool,
)

__all__ = [
    "sanitize_xml",
    "parse_document",
    "child_elements",
    "text",
    "attr",
    "parse_xero_date",
    "parse_xero_datetime",
    "parse_decimal",
    "parse_int",
    "parse_bool",
    "format_xero_date",
    "format_decimal",
    "format_bool",
]
