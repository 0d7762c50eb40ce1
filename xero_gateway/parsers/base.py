"""
Base utilities for XML parsing.

Provides common functions for reading Xero XML responses including:
- Document parsing (whitespace-only text nodes dropped)
- Child text lookup
- Date and datetime parsing
- Decimal, integer and boolean parsing
"""
from __future__ import annotations
import re
from datetime import datetime, date
from decimal import Decimal, InvalidOperation
from typing import Iterator, Optional
from lxml import etree
from loguru import logger


def sanitize_xml(xml_text: str) -> str:
    """
    Remove characters that are not legal in XML 1.0.

    Xero output is normally clean, but free-text fields (narrations, contact
    notes) occasionally carry control characters pasted in from other systems.
    """
    if not xml_text:
        return xml_text

    xml_text = xml_text.replace("\x00", "")
    # Numeric references to control chars (except tab, newline, CR)
    xml_text = re.sub(r"&#([0-8]|1[1-2]|1[4-9]|2[0-9]|3[01]);", "", xml_text)
    xml_text = re.sub(r"&#x([0-8bBcCeEfF]|1[0-9a-fA-F]);", "", xml_text)
    return re.sub(r"[\x01-\x08\x0B\x0C\x0E-\x1F]", "", xml_text)


def parse_document(raw: bytes | str) -> etree._Element:
    """
    Parse an XML document and return its root element.

    Whitespace-only text nodes are dropped so that iterating an element's
    children only yields real content.

    Raises:
        etree.XMLSyntaxError: If the payload is not well-formed XML
        UnicodeDecodeError: If a bytes payload is not valid UTF-8
    """
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8")
    parser = etree.XMLParser(remove_blank_text=True, resolve_entities=False)
    return etree.fromstring(sanitize_xml(raw).encode("utf-8"), parser)


def child_elements(element: etree._Element | None) -> Iterator[etree._Element]:
    """Yield the element children of `element`, skipping comments and processing instructions."""
    if element is None:
        return
    for child in element:
        if isinstance(child.tag, str):
            yield child


def text(element: etree._Element | None, tag: str, default: str | None = None) -> str | None:
    """
    Safely extract text from a child element.

    Args:
        element: Parent XML element
        tag: Child tag name (or simple path) to find
        default: Default value if not found

    Returns:
        Stripped text content or default
    """
    if element is None:
        return default

    child = element.find(tag)
    if child is None or child.text is None:
        return default

    return child.text.strip() or default


def attr(element: etree._Element | None, name: str, default: str | None = None) -> str | None:
    """Safely extract an attribute value from an element."""
    if element is None:
        return default

    val = element.get(name)
    if val is None:
        return default

    return val.strip() or default


def parse_xero_date(s: str | None) -> Optional[date]:
    """
    Parse a Xero date string to a Python date.

    Xero sends dates as:
    - YYYY-MM-DD
    - YYYY-MM-DDTHH:MM:SS (time is always midnight for date-only fields)

    Returns None for empty or unparseable strings.
    """
    if not s:
        return None

    s = str(s).strip()
    if not s:
        return None

    try:
        return date.fromisoformat(s[:10])
    except ValueError:
        logger.warning(f"Could not parse date: {s}")
        return None


def parse_xero_datetime(s: str | None) -> Optional[datetime]:
    """
    Parse a Xero timestamp such as 2024-04-01T10:11:12.153 to a naive UTC datetime.

    Fractional seconds of any precision and a trailing 'Z' are accepted.
    """
    if not s:
        return None

    s = str(s).strip().rstrip("Z")
    if not s:
        return None

    # fromisoformat only takes 3 or 6 fractional digits on older interpreters
    match = re.match(r"^(\d{4}-\d{2}-\d{2}(?:T\d{2}:\d{2}:\d{2})?)(?:\.(\d+))?$", s)
    if not match:
        logger.warning(f"Could not parse datetime: {s}")
        return None

    base, fraction = match.groups()
    try:
        value = datetime.fromisoformat(base)
    except ValueError:
        logger.warning(f"Could not parse datetime: {s}")
        return None

    if fraction:
        value = value.replace(microsecond=int(fraction[:6].ljust(6, "0")))
    return value


def parse_decimal(s: str | None, default: Decimal | None = None) -> Decimal | None:
    """
    Parse a Xero money or quantity string to Decimal.

    Handles comma separators and empty strings.
    """
    if not s:
        return default

    s = str(s).strip().replace(",", "")
    if not s:
        return default

    try:
        return Decimal(s)
    except InvalidOperation:
        logger.warning(f"Could not parse decimal: {s}")
        return default


def parse_int(s: str | None, default: int | None = None) -> int | None:
    """Parse an integer string."""
    if not s:
        return default

    s = str(s).strip().replace(",", "")
    if not s:
        return default

    try:
        return int(float(s))  # Handle "12.0" style
    except ValueError:
        logger.warning(f"Could not parse int: {s}")
        return default


def parse_bool(s: str | None, default: bool | None = None) -> bool | None:
    """
    Parse a Xero boolean string.

    Xero writes booleans as true/false; Yes/No and 1/0 are tolerated.
    """
    if s is None:
        return default

    s = str(s).strip().lower()
    if s in ("true", "yes", "1", "y"):
        return True
    elif s in ("false", "no", "0", "n"):
        return False

    return default


def format_xero_date(value: date | datetime | None) -> str | None:
    """Format a date the way Xero expects it in request bodies (YYYY-MM-DD)."""
    if value is None:
        return None
    if isinstance(value, datetime):
        value = value.date()
    return value.isoformat()


def format_decimal(value: Decimal | int | float | None) -> str | None:
    """Format a number for a request body without scientific notation."""
    if value is None:
        return None
    return format(Decimal(str(value)), "f")


def format_bool(value: bool | None) -> str | None:
    if value is None:
        return None
    return "true" if value else "false"
