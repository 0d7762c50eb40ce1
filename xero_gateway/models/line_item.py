"""
Line items shared by invoices, credit notes and bank transactions.
"""
from __future__ import annotations
from decimal import Decimal
from typing import Any, Optional
from lxml import etree
from pydantic import Field

from ..parsers.base import parse_decimal, text
from .base import HydrationOptions, XeroModel, decode_children
from .reference import TrackingCategory


class LineItem(XeroModel):
    line_item_id: Optional[str] = None
    description: Optional[str] = None
    quantity: Optional[Decimal] = None
    unit_amount: Optional[Decimal] = None
    item_code: Optional[str] = None
    account_code: Optional[str] = None
    tax_type: Optional[str] = None
    tax_amount: Optional[Decimal] = None
    line_amount: Optional[Decimal] = None
    discount_rate: Optional[Decimal] = None
    tracking: list[TrackingCategory] = Field(default_factory=list)

    xml_tag = "LineItem"

    @classmethod
    def from_xml(cls, element: etree._Element, gateway: Any = None, options: HydrationOptions | None = None) -> "LineItem":
        cls.check_tag(element)
        return cls(
            line_item_id=text(element, "LineItemID"),
            description=text(element, "Description"),
            quantity=parse_decimal(text(element, "Quantity")),
            unit_amount=parse_decimal(text(element, "UnitAmount")),
            item_code=text(element, "ItemCode"),
            account_code=text(element, "AccountCode"),
            tax_type=text(element, "TaxType"),
            tax_amount=parse_decimal(text(element, "TaxAmount")),
            line_amount=parse_decimal(text(element, "LineAmount")),
            discount_rate=parse_decimal(text(element, "DiscountRate")),
            tracking=decode_children(element.find("Tracking"), TrackingCategory),
        )


def decode_line_items(element: etree._Element, downloaded: bool) -> Optional[list[LineItem]]:
    """
    Decode <LineItems> of a parent element.

    Returns None when the response is known not to include line items,
    regardless of what the element contains.
    """
    if not downloaded:
        return None
    return decode_children(element.find("LineItems"), LineItem)
