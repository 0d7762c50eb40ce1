"""
Invoices and credit notes.

Both carry line items that Xero only includes when a single document is
fetched (or created/updated). On the list endpoints `line_items` is left as
None; `load_line_items()` fetches them on demand through the bound gateway.
"""
from __future__ import annotations
import datetime as dt
from decimal import Decimal
from typing import Any, Optional
from lxml import etree
from pydantic import Field

from ..exceptions import NotLoadedError
from ..parsers.base import parse_bool, parse_decimal, parse_xero_date, parse_xero_datetime, text
from ..requests import render
from .base import HydrationOptions, XeroModel, FULLY_HYDRATED, decode_children, nested_from_fetch
from .contact import Contact
from .line_item import LineItem, decode_line_items
from .payment import Payment


class Invoice(XeroModel):
    invoice_id: Optional[str] = None
    invoice_number: Optional[str] = None
    invoice_type: Optional[str] = None  # ACCREC or ACCPAY
    invoice_status: Optional[str] = None
    contact: Optional[Contact] = None
    date: Optional[dt.date] = None
    due_date: Optional[dt.date] = None
    reference: Optional[str] = None
    branding_theme_id: Optional[str] = None
    line_amount_types: Optional[str] = None
    currency_code: Optional[str] = None
    currency_rate: Optional[Decimal] = None
    sub_total: Optional[Decimal] = None
    total_tax: Optional[Decimal] = None
    total: Optional[Decimal] = None
    amount_due: Optional[Decimal] = None
    amount_paid: Optional[Decimal] = None
    amount_credited: Optional[Decimal] = None
    sent_to_contact: Optional[bool] = None
    url: Optional[str] = None
    fully_paid_on: Optional[dt.date] = None
    updated_at: Optional[dt.datetime] = None
    payments: list[Payment] = Field(default_factory=list)
    line_items: Optional[list[LineItem]] = None

    xml_tag = "Invoice"

    @property
    def line_items_downloaded(self) -> bool:
        return self.line_items is not None

    @classmethod
    def from_xml(cls, element: etree._Element, gateway: Any = None, options: HydrationOptions | None = None) -> "Invoice":
        cls.check_tag(element)
        options = options or FULLY_HYDRATED
        contact_el = element.find("Contact")
        invoice = cls(
            invoice_id=text(element, "InvoiceID"),
            invoice_number=text(element, "InvoiceNumber"),
            invoice_type=text(element, "Type"),
            invoice_status=text(element, "Status"),
            contact=Contact.from_xml(contact_el, gateway) if contact_el is not None else None,
            date=parse_xero_date(text(element, "Date")),
            due_date=parse_xero_date(text(element, "DueDate")),
            reference=text(element, "Reference"),
            branding_theme_id=text(element, "BrandingThemeID"),
            line_amount_types=text(element, "LineAmountTypes"),
            currency_code=text(element, "CurrencyCode"),
            currency_rate=parse_decimal(text(element, "CurrencyRate")),
            sub_total=parse_decimal(text(element, "SubTotal")),
            total_tax=parse_decimal(text(element, "TotalTax")),
            total=parse_decimal(text(element, "Total")),
            amount_due=parse_decimal(text(element, "AmountDue")),
            amount_paid=parse_decimal(text(element, "AmountPaid")),
            amount_credited=parse_decimal(text(element, "AmountCredited")),
            sent_to_contact=parse_bool(text(element, "SentToContact")),
            url=text(element, "Url"),
            fully_paid_on=parse_xero_date(text(element, "FullyPaidOnDate")),
            updated_at=parse_xero_datetime(text(element, "UpdatedDateUTC")),
            payments=decode_children(element.find("Payments"), Payment, gateway),
            line_items=decode_line_items(element, options.line_items_downloaded),
            **cls.common_fields(element),
        )
        return invoice.bind(gateway)

    def to_xml(self) -> str:
        return render("invoice", invoice=self)

    def load_line_items(self) -> list[LineItem]:
        """Return line items, fetching the full invoice through the gateway if needed."""
        if self.line_items is None:
            if self.gateway is None or not self.invoice_id:
                raise NotLoadedError("Line items were not downloaded and no gateway is bound")
            self.line_items = nested_from_fetch(self.gateway.get_invoice(self.invoice_id), "line_items")
        return self.line_items


class CreditNote(XeroModel):
    credit_note_id: Optional[str] = None
    credit_note_number: Optional[str] = None
    type: Optional[str] = None  # ACCRECCREDIT or ACCPAYCREDIT
    status: Optional[str] = None
    contact: Optional[Contact] = None
    date: Optional[dt.date] = None
    reference: Optional[str] = None
    line_amount_types: Optional[str] = None
    currency_code: Optional[str] = None
    sub_total: Optional[Decimal] = None
    total_tax: Optional[Decimal] = None
    total: Optional[Decimal] = None
    remaining_credit: Optional[Decimal] = None
    sent_to_contact: Optional[bool] = None
    fully_paid_on: Optional[dt.date] = None
    updated_at: Optional[dt.datetime] = None
    line_items: Optional[list[LineItem]] = None

    xml_tag = "CreditNote"

    @property
    def line_items_downloaded(self) -> bool:
        return self.line_items is not None

    @classmethod
    def from_xml(
        cls, element: etree._Element, gateway: Any = None, options: HydrationOptions | None = None
    ) -> "CreditNote":
        cls.check_tag(element)
        options = options or FULLY_HYDRATED
        contact_el = element.find("Contact")
        credit_note = cls(
            credit_note_id=text(element, "CreditNoteID"),
            credit_note_number=text(element, "CreditNoteNumber"),
            type=text(element, "Type"),
            status=text(element, "Status"),
            contact=Contact.from_xml(contact_el, gateway) if contact_el is not None else None,
            date=parse_xero_date(text(element, "Date")),
            reference=text(element, "Reference"),
            line_amount_types=text(element, "LineAmountTypes"),
            currency_code=text(element, "CurrencyCode"),
            sub_total=parse_decimal(text(element, "SubTotal")),
            total_tax=parse_decimal(text(element, "TotalTax")),
            total=parse_decimal(text(element, "Total")),
            remaining_credit=parse_decimal(text(element, "RemainingCredit")),
            sent_to_contact=parse_bool(text(element, "SentToContact")),
            fully_paid_on=parse_xero_date(text(element, "FullyPaidOnDate")),
            updated_at=parse_xero_datetime(text(element, "UpdatedDateUTC")),
            line_items=decode_line_items(element, options.line_items_downloaded),
            **cls.common_fields(element),
        )
        return credit_note.bind(gateway)

    def to_xml(self) -> str:
        return render("credit_note", credit_note=self)

    def load_line_items(self) -> list[LineItem]:
        if self.line_items is None:
            if self.gateway is None or not self.credit_note_id:
                raise NotLoadedError("Line items were not downloaded and no gateway is bound")
            self.line_items = nested_from_fetch(self.gateway.get_credit_note(self.credit_note_id), "line_items")
        return self.line_items
