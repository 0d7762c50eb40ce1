"""
Payments applied to invoices and credit notes.
"""
from __future__ import annotations
import datetime as dt
from decimal import Decimal
from typing import Any, Optional
from lxml import etree

from ..parsers.base import parse_bool, parse_decimal, parse_xero_date, parse_xero_datetime, text
from ..requests import render
from .base import HydrationOptions, XeroModel


class Payment(XeroModel):
    """
    A payment against an invoice.

    The invoice and account are flattened to their identifiers; Xero only
    needs one of id/number (invoice) and id/code (account) when creating.
    """

    payment_id: Optional[str] = None
    invoice_id: Optional[str] = None
    invoice_number: Optional[str] = None
    account_id: Optional[str] = None
    account_code: Optional[str] = None
    date: Optional[dt.date] = None
    amount: Optional[Decimal] = None
    currency_rate: Optional[Decimal] = None
    reference: Optional[str] = None
    payment_type: Optional[str] = None
    status: Optional[str] = None
    is_reconciled: Optional[bool] = None
    updated_at: Optional[dt.datetime] = None

    xml_tag = "Payment"

    @classmethod
    def from_xml(cls, element: etree._Element, gateway: Any = None, options: HydrationOptions | None = None) -> "Payment":
        cls.check_tag(element)
        return cls(
            payment_id=text(element, "PaymentID"),
            invoice_id=text(element, "Invoice/InvoiceID"),
            invoice_number=text(element, "Invoice/InvoiceNumber"),
            account_id=text(element, "Account/AccountID"),
            account_code=text(element, "Account/Code"),
            date=parse_xero_date(text(element, "Date")),
            amount=parse_decimal(text(element, "Amount")),
            currency_rate=parse_decimal(text(element, "CurrencyRate")),
            reference=text(element, "Reference"),
            payment_type=text(element, "PaymentType"),
            status=text(element, "Status"),
            is_reconciled=parse_bool(text(element, "IsReconciled")),
            updated_at=parse_xero_datetime(text(element, "UpdatedDateUTC")),
            **cls.common_fields(element),
        ).bind(gateway)

    def to_xml(self) -> str:
        return render("payment", payment=self)
