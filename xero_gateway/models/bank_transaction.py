"""
Bank transactions (spend and receive money).
"""
from __future__ import annotations
import datetime as dt
from decimal import Decimal
from typing import Any, Optional
from lxml import etree

from ..exceptions import NotLoadedError
from ..parsers.base import parse_bool, parse_decimal, parse_xero_date, parse_xero_datetime, text
from ..requests import render
from .base import HydrationOptions, XeroModel, FULLY_HYDRATED, nested_from_fetch
from .contact import Contact
from .line_item import LineItem, decode_line_items
from .reference import Account


class BankTransaction(XeroModel):
    bank_transaction_id: Optional[str] = None
    type: Optional[str] = None  # SPEND or RECEIVE
    status: Optional[str] = None
    contact: Optional[Contact] = None
    bank_account: Optional[Account] = None
    date: Optional[dt.date] = None
    reference: Optional[str] = None
    line_amount_types: Optional[str] = None
    currency_code: Optional[str] = None
    is_reconciled: Optional[bool] = None
    url: Optional[str] = None
    sub_total: Optional[Decimal] = None
    total_tax: Optional[Decimal] = None
    total: Optional[Decimal] = None
    updated_at: Optional[dt.datetime] = None
    line_items: Optional[list[LineItem]] = None

    xml_tag = "BankTransaction"

    @property
    def line_items_downloaded(self) -> bool:
        return self.line_items is not None

    @classmethod
    def from_xml(
        cls, element: etree._Element, gateway: Any = None, options: HydrationOptions | None = None
    ) -> "BankTransaction":
        cls.check_tag(element)
        options = options or FULLY_HYDRATED
        contact_el = element.find("Contact")
        account_el = element.find("BankAccount")
        transaction = cls(
            bank_transaction_id=text(element, "BankTransactionID"),
            type=text(element, "Type"),
            status=text(element, "Status"),
            contact=Contact.from_xml(contact_el, gateway) if contact_el is not None else None,
            bank_account=Account.from_xml(account_el, gateway) if account_el is not None else None,
            date=parse_xero_date(text(element, "Date")),
            reference=text(element, "Reference"),
            line_amount_types=text(element, "LineAmountTypes"),
            currency_code=text(element, "CurrencyCode"),
            is_reconciled=parse_bool(text(element, "IsReconciled")),
            url=text(element, "Url"),
            sub_total=parse_decimal(text(element, "SubTotal")),
            total_tax=parse_decimal(text(element, "TotalTax")),
            total=parse_decimal(text(element, "Total")),
            updated_at=parse_xero_datetime(text(element, "UpdatedDateUTC")),
            line_items=decode_line_items(element, options.line_items_downloaded),
            **cls.common_fields(element),
        )
        return transaction.bind(gateway)

    def to_xml(self) -> str:
        return render("bank_transaction", bank_transaction=self)

    def load_line_items(self) -> list[LineItem]:
        if self.line_items is None:
            if self.gateway is None or not self.bank_transaction_id:
                raise NotLoadedError("Line items were not downloaded and no gateway is bound")
            response = self.gateway.get_bank_transaction(self.bank_transaction_id)
            self.line_items = nested_from_fetch(response, "line_items")
        return self.line_items
