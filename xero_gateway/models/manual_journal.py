"""
Manual journals and their journal lines.
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
from .reference import TrackingCategory


class JournalLine(XeroModel):
    line_amount: Optional[Decimal] = None  # debits positive, credits negative
    account_code: Optional[str] = None
    description: Optional[str] = None
    tax_type: Optional[str] = None
    tax_amount: Optional[Decimal] = None
    tracking: list[TrackingCategory] = Field(default_factory=list)

    xml_tag = "JournalLine"

    @classmethod
    def from_xml(
        cls, element: etree._Element, gateway: Any = None, options: HydrationOptions | None = None
    ) -> "JournalLine":
        cls.check_tag(element)
        return cls(
            line_amount=parse_decimal(text(element, "LineAmount")),
            account_code=text(element, "AccountCode"),
            description=text(element, "Description"),
            tax_type=text(element, "TaxType"),
            tax_amount=parse_decimal(text(element, "TaxAmount")),
            tracking=decode_children(element.find("Tracking"), TrackingCategory),
        )


class ManualJournal(XeroModel):
    manual_journal_id: Optional[str] = None
    narration: Optional[str] = None
    date: Optional[dt.date] = None
    status: Optional[str] = None
    line_amount_types: Optional[str] = None
    url: Optional[str] = None
    show_on_cash_basis_reports: Optional[bool] = None
    updated_at: Optional[dt.datetime] = None
    journal_lines: Optional[list[JournalLine]] = None

    xml_tag = "ManualJournal"

    @property
    def journal_lines_downloaded(self) -> bool:
        return self.journal_lines is not None

    @classmethod
    def from_xml(
        cls, element: etree._Element, gateway: Any = None, options: HydrationOptions | None = None
    ) -> "ManualJournal":
        cls.check_tag(element)
        options = options or FULLY_HYDRATED
        journal_lines = None
        if options.journal_lines_downloaded:
            journal_lines = decode_children(element.find("JournalLines"), JournalLine)
        journal = cls(
            manual_journal_id=text(element, "ManualJournalID"),
            narration=text(element, "Narration"),
            date=parse_xero_date(text(element, "Date")),
            status=text(element, "Status"),
            line_amount_types=text(element, "LineAmountTypes"),
            url=text(element, "Url"),
            show_on_cash_basis_reports=parse_bool(text(element, "ShowOnCashBasisReports")),
            updated_at=parse_xero_datetime(text(element, "UpdatedDateUTC")),
            journal_lines=journal_lines,
            **cls.common_fields(element),
        )
        return journal.bind(gateway)

    def to_xml(self) -> str:
        return render("manual_journal", manual_journal=self)

    def load_journal_lines(self) -> list[JournalLine]:
        if self.journal_lines is None:
            if self.gateway is None or not self.manual_journal_id:
                raise NotLoadedError("Journal lines were not downloaded and no gateway is bound")
            response = self.gateway.get_manual_journal(self.manual_journal_id)
            self.journal_lines = nested_from_fetch(response, "journal_lines")
        return self.journal_lines
