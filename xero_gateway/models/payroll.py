"""
Payroll calendars and pay runs (served from the payroll API base URL).
"""
from __future__ import annotations
import datetime as dt
from decimal import Decimal
from typing import Any, Optional
from lxml import etree

from ..parsers.base import parse_decimal, parse_xero_date, parse_xero_datetime, text
from .base import HydrationOptions, XeroModel


class PayrollCalendar(XeroModel):
    payroll_calendar_id: Optional[str] = None
    name: Optional[str] = None
    calendar_type: Optional[str] = None  # WEEKLY, FORTNIGHTLY, MONTHLY, ...
    start_date: Optional[dt.date] = None
    payment_date: Optional[dt.date] = None
    updated_at: Optional[dt.datetime] = None

    xml_tag = "PayrollCalendar"

    @classmethod
    def from_xml(
        cls, element: etree._Element, gateway: Any = None, options: HydrationOptions | None = None
    ) -> "PayrollCalendar":
        cls.check_tag(element)
        return cls(
            payroll_calendar_id=text(element, "PayrollCalendarID"),
            name=text(element, "Name"),
            calendar_type=text(element, "CalendarType"),
            start_date=parse_xero_date(text(element, "StartDate")),
            payment_date=parse_xero_date(text(element, "PaymentDate")),
            updated_at=parse_xero_datetime(text(element, "UpdatedDateUTC")),
        ).bind(gateway)


class PayRun(XeroModel):
    pay_run_id: Optional[str] = None
    payroll_calendar_id: Optional[str] = None
    period_start_date: Optional[dt.date] = None
    period_end_date: Optional[dt.date] = None
    status: Optional[str] = None  # DRAFT or POSTED
    payment_date: Optional[dt.date] = None
    wages: Optional[Decimal] = None
    deductions: Optional[Decimal] = None
    tax: Optional[Decimal] = None
    superannuation: Optional[Decimal] = None
    reimbursement: Optional[Decimal] = None
    net_pay: Optional[Decimal] = None
    updated_at: Optional[dt.datetime] = None

    xml_tag = "PayRun"

    @classmethod
    def from_xml(cls, element: etree._Element, gateway: Any = None, options: HydrationOptions | None = None) -> "PayRun":
        cls.check_tag(element)
        return cls(
            pay_run_id=text(element, "PayRunID"),
            payroll_calendar_id=text(element, "PayrollCalendarID"),
            period_start_date=parse_xero_date(text(element, "PayRunPeriodStartDate")),
            period_end_date=parse_xero_date(text(element, "PayRunPeriodEndDate")),
            status=text(element, "PayRunStatus"),
            payment_date=parse_xero_date(text(element, "PaymentDate")),
            wages=parse_decimal(text(element, "Wages")),
            deductions=parse_decimal(text(element, "Deductions")),
            tax=parse_decimal(text(element, "Tax")),
            superannuation=parse_decimal(text(element, "Super")),
            reimbursement=parse_decimal(text(element, "Reimbursement")),
            net_pay=parse_decimal(text(element, "NetPay")),
            updated_at=parse_xero_datetime(text(element, "UpdatedDateUTC")),
        ).bind(gateway)
