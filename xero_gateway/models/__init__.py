"""
Domain objects decoded from Xero responses.

Each model knows how to build itself from one XML element
(`Model.from_xml(element, gateway, options)`); the writable kinds also
render themselves back to XML with `to_xml()`.
"""

from .base import HydrationOptions, XeroModel
from .contact import Address, Contact, ContactGroup, Phone
from .line_item import LineItem
from .payment import Payment
from .invoice import CreditNote, Invoice
from .bank_transaction import BankTransaction
from .manual_journal import JournalLine, ManualJournal
from .reference import Account, Currency, Item, Organisation, TaxRate, TrackingCategory
from .payroll import PayRun, PayrollCalendar
from .report import Report, ReportCell, ReportRow
from .error import Error

__all__ = [
    "HydrationOptions",
    "XeroModel",
    # Contacts
    "Address",
    "Contact",
    "ContactGroup",
    "Phone",
    # Documents
    "LineItem",
    "Invoice",
    "CreditNote",
    "BankTransaction",
    "JournalLine",
    "ManualJournal",
    "Payment",
    # Reference data
    "Account",
    "Currency",
    "Item",
    "Organisation",
    "TaxRate",
    "TrackingCategory",
    # Payroll
    "PayRun",
    "PayrollCalendar",
    # Reports and errors
    "Report",
    "ReportCell",
    "ReportRow",
    "Error",
]
