"""
Xero API gateway.

One method per API operation. Each builds the request, sends it through
`XeroClient` and decodes the body with `parse_response`, tagging the call
with a request signature ("GET/Invoices", "PUT/invoice", ...). The
signature tells the dispatcher whether nested collections were included.

Usage:
    gateway = Gateway.from_token(access_token, tenant_id)

    # List and fetch
    invoices = gateway.get_invoices(modified_since=datetime(2024, 4, 1)).items
    invoice = gateway.get_invoice(invoices[0].invoice_id).item

    # Create; the new id is copied back onto the submitted object
    contact = gateway.build_contact({"name": "Acme Ltd"})
    gateway.create_contact(contact)
    print(contact.contact_id)
"""
from __future__ import annotations
import datetime as dt
from typing import Any, Optional, Sequence, Union
from urllib.parse import quote

from loguru import logger

from .accounts_list import AccountsList
from .client import XeroClient
from .config import GatewayConfig
from .dispatcher import (
    LIST_BANK_TRANSACTIONS,
    LIST_CONTACT_GROUPS,
    LIST_CREDIT_NOTES,
    LIST_INVOICES,
    LIST_MANUAL_JOURNALS,
    parse_response,
)
from .models import BankTransaction, Contact, CreditNote, Invoice, ManualJournal, Payment, XeroModel
from .requests import render_batch
from .response import Response


def _join(values: Union[str, Sequence[str]]) -> str:
    if isinstance(values, str):
        return values
    return ",".join(str(v) for v in values)


def _http_date(value: Union[dt.date, dt.datetime, str]) -> str:
    if isinstance(value, dt.datetime):
        return value.strftime("%Y-%m-%dT%H:%M:%S")
    if isinstance(value, dt.date):
        return value.strftime("%Y-%m-%dT00:00:00")
    return str(value)


def _report_param_name(option: str) -> str:
    """bank_account_id -> BankAccountID, from_date -> FromDate."""
    return "".join("ID" if part.lower() == "id" else part[:1].upper() + part[1:] for part in option.split("_"))


def _write_back_ids(submitted: Sequence[XeroModel], response: Response, attribute: str) -> None:
    """
    Copy identifiers from decoded objects onto the submitted ones by position.

    Xero answers a batch in the order it was sent, so submitted[i] matches
    the i-th decoded object even when names collide.
    """
    for index, decoded in enumerate(response.items):
        if index >= len(submitted) or decoded is None:
            continue
        value = getattr(decoded, attribute, None)
        if value:
            setattr(submitted[index], attribute, value)


class Gateway:
    """Entry point for all Xero API operations."""

    def __init__(self, config: Optional[GatewayConfig] = None, client: Optional[XeroClient] = None):
        self.config = config or GatewayConfig.from_env()
        self.client = client or XeroClient(self.config)
        self.xero_url = self.config.xero_url.rstrip("/")
        self.payroll_url = self.config.payroll_url.rstrip("/")

    @classmethod
    def from_token(cls, access_token: str, tenant_id: str, **overrides: Any) -> "Gateway":
        """Build a gateway for an already-issued OAuth2 access token."""
        if not tenant_id:
            raise ValueError("Must provide a tenant id with an OAuth2 access token")
        config = GatewayConfig(access_token=access_token, tenant_id=tenant_id, **overrides)
        return cls(config)

    # -- plumbing -----------------------------------------------------------

    def _get(
        self,
        path: str,
        params: Optional[dict],
        signature: str,
        base_url: Optional[str] = None,
    ) -> Response:
        params = dict(params or {})
        query = dict(params)
        headers = {}
        modified_since = query.pop("ModifiedAfter", None)
        if modified_since is not None:
            headers["If-Modified-Since"] = _http_date(modified_since)
        raw = self.client.get(f"{base_url or self.xero_url}/{path}", query, headers or None)
        return parse_response(raw, {"request_params": params}, signature, self)

    def _send(
        self,
        method: str,
        path: str,
        request_xml: str,
        signature: str,
        params: Optional[dict] = None,
    ) -> Response:
        url = f"{self.xero_url}/{path}"
        if method == "PUT":
            raw = self.client.put(url, request_xml, params)
        else:
            raw = self.client.post(url, request_xml, params)
        return parse_response(raw, {"request_xml": request_xml}, signature, self)

    @staticmethod
    def _list_params(options: dict, mapping: dict[str, str]) -> dict:
        unknown = set(options) - set(mapping)
        if unknown:
            raise TypeError(f"Unknown option(s): {', '.join(sorted(unknown))}")
        params = {}
        for option, param in mapping.items():
            value = options.get(option)
            if value is None:
                continue
            params[param] = _join(value) if option.endswith("_ids") or option.endswith("_numbers") else value
        return params

    def _bind(self, obj: Union[XeroModel, dict, None], model: type) -> XeroModel:
        if obj is None:
            obj = {}
        if isinstance(obj, dict):
            obj = model(**obj)
        return obj.bind(self)

    # -- contacts -----------------------------------------------------------

    def get_contacts(self, **options: Any) -> Response:
        """
        Retrieve contacts.

        Options: contact_id, contact_number, order, modified_since, where, page.
        """
        if options.get("updated_after") is not None:
            logger.warning("updated_after is deprecated in get_contacts; use modified_since")
            options["modified_since"] = options.pop("updated_after")
        options.pop("updated_after", None)
        params = self._list_params(options, {
            "contact_id": "ContactID",
            "contact_number": "ContactNumber",
            "order": "order",
            "modified_since": "ModifiedAfter",
            "where": "where",
            "page": "page",
        })
        return self._get("Contacts", params, "GET/contacts")

    def get_contact_by_id(self, contact_id: str) -> Response:
        return self._get_contact(contact_id=contact_id)

    def get_contact_by_number(self, contact_number: str) -> Response:
        return self._get_contact(contact_number=contact_number)

    def _get_contact(self, contact_id: Optional[str] = None, contact_number: Optional[str] = None) -> Response:
        params = {"contactID": contact_id} if contact_id else {"contactNumber": contact_number}
        key = contact_id or contact_number
        return self._get(f"Contacts/{quote(key, safe='')}", params, "GET/contact")

    def build_contact(self, contact: Union[Contact, dict, None] = None) -> Contact:
        """Return a Contact bound to this gateway."""
        return self._bind(contact, Contact)

    def create_contact(self, contact: Contact) -> Response:
        return self._save_contact(contact)

    def update_contact(self, contact: Contact) -> Response:
        if contact.contact_id is None and contact.contact_number is None:
            raise ValueError("contact_id or contact_number is required for updating contacts")
        return self._save_contact(contact)

    def update_contacts(self, contacts: Sequence[Contact]) -> Response:
        """
        Create or update several contacts in one request.

        Xero matches each contact on contact_id, contact_number or name and
        creates the ones it cannot match.
        """
        request_xml = render_batch("Contacts", [contact.to_xml() for contact in contacts])
        response = self._send("POST", "Contacts", request_xml, "POST/contacts")
        _write_back_ids(contacts, response, "contact_id")
        return response

    def _save_contact(self, contact: Contact) -> Response:
        request_xml = contact.to_xml()
        if contact.contact_id is None and contact.contact_number is None:
            response = self._send("PUT", "Contacts", request_xml, "PUT/contact")
        else:
            response = self._send("POST", "Contacts", request_xml, "POST/contact")
        _write_back_ids([contact], response, "contact_id")
        return response

    # -- contact groups -----------------------------------------------------

    def get_contact_groups(self, **options: Any) -> Response:
        params = self._list_params(options, {
            "contact_group_id": "ContactGroupID",
            "order": "order",
            "where": "where",
        })
        return self._get("ContactGroups", params, LIST_CONTACT_GROUPS)

    def get_contact_group_by_id(self, contact_group_id: str) -> Response:
        params = {"ContactGroupID": contact_group_id}
        return self._get(f"ContactGroups/{quote(contact_group_id, safe='')}", params, "GET/contactgroup")

    # -- invoices -----------------------------------------------------------

    def get_invoices(self, **options: Any) -> Response:
        """
        Retrieve invoices. Line items are not included; see Invoice.load_line_items.

        Options: invoice_id, invoice_number, order, modified_since, invoice_ids,
        invoice_numbers, contact_ids, page, where.
        """
        params = self._list_params(options, {
            "invoice_id": "InvoiceID",
            "invoice_number": "InvoiceNumber",
            "order": "order",
            "modified_since": "ModifiedAfter",
            "invoice_ids": "IDs",
            "invoice_numbers": "InvoiceNumbers",
            "contact_ids": "ContactIDs",
            "page": "page",
            "where": "where",
        })
        return self._get("Invoices", params, LIST_INVOICES)

    def get_invoice(self, invoice_id_or_number: str, format: str = "xml") -> Union[Response, bytes]:
        """
        Retrieve a single invoice by id or number.

        With format="pdf" the rendered PDF bytes are returned instead of a Response.
        """
        path = f"Invoices/{quote(invoice_id_or_number, safe='')}"
        if format == "pdf":
            return self.client.get(f"{self.xero_url}/{path}", {}, {"Accept": "application/pdf"})
        return self._get(path, {}, "GET/Invoice")

    def build_invoice(self, invoice: Union[Invoice, dict, None] = None) -> Invoice:
        return self._bind(invoice, Invoice)

    def create_invoice(self, invoice: Invoice) -> Response:
        return self._save_invoice(invoice)

    def update_invoice(self, invoice: Invoice) -> Response:
        if invoice.invoice_id is None:
            raise ValueError("invoice_id is required for updating invoices")
        return self._save_invoice(invoice)

    def create_invoices(self, invoices: Sequence[Invoice]) -> Response:
        """Create several invoices in one request; each gets its new invoice_id back."""
        request_xml = render_batch("Invoices", [invoice.to_xml() for invoice in invoices])
        response = self._send("PUT", "Invoices", request_xml, "PUT/invoices", {"SummarizeErrors": "false"})
        _write_back_ids(invoices, response, "invoice_id")
        return response

    def _save_invoice(self, invoice: Invoice) -> Response:
        request_xml = invoice.to_xml()
        if invoice.invoice_id is None:
            response = self._send("PUT", "Invoices", request_xml, "PUT/invoice")
        else:
            response = self._send("POST", "Invoices", request_xml, "POST/invoice")
        if response.success:
            _write_back_ids([invoice], response, "invoice_id")
        return response

    # -- credit notes -------------------------------------------------------

    def get_credit_notes(self, **options: Any) -> Response:
        params = self._list_params(options, {
            "credit_note_id": "CreditNoteID",
            "credit_note_number": "CreditNoteNumber",
            "order": "order",
            "modified_since": "ModifiedAfter",
            "where": "where",
        })
        return self._get("CreditNotes", params, LIST_CREDIT_NOTES)

    def get_credit_note(self, credit_note_id_or_number: str) -> Response:
        return self._get(f"CreditNotes/{quote(credit_note_id_or_number, safe='')}", {}, "GET/CreditNote")

    def build_credit_note(self, credit_note: Union[CreditNote, dict, None] = None) -> CreditNote:
        return self._bind(credit_note, CreditNote)

    def create_credit_note(self, credit_note: CreditNote) -> Response:
        request_xml = credit_note.to_xml()
        response = self._send("PUT", "CreditNotes", request_xml, "PUT/credit_note")
        if response.success:
            _write_back_ids([credit_note], response, "credit_note_id")
        return response

    def create_credit_notes(self, credit_notes: Sequence[CreditNote]) -> Response:
        request_xml = render_batch("CreditNotes", [credit_note.to_xml() for credit_note in credit_notes])
        response = self._send("PUT", "CreditNotes", request_xml, "PUT/credit_notes")
        _write_back_ids(credit_notes, response, "credit_note_id")
        return response

    # -- bank transactions --------------------------------------------------

    def get_bank_transactions(self, **options: Any) -> Response:
        params = self._list_params(options, {
            "bank_transaction_id": "BankTransactionID",
            "modified_since": "ModifiedAfter",
            "order": "order",
            "where": "where",
            "page": "page",
        })
        return self._get("BankTransactions", params, LIST_BANK_TRANSACTIONS)

    def get_bank_transaction(self, bank_transaction_id: str) -> Response:
        return self._get(
            f"BankTransactions/{quote(bank_transaction_id, safe='')}", {}, "GET/BankTransaction"
        )

    def create_bank_transaction(self, bank_transaction: BankTransaction) -> Response:
        return self._save_bank_transaction(bank_transaction)

    def update_bank_transaction(self, bank_transaction: BankTransaction) -> Response:
        if bank_transaction.bank_transaction_id is None:
            raise ValueError("bank_transaction_id is required for updating bank transactions")
        return self._save_bank_transaction(bank_transaction)

    def _save_bank_transaction(self, bank_transaction: BankTransaction) -> Response:
        request_xml = bank_transaction.to_xml()
        if bank_transaction.bank_transaction_id is None:
            response = self._send("PUT", "BankTransactions", request_xml, "PUT/BankTransactions")
        else:
            response = self._send("POST", "BankTransactions", request_xml, "POST/BankTransactions")
        if response.success:
            _write_back_ids([bank_transaction], response, "bank_transaction_id")
        return response

    # -- manual journals ----------------------------------------------------

    def get_manual_journals(self, **options: Any) -> Response:
        params = self._list_params(options, {
            "manual_journal_id": "ManualJournalID",
            "modified_since": "ModifiedAfter",
        })
        return self._get("ManualJournals", params, LIST_MANUAL_JOURNALS)

    def get_manual_journal(self, manual_journal_id: str) -> Response:
        return self._get(f"ManualJournals/{quote(manual_journal_id, safe='')}", {}, "GET/ManualJournal")

    def create_manual_journal(self, manual_journal: ManualJournal) -> Response:
        return self._save_manual_journal(manual_journal)

    def update_manual_journal(self, manual_journal: ManualJournal) -> Response:
        if manual_journal.manual_journal_id is None:
            raise ValueError("manual_journal_id is required for updating manual journals")
        return self._save_manual_journal(manual_journal)

    def _save_manual_journal(self, manual_journal: ManualJournal) -> Response:
        request_xml = manual_journal.to_xml()
        if manual_journal.manual_journal_id is None:
            response = self._send("PUT", "ManualJournals", request_xml, "PUT/ManualJournals")
        else:
            response = self._send("POST", "ManualJournals", request_xml, "POST/ManualJournals")
        if response.success:
            _write_back_ids([manual_journal], response, "manual_journal_id")
        return response

    # -- reference data -----------------------------------------------------

    def get_accounts(self) -> Response:
        return self._get("Accounts", None, "GET/accounts")

    def get_accounts_list(self, load_on_init: bool = True) -> AccountsList:
        """Return an AccountsList that caches the chart of accounts for lookups."""
        return AccountsList(self, load_on_init)

    def get_tracking_categories(self) -> Response:
        return self._get("TrackingCategories", None, "GET/TrackingCategories")

    def get_organisation(self) -> Response:
        return self._get("Organisation", None, "GET/organisation")

    def get_currencies(self) -> Response:
        return self._get("Currencies", None, "GET/currencies")

    def get_tax_rates(self) -> Response:
        return self._get("TaxRates", None, "GET/tax_rates")

    def get_items(self) -> Response:
        return self._get("Items", None, "GET/items")

    # -- payments -----------------------------------------------------------

    def create_payment(self, payment: Payment) -> Response:
        request_xml = render_batch("Payments", [payment.to_xml()])
        response = self._send("PUT", "Payments", request_xml, "PUT/payments")
        if response.success:
            _write_back_ids([payment], response, "payment_id")
        return response

    def get_payments(self, **options: Any) -> Response:
        params = self._list_params(options, {
            "payment_id": "PaymentID",
            "modified_since": "ModifiedAfter",
            "order": "order",
            "where": "where",
        })
        return self._get("Payments", params, "GET/payments")

    def get_payment(self, payment_id: str) -> Response:
        return self._get(f"Payments/{quote(payment_id, safe='')}", {}, "GET/payments")

    # -- payroll ------------------------------------------------------------

    def get_payroll_calendars(self) -> Response:
        return self._get("PayrollCalendars", {}, "GET/payroll_calendars", base_url=self.payroll_url)

    def get_pay_runs(self) -> Response:
        return self._get("PayRuns", {}, "GET/pay_runs", base_url=self.payroll_url)

    # -- reports ------------------------------------------------------------

    def get_report(self, id_or_name: str, **options: Any) -> Response:
        """
        Retrieve a report by name ("BankStatement") or id.

        Options are passed through as query parameters with CamelCase names:
        get_report("BankStatement", bank_account_id="...", from_date=date(2024, 4, 1))
        """
        params = {}
        for option, value in options.items():
            if isinstance(value, (dt.date, dt.datetime)):
                value = value.isoformat()
            params[_report_param_name(option)] = value
        return self._get(f"Reports/{quote(id_or_name, safe='')}", params, "GET/reports")

    def close(self):
        self.client.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
