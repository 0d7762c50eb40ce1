"""
Response dispatcher.

Turns the raw XML body of a Xero response into a `Response`. Every direct
child of <Response> is looked up in DISPATCH_TABLE, which maps the tag to
one of four handler kinds:

- ScalarField: copy the element text onto an envelope attribute
- SingularEntity: decode a standalone entity (<Invoice>) as the result
- PluralEntity: decode each child of a wrapper (<Invoices>) into the result
- ErrorList: decode <Errors> into Error records

Repeated elements accumulate in document order: two standalone entities
or two wrappers give a collection, two <Errors> blocks give all their errors.
Tags missing from the table are ignored so new elements added by Xero do
not break older clients.

Nested collections (line items, journal lines, group members) are only
present when a single document was requested, so whether they count as
downloaded is decided from the request signature: a response to the list
endpoint of that entity kind never has them, any other response does.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional
from lxml import etree
from loguru import logger

from .exceptions import UnparseableResponse
from .models import (
    Account,
    BankTransaction,
    Contact,
    ContactGroup,
    CreditNote,
    Currency,
    Error,
    HydrationOptions,
    Invoice,
    Item,
    ManualJournal,
    Organisation,
    Payment,
    PayRun,
    PayrollCalendar,
    Report,
    TaxRate,
    TrackingCategory,
)
from .parsers.base import child_elements, parse_document
from .response import Response, collapse

ROOT_TAG = "Response"

# Signatures of the list endpoints that omit nested collections
LIST_CONTACT_GROUPS = "GET/contactgroups"
LIST_INVOICES = "GET/Invoices"
LIST_CREDIT_NOTES = "GET/CreditNotes"
LIST_BANK_TRANSACTIONS = "GET/BankTransactions"
LIST_MANUAL_JOURNALS = "GET/ManualJournals"


@dataclass
class _Collected:
    """Values gathered while walking one response, before the envelope is built."""

    scalars: dict[str, Optional[str]] = field(default_factory=dict)
    values: Optional[list] = None
    errors: list[Error] = field(default_factory=list)


@dataclass(frozen=True)
class ScalarField:
    attribute: str

    def apply(self, element: etree._Element, collected: _Collected, request_signature: Optional[str], gateway: Any) -> None:
        collected.scalars[self.attribute] = element.text


@dataclass(frozen=True)
class SingularEntity:
    model: type
    list_signature: Optional[str] = None

    def hydration(self, request_signature: Optional[str]) -> HydrationOptions:
        return HydrationOptions.uniform(self.list_signature is None or request_signature != self.list_signature)

    def apply(self, element: etree._Element, collected: _Collected, request_signature: Optional[str], gateway: Any) -> None:
        if collected.values is None:
            collected.values = []
        collected.values.append(self.model.from_xml(element, gateway, self.hydration(request_signature)))


@dataclass(frozen=True)
class PluralEntity(SingularEntity):
    # Organisations is plural on the wire but only ever holds the connected tenant
    first_only: bool = False

    def apply(self, element: etree._Element, collected: _Collected, request_signature: Optional[str], gateway: Any) -> None:
        options = self.hydration(request_signature)
        if collected.values is None:
            collected.values = []
        for child in child_elements(element):
            collected.values.append(self.model.from_xml(child, gateway, options))
            if self.first_only:
                break


@dataclass(frozen=True)
class ErrorList:
    def apply(self, element: etree._Element, collected: _Collected, request_signature: Optional[str], gateway: Any) -> None:
        collected.errors.extend(Error.from_xml(child) for child in child_elements(element))


DISPATCH_TABLE: Mapping[str, Any] = MappingProxyType({
    # Envelope metadata
    "ID": ScalarField("response_id"),
    "Status": ScalarField("status"),
    "ProviderName": ScalarField("provider"),
    "DateTimeUTC": ScalarField("date_time"),
    # Standalone entities
    "Contact": SingularEntity(Contact),
    "Invoice": SingularEntity(Invoice, LIST_INVOICES),
    "CreditNote": SingularEntity(CreditNote, LIST_CREDIT_NOTES),
    "BankTransaction": SingularEntity(BankTransaction, LIST_BANK_TRANSACTIONS),
    "ManualJournal": SingularEntity(ManualJournal, LIST_MANUAL_JOURNALS),
    "Payment": SingularEntity(Payment),
    # Wrapped collections
    "Contacts": PluralEntity(Contact),
    "ContactGroups": PluralEntity(ContactGroup, LIST_CONTACT_GROUPS),
    "Invoices": PluralEntity(Invoice, LIST_INVOICES),
    "CreditNotes": PluralEntity(CreditNote, LIST_CREDIT_NOTES),
    "BankTransactions": PluralEntity(BankTransaction, LIST_BANK_TRANSACTIONS),
    "ManualJournals": PluralEntity(ManualJournal, LIST_MANUAL_JOURNALS),
    "Payments": PluralEntity(Payment),
    "Accounts": PluralEntity(Account),
    "TaxRates": PluralEntity(TaxRate),
    "Items": PluralEntity(Item),
    "Currencies": PluralEntity(Currency),
    "Organisations": PluralEntity(Organisation, first_only=True),
    "TrackingCategories": PluralEntity(TrackingCategory),
    "PayrollCalendars": PluralEntity(PayrollCalendar),
    "PayRuns": PluralEntity(PayRun),
    "Reports": PluralEntity(Report),
    # Remote-reported errors
    "Errors": ErrorList(),
})


def parse_response(
    raw_response: bytes | str,
    request: Optional[dict[str, Any]] = None,
    request_signature: Optional[str] = None,
    gateway: Any = None,
) -> Response:
    """
    Decode a raw Xero response body.

    Args:
        raw_response: Response body as received
        request: Echo of what was sent: {"request_params": ...} or {"request_xml": ...}
        request_signature: Operation that produced the response, e.g. "GET/Invoices"
        gateway: Back-reference stored on decoded objects for follow-up calls

    Returns:
        A new Response

    Raises:
        UnparseableResponse: If the body is not XML or its root is not <Response>
        DecodeError: If a wrapper holds an element its codec cannot decode
    """
    request = request or {}
    try:
        root = parse_document(raw_response)
    except etree.XMLSyntaxError as e:
        raise UnparseableResponse(None, f"invalid XML ({e})") from e
    except UnicodeDecodeError as e:
        raise UnparseableResponse(None, f"body is not valid UTF-8 ({e})") from e

    if root.tag != ROOT_TAG:
        raise UnparseableResponse(str(root.tag))

    collected = _Collected()
    for element in child_elements(root):
        handler = DISPATCH_TABLE.get(element.tag)
        if handler is None:
            logger.debug(f"Ignoring unknown response element <{element.tag}>")
            continue
        handler.apply(element, collected, request_signature, gateway)

    response = Response(
        response_id=collected.scalars.get("response_id"),
        status=collected.scalars.get("status"),
        provider=collected.scalars.get("provider"),
        date_time=collected.scalars.get("date_time"),
        result=collapse(collected.values),
        errors=tuple(collected.errors),
        request_params=request.get("request_params"),
        request_xml=request.get("request_xml"),
        response_xml=raw_response,
    )
    logger.debug(
        f"Parsed {request_signature or 'response'}: status={response.status}, "
        f"{len(response.items)} item(s), {len(response.errors)} error(s)"
    )
    return response
