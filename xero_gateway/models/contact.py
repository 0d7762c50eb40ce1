"""
Contacts, their addresses and phones, and contact groups.
"""
from __future__ import annotations
from datetime import datetime
from typing import Any, Optional
from lxml import etree
from pydantic import Field

from ..exceptions import NotLoadedError
from ..parsers.base import child_elements, parse_bool, parse_xero_datetime, text
from ..requests import render
from .base import HydrationOptions, XeroModel, FULLY_HYDRATED, decode_children, nested_from_fetch


class Address(XeroModel):
    address_type: Optional[str] = None  # POBOX or STREET
    line_1: Optional[str] = None
    line_2: Optional[str] = None
    line_3: Optional[str] = None
    line_4: Optional[str] = None
    city: Optional[str] = None
    region: Optional[str] = None
    post_code: Optional[str] = None
    country: Optional[str] = None
    attention_to: Optional[str] = None

    xml_tag = "Address"

    @classmethod
    def from_xml(cls, element: etree._Element, gateway: Any = None, options: HydrationOptions | None = None) -> "Address":
        cls.check_tag(element)
        return cls(
            address_type=text(element, "AddressType"),
            line_1=text(element, "AddressLine1"),
            line_2=text(element, "AddressLine2"),
            line_3=text(element, "AddressLine3"),
            line_4=text(element, "AddressLine4"),
            city=text(element, "City"),
            region=text(element, "Region"),
            post_code=text(element, "PostalCode"),
            country=text(element, "Country"),
            attention_to=text(element, "AttentionTo"),
        )


class Phone(XeroModel):
    phone_type: Optional[str] = None  # DEFAULT, DDI, MOBILE or FAX
    number: Optional[str] = None
    area_code: Optional[str] = None
    country_code: Optional[str] = None

    xml_tag = "Phone"

    @classmethod
    def from_xml(cls, element: etree._Element, gateway: Any = None, options: HydrationOptions | None = None) -> "Phone":
        cls.check_tag(element)
        return cls(
            phone_type=text(element, "PhoneType"),
            number=text(element, "PhoneNumber"),
            area_code=text(element, "PhoneAreaCode"),
            country_code=text(element, "PhoneCountryCode"),
        )


class Contact(XeroModel):
    """A customer or supplier."""

    contact_id: Optional[str] = None
    contact_number: Optional[str] = None
    account_number: Optional[str] = None
    contact_status: Optional[str] = None
    name: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    bank_account_details: Optional[str] = None
    tax_number: Optional[str] = None
    accounts_receivable_tax_type: Optional[str] = None
    accounts_payable_tax_type: Optional[str] = None
    default_currency: Optional[str] = None
    is_supplier: Optional[bool] = None
    is_customer: Optional[bool] = None
    updated_at: Optional[datetime] = None
    addresses: list[Address] = Field(default_factory=list)
    phones: list[Phone] = Field(default_factory=list)

    xml_tag = "Contact"

    @property
    def address(self) -> Optional[Address]:
        """The first address, which is the one Xero shows on invoices."""
        return self.addresses[0] if self.addresses else None

    @property
    def phone(self) -> Optional[Phone]:
        return self.phones[0] if self.phones else None

    @classmethod
    def from_xml(cls, element: etree._Element, gateway: Any = None, options: HydrationOptions | None = None) -> "Contact":
        cls.check_tag(element)
        contact = cls(
            contact_id=text(element, "ContactID"),
            contact_number=text(element, "ContactNumber"),
            account_number=text(element, "AccountNumber"),
            contact_status=text(element, "ContactStatus"),
            name=text(element, "Name"),
            first_name=text(element, "FirstName"),
            last_name=text(element, "LastName"),
            email=text(element, "EmailAddress"),
            bank_account_details=text(element, "BankAccountDetails"),
            tax_number=text(element, "TaxNumber"),
            accounts_receivable_tax_type=text(element, "AccountsReceivableTaxType"),
            accounts_payable_tax_type=text(element, "AccountsPayableTaxType"),
            default_currency=text(element, "DefaultCurrency"),
            is_supplier=parse_bool(text(element, "IsSupplier")),
            is_customer=parse_bool(text(element, "IsCustomer")),
            updated_at=parse_xero_datetime(text(element, "UpdatedDateUTC")),
            addresses=decode_children(element.find("Addresses"), Address),
            phones=decode_children(element.find("Phones"), Phone),
            **cls.common_fields(element),
        )
        return contact.bind(gateway)

    def to_xml(self) -> str:
        return render("contact", contact=self)


class ContactGroup(XeroModel):
    """
    A named group of contacts.

    `contacts` is None until the group's members have been downloaded;
    the list endpoint never includes them.
    """

    contact_group_id: Optional[str] = None
    name: Optional[str] = None
    status: Optional[str] = None
    contacts: Optional[list[Contact]] = None

    xml_tag = "ContactGroup"

    @property
    def contacts_downloaded(self) -> bool:
        return self.contacts is not None

    @classmethod
    def from_xml(
        cls, element: etree._Element, gateway: Any = None, options: HydrationOptions | None = None
    ) -> "ContactGroup":
        cls.check_tag(element)
        options = options or FULLY_HYDRATED
        contacts = None
        if options.contacts_downloaded:
            contacts = [Contact.from_xml(child, gateway) for child in child_elements(element.find("Contacts"))]
        group = cls(
            contact_group_id=text(element, "ContactGroupID"),
            name=text(element, "Name"),
            status=text(element, "Status"),
            contacts=contacts,
            **cls.common_fields(element),
        )
        return group.bind(gateway)

    def load_contacts(self) -> list[Contact]:
        """Return the group's contacts, fetching the group through the gateway if needed."""
        if self.contacts is None:
            if self.gateway is None or not self.contact_group_id:
                raise NotLoadedError("Contacts for this group were not downloaded and no gateway is bound")
            response = self.gateway.get_contact_group_by_id(self.contact_group_id)
            self.contacts = nested_from_fetch(response, "contacts")
        return self.contacts
