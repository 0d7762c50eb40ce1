"""
Reference data: accounts, tax rates, items, currencies, tracking categories
and the organisation itself.

These are read-only from the gateway's point of view and carry no nested
collections that need hydration.
"""
from __future__ import annotations
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional
from lxml import etree
from pydantic import Field

from ..parsers.base import (
    child_elements,
    parse_bool,
    parse_decimal,
    parse_int,
    parse_xero_date,
    parse_xero_datetime,
    text,
)
from .base import HydrationOptions, XeroModel


class Account(XeroModel):
    """An account in the chart of accounts."""

    account_id: Optional[str] = None
    code: Optional[str] = None
    name: Optional[str] = None
    type: Optional[str] = None
    status: Optional[str] = None
    tax_type: Optional[str] = None
    description: Optional[str] = None
    account_class: Optional[str] = None
    system_account: Optional[str] = None
    enable_payments_to_account: Optional[bool] = None
    show_in_expense_claims: Optional[bool] = None
    currency_code: Optional[str] = None
    bank_account_number: Optional[str] = None
    bank_account_type: Optional[str] = None
    reporting_code: Optional[str] = None
    updated_at: Optional[datetime] = None

    xml_tag = "Account"

    @classmethod
    def from_xml(cls, element: etree._Element, gateway: Any = None, options: HydrationOptions | None = None) -> "Account":
        # BankTransaction nests the same shape as <BankAccount>
        if element.tag != "BankAccount":
            cls.check_tag(element)
        return cls(
            account_id=text(element, "AccountID"),
            code=text(element, "Code"),
            name=text(element, "Name"),
            type=text(element, "Type"),
            status=text(element, "Status"),
            tax_type=text(element, "TaxType"),
            description=text(element, "Description"),
            account_class=text(element, "Class"),
            system_account=text(element, "SystemAccount"),
            enable_payments_to_account=parse_bool(text(element, "EnablePaymentsToAccount")),
            show_in_expense_claims=parse_bool(text(element, "ShowInExpenseClaims")),
            currency_code=text(element, "CurrencyCode"),
            bank_account_number=text(element, "BankAccountNumber"),
            bank_account_type=text(element, "BankAccountType"),
            reporting_code=text(element, "ReportingCode"),
            updated_at=parse_xero_datetime(text(element, "UpdatedDateUTC")),
        ).bind(gateway)


class TaxRate(XeroModel):
    name: Optional[str] = None
    tax_type: Optional[str] = None
    status: Optional[str] = None
    report_tax_type: Optional[str] = None
    can_apply_to_assets: Optional[bool] = None
    can_apply_to_equity: Optional[bool] = None
    can_apply_to_expenses: Optional[bool] = None
    can_apply_to_liabilities: Optional[bool] = None
    can_apply_to_revenue: Optional[bool] = None
    display_tax_rate: Optional[Decimal] = None
    effective_rate: Optional[Decimal] = None

    xml_tag = "TaxRate"

    @classmethod
    def from_xml(cls, element: etree._Element, gateway: Any = None, options: HydrationOptions | None = None) -> "TaxRate":
        cls.check_tag(element)
        return cls(
            name=text(element, "Name"),
            tax_type=text(element, "TaxType"),
            status=text(element, "Status"),
            report_tax_type=text(element, "ReportTaxType"),
            can_apply_to_assets=parse_bool(text(element, "CanApplyToAssets")),
            can_apply_to_equity=parse_bool(text(element, "CanApplyToEquity")),
            can_apply_to_expenses=parse_bool(text(element, "CanApplyToExpenses")),
            can_apply_to_liabilities=parse_bool(text(element, "CanApplyToLiabilities")),
            can_apply_to_revenue=parse_bool(text(element, "CanApplyToRevenue")),
            display_tax_rate=parse_decimal(text(element, "DisplayTaxRate")),
            effective_rate=parse_decimal(text(element, "EffectiveRate")),
        ).bind(gateway)


class Item(XeroModel):
    """A product or service with its default purchase and sales details."""

    item_id: Optional[str] = None
    code: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    purchase_description: Optional[str] = None
    is_sold: Optional[bool] = None
    is_purchased: Optional[bool] = None
    is_tracked_as_inventory: Optional[bool] = None
    inventory_asset_account_code: Optional[str] = None
    quantity_on_hand: Optional[Decimal] = None
    purchase_unit_price: Optional[Decimal] = None
    purchase_account_code: Optional[str] = None
    purchase_tax_type: Optional[str] = None
    sales_unit_price: Optional[Decimal] = None
    sales_account_code: Optional[str] = None
    sales_tax_type: Optional[str] = None
    updated_at: Optional[datetime] = None

    xml_tag = "Item"

    @classmethod
    def from_xml(cls, element: etree._Element, gateway: Any = None, options: HydrationOptions | None = None) -> "Item":
        cls.check_tag(element)
        return cls(
            item_id=text(element, "ItemID"),
            code=text(element, "Code"),
            name=text(element, "Name"),
            description=text(element, "Description"),
            purchase_description=text(element, "PurchaseDescription"),
            is_sold=parse_bool(text(element, "IsSold")),
            is_purchased=parse_bool(text(element, "IsPurchased")),
            is_tracked_as_inventory=parse_bool(text(element, "IsTrackedAsInventory")),
            inventory_asset_account_code=text(element, "InventoryAssetAccountCode"),
            quantity_on_hand=parse_decimal(text(element, "QuantityOnHand")),
            purchase_unit_price=parse_decimal(text(element, "PurchaseDetails/UnitPrice")),
            purchase_account_code=text(element, "PurchaseDetails/AccountCode"),
            purchase_tax_type=text(element, "PurchaseDetails/TaxType"),
            sales_unit_price=parse_decimal(text(element, "SalesDetails/UnitPrice")),
            sales_account_code=text(element, "SalesDetails/AccountCode"),
            sales_tax_type=text(element, "SalesDetails/TaxType"),
            updated_at=parse_xero_datetime(text(element, "UpdatedDateUTC")),
        ).bind(gateway)


class Currency(XeroModel):
    code: Optional[str] = None
    description: Optional[str] = None

    xml_tag = "Currency"

    @classmethod
    def from_xml(cls, element: etree._Element, gateway: Any = None, options: HydrationOptions | None = None) -> "Currency":
        cls.check_tag(element)
        return cls(code=text(element, "Code"), description=text(element, "Description")).bind(gateway)


class TrackingCategory(XeroModel):
    """
    A tracking category and its options.

    From the TrackingCategories endpoint `options` lists every option name.
    On a line item the same element carries the single option chosen.
    """

    tracking_category_id: Optional[str] = None
    name: Optional[str] = None
    status: Optional[str] = None
    options: list[str] = Field(default_factory=list)

    xml_tag = "TrackingCategory"

    @property
    def option(self) -> Optional[str]:
        return self.options[0] if self.options else None

    @classmethod
    def from_xml(
        cls, element: etree._Element, gateway: Any = None, options: HydrationOptions | None = None
    ) -> "TrackingCategory":
        cls.check_tag(element)
        names = []
        for option in child_elements(element.find("Options")):
            name = text(option, "Name")
            if name:
                names.append(name)
        # Line item form: <Option>North</Option>
        line_option = text(element, "Option")
        if line_option:
            names.append(line_option)
        return cls(
            tracking_category_id=text(element, "TrackingCategoryID"),
            name=text(element, "Name"),
            status=text(element, "Status"),
            options=names,
        ).bind(gateway)


class Organisation(XeroModel):
    """The organisation (tenant) the access token is connected to."""

    organisation_id: Optional[str] = None
    api_key: Optional[str] = None
    name: Optional[str] = None
    legal_name: Optional[str] = None
    short_code: Optional[str] = None
    pays_tax: Optional[bool] = None
    version: Optional[str] = None
    organisation_type: Optional[str] = None
    organisation_status: Optional[str] = None
    base_currency: Optional[str] = None
    country_code: Optional[str] = None
    is_demo_company: Optional[bool] = None
    registration_number: Optional[str] = None
    tax_number: Optional[str] = None
    financial_year_end_day: Optional[int] = None
    financial_year_end_month: Optional[int] = None
    sales_tax_basis: Optional[str] = None
    sales_tax_period: Optional[str] = None
    period_lock_date: Optional[date] = None
    end_of_year_lock_date: Optional[date] = None
    timezone: Optional[str] = None
    line_of_business: Optional[str] = None
    created_at: Optional[datetime] = None

    xml_tag = "Organisation"

    @classmethod
    def from_xml(
        cls, element: etree._Element, gateway: Any = None, options: HydrationOptions | None = None
    ) -> "Organisation":
        cls.check_tag(element)
        return cls(
            organisation_id=text(element, "OrganisationID"),
            api_key=text(element, "APIKey"),
            name=text(element, "Name"),
            legal_name=text(element, "LegalName"),
            short_code=text(element, "ShortCode"),
            pays_tax=parse_bool(text(element, "PaysTax")),
            version=text(element, "Version"),
            organisation_type=text(element, "OrganisationType"),
            organisation_status=text(element, "OrganisationStatus"),
            base_currency=text(element, "BaseCurrency"),
            country_code=text(element, "CountryCode"),
            is_demo_company=parse_bool(text(element, "IsDemoCompany")),
            registration_number=text(element, "RegistrationNumber"),
            tax_number=text(element, "TaxNumber"),
            financial_year_end_day=parse_int(text(element, "FinancialYearEndDay")),
            financial_year_end_month=parse_int(text(element, "FinancialYearEndMonth")),
            sales_tax_basis=text(element, "SalesTaxBasis"),
            sales_tax_period=text(element, "SalesTaxPeriod"),
            period_lock_date=parse_xero_date(text(element, "PeriodLockDate")),
            end_of_year_lock_date=parse_xero_date(text(element, "EndOfYearLockDate")),
            timezone=text(element, "Timezone"),
            line_of_business=text(element, "LineOfBusiness"),
            created_at=parse_xero_datetime(text(element, "CreatedDateUTC")),
        ).bind(gateway)
