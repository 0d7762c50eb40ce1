"""Tests for the element codecs and lazy loading of nested collections."""
from datetime import date, datetime
from decimal import Decimal
from pathlib import Path
from unittest.mock import Mock

import pytest
from lxml import etree

from xero_gateway.dispatcher import parse_response
from xero_gateway.exceptions import DecodeError, NotLoadedError
from xero_gateway.models import (
    Account,
    BankTransaction,
    Contact,
    ContactGroup,
    CreditNote,
    Error,
    HydrationOptions,
    Invoice,
    Item,
    ManualJournal,
    Payment,
    PayRun,
    Report,
    TrackingCategory,
)
from xero_gateway.response import One, Response

FIX = Path(__file__).parent / "fixtures"

def read(p): return (FIX / p).read_bytes()

def element(xml): return etree.fromstring(xml)

NOT_DOWNLOADED = HydrationOptions.uniform(False)


def test_invoice_fields():
    invoice = parse_response(read("invoice_single.xml"), None, "GET/Invoice").item
    assert invoice.invoice_id == "243216c5-369e-4056-ac67-05388f86dc81"
    assert invoice.invoice_type == "ACCREC"
    assert invoice.invoice_status == "AUTHORISED"
    assert invoice.date == date(2024, 4, 1)
    assert invoice.total == Decimal("632.50")
    assert invoice.amount_paid == Decimal("100.00")
    assert invoice.contact.name == "Bayside Club"
    assert invoice.contact.address.city == "Ridge Heights"
    assert invoice.payments[0].amount == Decimal("100.00")
    assert invoice.payments[0].date == date(2024, 4, 10)


def test_line_item_tracking_option():
    invoice = parse_response(read("invoice_single.xml"), None, "GET/Invoice").item
    first, second = invoice.line_items
    assert first.quantity == Decimal("1.0000")
    assert first.tax_type == "OUTPUT2"
    assert first.tracking[0].name == "Region"
    assert first.tracking[0].option == "North"
    assert second.tracking == []
    assert second.line_amount == Decimal("50.00")


def test_updated_at_parses_fractional_seconds():
    invoice = parse_response(read("invoices_list.xml"), None, "GET/Invoices").items[0]
    assert invoice.updated_at == datetime(2024, 4, 1, 9, 30, 0, 123000)


def test_codec_rejects_foreign_element():
    with pytest.raises(DecodeError):
        Invoice.from_xml(element("<CreditNote><CreditNoteID>x</CreditNoteID></CreditNote>"))
    with pytest.raises(DecodeError):
        Contact.from_xml(element("<Invoice />"))


def test_error_codec_never_raises():
    error = Error.from_xml(element("<Anything><Unexpected>1</Unexpected></Anything>"))
    assert error.type is None
    assert error.description is None
    assert str(error) == "Error:"


def test_account_accepts_bank_account_element():
    account = Account.from_xml(element("<BankAccount><AccountID>a1</AccountID><Code>090</Code></BankAccount>"))
    assert account.account_id == "a1"
    assert account.code == "090"


def test_bank_transaction_with_bank_account():
    xml = """
    <BankTransaction>
      <Type>SPEND</Type>
      <BankAccount><AccountID>a1</AccountID><Code>090</Code><Name>Business Bank</Name></BankAccount>
      <Date>2024-04-03T00:00:00</Date>
      <IsReconciled>true</IsReconciled>
      <Total>4.50</Total>
      <BankTransactionID>bt1</BankTransactionID>
    </BankTransaction>
    """
    txn = BankTransaction.from_xml(element(xml), None, NOT_DOWNLOADED)
    assert txn.bank_account.name == "Business Bank"
    assert txn.is_reconciled is True
    assert txn.total == Decimal("4.50")
    assert txn.line_items is None


def test_item_purchase_and_sales_details():
    xml = """
    <Item>
      <ItemID>i1</ItemID>
      <Code>LOCKER</Code>
      <PurchaseDetails><UnitPrice>10.00</UnitPrice><AccountCode>300</AccountCode></PurchaseDetails>
      <SalesDetails><UnitPrice>25.00</UnitPrice><AccountCode>260</AccountCode><TaxType>OUTPUT2</TaxType></SalesDetails>
    </Item>
    """
    item = Item.from_xml(element(xml))
    assert item.purchase_unit_price == Decimal("10.00")
    assert item.purchase_account_code == "300"
    assert item.sales_unit_price == Decimal("25.00")
    assert item.sales_tax_type == "OUTPUT2"


def test_tracking_category_options():
    xml = """
    <TrackingCategory>
      <TrackingCategoryID>tc1</TrackingCategoryID>
      <Name>Region</Name>
      <Status>ACTIVE</Status>
      <Options>
        <Option><Name>North</Name></Option>
        <Option><Name>South</Name></Option>
      </Options>
    </TrackingCategory>
    """
    category = TrackingCategory.from_xml(element(xml))
    assert category.options == ["North", "South"]
    assert category.option == "North"


def test_pay_run_super_field():
    xml = """
    <PayRun>
      <PayRunID>pr1</PayRunID>
      <PayRunPeriodStartDate>2024-04-01T00:00:00</PayRunPeriodStartDate>
      <PayRunStatus>POSTED</PayRunStatus>
      <Wages>5000.00</Wages>
      <Super>500.00</Super>
      <NetPay>3900.00</NetPay>
    </PayRun>
    """
    pay_run = PayRun.from_xml(element(xml))
    assert pay_run.status == "POSTED"
    assert pay_run.superannuation == Decimal("500.00")
    assert pay_run.period_start_date == date(2024, 4, 1)


def test_report_rows():
    report = parse_response(read("bank_statement_report.xml"), None, "GET/reports").item
    assert isinstance(report, Report)
    assert report.report_date == date(2024, 4, 15)
    assert report.report_titles == ["Bank Statement", "Business Bank Account"]
    assert report.column_names == ["Date", "Description", "Amount"]

    rows = list(report.iter_rows())
    assert [row.values[1] for row in rows] == ["Deposit", "Coffee"]
    assert rows[0].cells[2].attributes == {"account": "13918178-849a-4823-9a31-57b7eac713d7"}

    summary = next(report.iter_rows("SummaryRow"))
    assert summary.values == ["Total", None, "245.50"]


def test_validation_errors_and_status_attribute():
    xml = """
    <Invoice status="ERROR">
      <InvoiceNumber>INV-0009</InvoiceNumber>
      <ValidationErrors>
        <ValidationError><Message>Account code '999' is not a valid code.</Message></ValidationError>
      </ValidationErrors>
    </Invoice>
    """
    invoice = Invoice.from_xml(element(xml))
    assert invoice.status_attribute == "ERROR"
    assert invoice.validation_errors == ["Account code '999' is not a valid code."]


def test_gateway_excluded_from_equality():
    xml = "<Contact><ContactID>c1</ContactID><Name>Alpha</Name></Contact>"
    one = Contact.from_xml(element(xml), Mock())
    two = Contact.from_xml(element(xml), Mock())
    three = Contact.from_xml(element(xml))
    assert one == two == three
    assert "gateway" not in one.model_dump()
    assert "_gateway" not in repr(one)


def test_models_of_different_types_are_not_equal():
    assert Contact(name="Alpha") != ContactGroup(name="Alpha")


# Lazy loading

def test_load_line_items_fetches_through_gateway():
    full = parse_response(read("invoice_single.xml"), None, "GET/Invoice").item
    gateway = Mock()
    gateway.get_invoice.return_value = Response(result=One(full))

    listed = parse_response(read("invoices_list.xml"), None, "GET/Invoices", gateway).items[0]
    assert not listed.line_items_downloaded

    line_items = listed.load_line_items()
    gateway.get_invoice.assert_called_once_with("243216c5-369e-4056-ac67-05388f86dc81")
    assert [li.description for li in line_items] == ["Annual membership", "Locker hire"]
    assert listed.line_items_downloaded

    # Second call uses what is already loaded
    listed.load_line_items()
    assert gateway.get_invoice.call_count == 1


def test_load_line_items_without_gateway_raises():
    invoice = Invoice.from_xml(element("<Invoice><InvoiceID>i1</InvoiceID></Invoice>"), None, NOT_DOWNLOADED)
    with pytest.raises(NotLoadedError):
        invoice.load_line_items()


def test_downloaded_line_items_need_no_gateway():
    invoice = Invoice.from_xml(element("<Invoice><InvoiceID>i1</InvoiceID></Invoice>"))
    assert invoice.load_line_items() == []


def test_credit_note_loads_through_get_credit_note():
    full = CreditNote.from_xml(element(
        "<CreditNote><CreditNoteID>cn1</CreditNoteID>"
        "<LineItems><LineItem><Description>Refund</Description></LineItem></LineItems></CreditNote>"
    ))
    gateway = Mock()
    gateway.get_credit_note.return_value = Response(result=One(full))
    listed = CreditNote.from_xml(element("<CreditNote><CreditNoteID>cn1</CreditNoteID></CreditNote>"), gateway, NOT_DOWNLOADED)
    assert [li.description for li in listed.load_line_items()] == ["Refund"]
    gateway.get_credit_note.assert_called_once_with("cn1")


def test_bank_transaction_loads_through_get_bank_transaction():
    full = BankTransaction.from_xml(element(
        "<BankTransaction><BankTransactionID>bt1</BankTransactionID><LineItems /></BankTransaction>"
    ))
    gateway = Mock()
    gateway.get_bank_transaction.return_value = Response(result=One(full))
    listed = BankTransaction.from_xml(
        element("<BankTransaction><BankTransactionID>bt1</BankTransactionID></BankTransaction>"),
        gateway,
        NOT_DOWNLOADED,
    )
    # Fetched and confirmed to have no lines
    assert listed.load_line_items() == []
    assert listed.line_items_downloaded
    gateway.get_bank_transaction.assert_called_once_with("bt1")


def test_bank_transaction_fetch_with_no_result_stays_not_loaded():
    gateway = Mock()
    gateway.get_bank_transaction.return_value = Response()
    listed = BankTransaction.from_xml(
        element("<BankTransaction><BankTransactionID>bt1</BankTransactionID></BankTransaction>"),
        gateway,
        NOT_DOWNLOADED,
    )
    with pytest.raises(NotLoadedError):
        listed.load_line_items()
    assert listed.line_items is None


def test_failed_fetch_leaves_line_items_not_loaded():
    """An errors-only answer must not turn into "loaded, no line items"."""
    gateway = Mock()
    gateway.get_invoice.return_value = parse_response(read("errors.xml"), None, "GET/Invoice", gateway)
    invoice = Invoice.from_xml(element("<Invoice><InvoiceID>i1</InvoiceID></Invoice>"), gateway, NOT_DOWNLOADED)

    with pytest.raises(NotLoadedError) as exc_info:
        invoice.load_line_items()
    assert "ValidationException" in str(exc_info.value)
    assert invoice.line_items is None
    assert not invoice.line_items_downloaded


def test_fetch_returning_a_collection_leaves_contacts_not_loaded():
    gateway = Mock()
    gateway.get_contact_group_by_id.return_value = parse_response(
        b"<Response><ContactGroups>"
        b"<ContactGroup><ContactGroupID>g1</ContactGroupID></ContactGroup>"
        b"<ContactGroup><ContactGroupID>g2</ContactGroupID></ContactGroup>"
        b"</ContactGroups></Response>",
        None,
        "GET/contactgroup",
    )
    group = ContactGroup.from_xml(
        element("<ContactGroup><ContactGroupID>g1</ContactGroupID></ContactGroup>"), gateway, NOT_DOWNLOADED
    )
    with pytest.raises(NotLoadedError):
        group.load_contacts()
    assert group.contacts is None


def test_failed_fetch_leaves_journal_lines_not_loaded():
    gateway = Mock()
    gateway.get_manual_journal.return_value = parse_response(read("errors.xml"))
    journal = ManualJournal.from_xml(
        element("<ManualJournal><ManualJournalID>mj1</ManualJournalID></ManualJournal>"), gateway, NOT_DOWNLOADED
    )
    with pytest.raises(NotLoadedError):
        journal.load_journal_lines()
    assert journal.journal_lines is None


def test_manual_journal_loads_journal_lines():
    full = parse_response(read("manual_journal.xml"), None, "GET/ManualJournal").item
    gateway = Mock()
    gateway.get_manual_journal.return_value = Response(result=One(full))
    listed = parse_response(read("manual_journal.xml"), None, "GET/ManualJournals", gateway).item
    lines = listed.load_journal_lines()
    assert [line.account_code for line in lines] == ["477", "814"]
    gateway.get_manual_journal.assert_called_once_with("0b159335-606b-4a41-a6a4-c5e1e2b4b7e1")


def test_contact_group_loads_contacts():
    full = parse_response(read("contact_groups.xml"), None, "GET/contactgroup").item
    gateway = Mock()
    gateway.get_contact_group_by_id.return_value = Response(result=One(full))
    listed = parse_response(read("contact_groups.xml"), None, "GET/contactgroups", gateway).item
    assert listed.contacts is None
    assert [c.name for c in listed.load_contacts()] == ["Joe Bloggs"]
    gateway.get_contact_group_by_id.assert_called_once_with("97bbd0e6-ab4d-4117-9304-d90dd4779199")


def test_payment_flattens_invoice_and_account():
    xml = """
    <Payment>
      <PaymentID>p1</PaymentID>
      <Invoice><InvoiceID>i1</InvoiceID><InvoiceNumber>INV-0001</InvoiceNumber></Invoice>
      <Account><AccountID>a1</AccountID><Code>090</Code></Account>
      <Date>2024-04-10T00:00:00</Date>
      <Amount>100.00</Amount>
      <IsReconciled>false</IsReconciled>
    </Payment>
    """
    payment = Payment.from_xml(element(xml))
    assert payment.invoice_number == "INV-0001"
    assert payment.account_code == "090"
    assert payment.is_reconciled is False
