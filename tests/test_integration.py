"""
Live checks against a Xero demo company.

Deselected by default; run with: pytest -m integration
Needs XERO_ACCESS_TOKEN and XERO_TENANT_ID in the environment or .env.
"""
import pytest

from xero_gateway import Gateway, GatewayConfig, One

pytestmark = pytest.mark.integration


@pytest.fixture(scope="module")
def gateway():
    config = GatewayConfig.from_env()
    if config.validate():
        pytest.skip("Xero credentials not configured")
    with Gateway(config) as gw:
        yield gw


def test_organisation(gateway):
    response = gateway.get_organisation()
    assert response.success
    assert isinstance(response.result, One)
    assert response.item.name


def test_invoices_list_then_load(gateway):
    response = gateway.get_invoices(page=1)
    assert response.success
    invoices = response.items
    if not invoices:
        pytest.skip("No invoices in this organisation")
    invoice = invoices[0]
    assert invoice.line_items is None
    assert isinstance(invoice.load_line_items(), list)


def test_accounts_list(gateway):
    accounts = gateway.get_accounts_list()
    assert len(accounts) > 0
