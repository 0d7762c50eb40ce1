"""
Xero Gateway - client library for the Xero accounting API.

Talks to Xero's XML API with an OAuth2 access token and decodes every
response into typed objects (contacts, invoices, credit notes, bank
transactions, manual journals, payments, accounts, reports, ...).

Key Features:
- One dispatch table turning <Response> documents into a Response envelope
- Single results never wrapped in a one-element list
- Nested line items / journal lines / group members marked as not loaded
  when the endpoint omits them, with lazy loading on demand
- Identifier write-back after create and batch operations
- Retry with exponential backoff on rate limiting and outages

Usage:
    from xero_gateway import Gateway

    gateway = Gateway.from_token(access_token, tenant_id)
    response = gateway.get_invoices(where='Status=="AUTHORISED"')
    for invoice in response.items:
        print(invoice.invoice_number, invoice.total)

    # Diagnostics
    python -m xero_gateway Invoices --signature GET/Invoices
"""

__version__ = "1.0.0"

from .config import GatewayConfig
from .client import XeroClient
from .dispatcher import parse_response
from .gateway import Gateway
from .response import Empty, Many, One, Response

__all__ = [
    "GatewayConfig",
    "XeroClient",
    "Gateway",
    "parse_response",
    "Response",
    "Empty",
    "One",
    "Many",
    "__version__",
]
