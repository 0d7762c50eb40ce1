"""
Diagnostic entry point: fetch one endpoint and show how it decodes.

Usage:
    # List invoices (line items not loaded)
    python -m xero_gateway Invoices --signature GET/Invoices

    # One invoice (line items loaded)
    python -m xero_gateway Invoices/INV-0001 --signature GET/Invoice

    # Payroll endpoints
    python -m xero_gateway PayRuns --payroll

    # Decode a saved response instead of calling Xero
    python -m xero_gateway --file response.xml --signature GET/Invoices
"""
from __future__ import annotations
import sys
import argparse
from pathlib import Path
from loguru import logger

from .config import GatewayConfig
from .dispatcher import parse_response
from .exceptions import OAuthError, UnparseableResponse, XeroConnectionError, XeroHTTPError
from .gateway import Gateway


def _summary(obj) -> str:
    fields = obj.model_dump(exclude_none=True)
    scalars = [f"{k}={v}" for k, v in fields.items() if not isinstance(v, (list, dict)) and k != "status_attribute"]
    return f"{type(obj).__name__}(" + ", ".join(scalars[:4]) + ")"


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="python -m xero_gateway",
        description="Fetch a Xero endpoint and print the decoded response",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("endpoint", nargs="?", help="Path under the API base URL, e.g. Invoices")
    parser.add_argument("--signature", help="Request signature used to decide hydration, e.g. GET/Invoices")
    parser.add_argument("--payroll", action="store_true", help="Use the payroll API base URL")
    parser.add_argument("--file", type=Path, help="Decode a saved XML response instead of calling Xero")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose logging")
    parser.add_argument("-q", "--quiet", action="store_true", help="Suppress output except errors")
    args = parser.parse_args(argv)

    config = GatewayConfig.from_env()

    # Configure logging
    logger.remove()
    if args.quiet:
        logger.add(sys.stderr, level="ERROR")
    elif args.verbose:
        logger.add(sys.stderr, level="DEBUG")
    else:
        logger.add(sys.stderr, level=config.log_level)
    if config.log_file:
        logger.add(config.log_file, level="DEBUG", rotation="10 MB")

    if not args.file and not args.endpoint:
        parser.error("an endpoint or --file is required")

    try:
        if args.file:
            response = parse_response(args.file.read_bytes(), None, args.signature)
        else:
            errors = config.validate()
            if errors:
                for err in errors:
                    logger.error(f"Configuration error: {err}")
                return 1
            with Gateway(config) as gateway:
                base = gateway.payroll_url if args.payroll else gateway.xero_url
                raw = gateway.client.get(f"{base}/{args.endpoint.lstrip('/')}")
                response = parse_response(raw, {"request_params": {}}, args.signature, gateway)

        print(f"Status: {response.status or '-'}  Provider: {response.provider or '-'}  "
              f"At: {response.date_time or '-'}")
        print(f"Result: {type(response.result).__name__} with {len(response.items)} item(s)")
        for obj in response.items:
            print(f"  {_summary(obj)}")
        for error in response.errors:
            print(f"  ✗ {error}")
        return 0 if response.success else 2

    except UnparseableResponse as e:
        logger.error(f"Could not decode response: {e}")
        return 1

    except OAuthError as e:
        logger.error(f"Authorization failed: {e}")
        print("\nCheck XERO_ACCESS_TOKEN (tokens expire after 30 minutes) and XERO_TENANT_ID")
        return 1

    except (XeroConnectionError, XeroHTTPError) as e:
        logger.error(f"Xero request failed: {e}")
        return 1

    except KeyboardInterrupt:
        print("\nCancelled by user")
        return 130


if __name__ == "__main__":
    sys.exit(main())
