"""
Configuration management for the Xero gateway.

Loads settings from environment variables (and a local .env file) with
sensible defaults.
"""
from __future__ import annotations
import os
from dataclasses import dataclass, field
from typing import Optional
from dotenv import load_dotenv

load_dotenv()

DEFAULT_API_URL = "https://api.xero.com/api.xro/2.0"
DEFAULT_PAYROLL_URL = "https://api.xero.com/payroll.xro/1.0"


@dataclass
class GatewayConfig:
    """Configuration settings for the Xero gateway."""

    # Endpoints
    xero_url: str = field(default_factory=lambda: os.getenv("XERO_API_URL", DEFAULT_API_URL))
    payroll_url: str = field(default_factory=lambda: os.getenv("XERO_PAYROLL_URL", DEFAULT_PAYROLL_URL))

    # OAuth2 credentials: an already-issued access token and the tenant it is for
    access_token: Optional[str] = field(default_factory=lambda: os.getenv("XERO_ACCESS_TOKEN"))
    tenant_id: Optional[str] = field(default_factory=lambda: os.getenv("XERO_TENANT_ID"))

    # HTTP settings
    request_timeout: int = field(
        default_factory=lambda: int(os.getenv("XERO_REQUEST_TIMEOUT", "60"))
    )
    retry_attempts: int = field(
        default_factory=lambda: int(os.getenv("XERO_RETRY_ATTEMPTS", "3"))
    )

    # Logging
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    log_file: Optional[str] = field(default_factory=lambda: os.getenv("XERO_LOG_FILE"))

    @classmethod
    def from_env(cls) -> "GatewayConfig":
        """Create config from environment variables."""
        return cls()

    def validate(self) -> list[str]:
        """Validate configuration and return list of errors."""
        errors = []
        if not self.xero_url:
            errors.append("XERO_API_URL is required")
        if not self.access_token:
            errors.append("XERO_ACCESS_TOKEN is required")
        if self.access_token and not self.tenant_id:
            errors.append("XERO_TENANT_ID is required with an OAuth2 access token")
        if self.retry_attempts < 1:
            errors.append("XERO_RETRY_ATTEMPTS must be at least 1")
        return errors
