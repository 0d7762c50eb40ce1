"""
Error records reported by Xero inside a <Response><Errors> block.
"""
from __future__ import annotations
from typing import Any, Optional
from lxml import etree

from ..parsers.base import text
from .base import HydrationOptions, XeroModel


class Error(XeroModel):
    """
    One remote-reported error.

    Decoding never raises: whatever element it is handed, missing children
    simply leave fields empty.
    """

    description: Optional[str] = None
    message: Optional[str] = None
    type: Optional[str] = None
    date_time: Optional[str] = None

    @property
    def code(self) -> Optional[str]:
        return self.type

    @classmethod
    def from_xml(cls, element: etree._Element, gateway: Any = None, options: HydrationOptions | None = None) -> "Error":
        return cls(
            description=text(element, "Description"),
            message=text(element, "Message"),
            type=text(element, "Type"),
            date_time=text(element, "DateTime"),
        )

    def __str__(self) -> str:
        label = self.type or "Error"
        return f"{label}: {self.description or self.message or ''}".rstrip()
