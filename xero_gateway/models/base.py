"""
Shared base for Xero domain objects.

Every model is a pydantic BaseModel decoded from one XML element by its
`from_xml` classmethod. The gateway that produced it is kept as a private
attribute so follow-up calls (lazy loading) go to the same tenant; it takes
no part in equality, repr or serialization.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, ClassVar, Optional
from lxml import etree
from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from ..exceptions import DecodeError, NotLoadedError
from ..parsers.base import attr, child_elements, text


@dataclass(frozen=True)
class HydrationOptions:
    """
    Which nested collections a response is known to include.

    Xero omits line items, journal lines and group members on list
    endpoints, so the dispatcher decides these from the request signature
    rather than from the element content.
    """

    line_items_downloaded: bool = True
    journal_lines_downloaded: bool = True
    contacts_downloaded: bool = True

    @classmethod
    def uniform(cls, downloaded: bool) -> "HydrationOptions":
        return cls(downloaded, downloaded, downloaded)


FULLY_HYDRATED = HydrationOptions()


class XeroModel(BaseModel):
    """Base class for decoded Xero objects."""

    model_config = ConfigDict(populate_by_name=True)

    # Tag of the element this model decodes; None for value types nested in others
    xml_tag: ClassVar[Optional[str]] = None

    validation_errors: list[str] = Field(default_factory=list)
    status_attribute: Optional[str] = None

    _gateway: Any = PrivateAttr(default=None)

    @property
    def gateway(self) -> Any:
        return self._gateway

    def bind(self, gateway: Any) -> "XeroModel":
        """Attach the gateway used for follow-up calls and return self."""
        self._gateway = gateway
        return self

    def __eq__(self, other: object) -> bool:
        if type(self) is not type(other):
            return NotImplemented
        return self.model_dump() == other.model_dump()

    @classmethod
    def check_tag(cls, element: etree._Element) -> None:
        """Raise DecodeError if `element` is not this model's element."""
        if cls.xml_tag is not None and element.tag != cls.xml_tag:
            raise DecodeError(cls.xml_tag, str(element.tag))

    @classmethod
    def common_fields(cls, element: etree._Element) -> dict:
        """Fields every element may carry in a batch response."""
        return {
            "validation_errors": parse_validation_errors(element),
            "status_attribute": attr(element, "status"),
        }


def parse_validation_errors(element: etree._Element) -> list[str]:
    """Collect <ValidationErrors><ValidationError><Message> texts from an element."""
    messages = []
    for error in child_elements(element.find("ValidationErrors")):
        message = text(error, "Message")
        if message:
            messages.append(message)
    return messages


def decode_children(
    wrapper: etree._Element | None,
    model: type,
    gateway: Any = None,
    options: HydrationOptions | None = None,
) -> list:
    """Decode every child of a wrapper element such as <LineItems> with `model`."""
    return [model.from_xml(child, gateway, options) for child in child_elements(wrapper)]


def nested_from_fetch(response: Any, attribute: str) -> list:
    """
    Take a nested collection off the single object of a follow-up fetch.

    Raises NotLoadedError, leaving the caller's field untouched, when Xero
    answered with errors or with anything other than one fully loaded object.
    """
    item = response.item
    values = getattr(item, attribute, None) if item is not None else None
    if not response.success or values is None:
        detail = "; ".join(str(error) for error in response.errors) or "no single result returned"
        raise NotLoadedError(f"Could not load {attribute}: {detail}")
    return list(values)
