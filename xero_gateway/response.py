"""
The response envelope returned by every gateway call.

`result` is one of three shapes:

- Empty(): the response named no entity at all
- One(value): a single object (a plural wrapper holding exactly one child
  collapses to this)
- Many(values): zero or several objects in document order

An empty plural wrapper is Many(()), which is how callers tell "Xero
returned no invoices" apart from "this response was not about invoices".
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Generic, Iterator, Optional, TypeVar, Union

from .models.error import Error

T = TypeVar("T")


@dataclass(frozen=True)
class Empty:
    def __bool__(self) -> bool:
        return False


@dataclass(frozen=True)
class One(Generic[T]):
    value: T


@dataclass(frozen=True)
class Many(Generic[T]):
    values: tuple[T, ...] = ()


Result = Union[Empty, One, Many]


def collapse(values: Optional[list]) -> Result:
    """Build a Result from collected values: None -> Empty, one value -> One, else Many."""
    if values is None:
        return Empty()
    if len(values) == 1:
        return One(values[0])
    return Many(tuple(values))


@dataclass(frozen=True)
class Response:
    """
    A decoded Xero response.

    Attributes:
        response_id: <ID> of the response, if sent
        status: <Status> text (OK on success)
        provider: <ProviderName>
        date_time: <DateTimeUTC>, verbatim
        result: Empty, One or Many
        errors: Error records from <Errors>, in document order
        request_params: Query parameters sent, for diagnostics
        request_xml: Request body sent, for diagnostics
        response_xml: Raw response body
    """

    response_id: Optional[str] = None
    status: Optional[str] = None
    provider: Optional[str] = None
    date_time: Optional[str] = None
    result: Result = field(default_factory=Empty)
    errors: tuple[Error, ...] = ()
    request_params: Optional[dict[str, Any]] = None
    request_xml: Optional[str] = None
    response_xml: Optional[bytes | str] = None

    @property
    def success(self) -> bool:
        return not self.errors

    @property
    def item(self) -> Any:
        """The single result, or None when the result is Empty or Many."""
        if isinstance(self.result, One):
            return self.result.value
        return None

    @property
    def items(self) -> list:
        """The result as a list, whatever its shape."""
        if isinstance(self.result, One):
            return [self.result.value]
        if isinstance(self.result, Many):
            return list(self.result.values)
        return []

    def __iter__(self) -> Iterator[Any]:
        return iter(self.items)

    def __repr__(self) -> str:
        shape = type(self.result).__name__
        return (
            f"Response(status={self.status!r}, result={shape}[{len(self.items)}], "
            f"errors={len(self.errors)})"
        )
