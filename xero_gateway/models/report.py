"""
Reports (balance sheet, bank statement, aged receivables, ...).

Xero reports are a tree of rows: Header rows name the columns, Section rows
group data rows under a title, Row and SummaryRow rows hold cells.
"""
from __future__ import annotations
import datetime as dt
from typing import Any, Iterator, Optional
from lxml import etree
from pydantic import Field

from ..parsers.base import child_elements, parse_xero_date, parse_xero_datetime, text
from .base import HydrationOptions, XeroModel


class ReportCell(XeroModel):
    value: Optional[str] = None
    attributes: dict[str, str] = Field(default_factory=dict)

    xml_tag = "Cell"

    @classmethod
    def from_xml(
        cls, element: etree._Element, gateway: Any = None, options: HydrationOptions | None = None
    ) -> "ReportCell":
        cls.check_tag(element)
        attributes = {}
        for attribute in child_elements(element.find("Attributes")):
            key = text(attribute, "Id")
            if key:
                attributes[key] = text(attribute, "Value") or ""
        return cls(value=text(element, "Value"), attributes=attributes)


class ReportRow(XeroModel):
    row_type: Optional[str] = None
    title: Optional[str] = None
    cells: list[ReportCell] = Field(default_factory=list)
    rows: list["ReportRow"] = Field(default_factory=list)

    xml_tag = "Row"

    @property
    def values(self) -> list[Optional[str]]:
        return [cell.value for cell in self.cells]

    @classmethod
    def from_xml(
        cls, element: etree._Element, gateway: Any = None, options: HydrationOptions | None = None
    ) -> "ReportRow":
        cls.check_tag(element)
        return cls(
            row_type=text(element, "RowType"),
            title=text(element, "Title"),
            cells=[ReportCell.from_xml(cell) for cell in child_elements(element.find("Cells"))],
            rows=[ReportRow.from_xml(row) for row in child_elements(element.find("Rows"))],
        )


class Report(XeroModel):
    report_id: Optional[str] = None
    report_name: Optional[str] = None
    report_type: Optional[str] = None
    report_titles: list[str] = Field(default_factory=list)
    report_date: Optional[dt.date] = None
    updated_at: Optional[dt.datetime] = None
    rows: list[ReportRow] = Field(default_factory=list)

    xml_tag = "Report"

    @property
    def column_names(self) -> list[Optional[str]]:
        """Cell values of the first Header row."""
        for row in self.rows:
            if row.row_type == "Header":
                return row.values
        return []

    def iter_rows(self, row_type: str = "Row") -> Iterator[ReportRow]:
        """Walk the row tree depth-first and yield rows of the given type."""
        stack = list(reversed(self.rows))
        while stack:
            row = stack.pop()
            if row.row_type == row_type:
                yield row
            stack.extend(reversed(row.rows))

    @classmethod
    def from_xml(cls, element: etree._Element, gateway: Any = None, options: HydrationOptions | None = None) -> "Report":
        cls.check_tag(element)
        titles = [title.text.strip() for title in child_elements(element.find("ReportTitles")) if title.text]
        return cls(
            report_id=text(element, "ReportID"),
            report_name=text(element, "ReportName"),
            report_type=text(element, "ReportType"),
            report_titles=titles,
            # Report dates come as "23 February 2024" as often as ISO
            report_date=_parse_report_date(text(element, "ReportDate")),
            updated_at=parse_xero_datetime(text(element, "UpdatedDateUTC")),
            rows=[ReportRow.from_xml(row) for row in child_elements(element.find("Rows"))],
        ).bind(gateway)


def _parse_report_date(s: str | None) -> Optional[dt.date]:
    if not s:
        return None
    try:
        return dt.datetime.strptime(s.strip(), "%d %B %Y").date()
    except ValueError:
        return parse_xero_date(s)
