"""
XML request templates for the Xero API.

Templates are Jinja2 files that render the XML bodies sent on PUT/POST.
Autoescaping is on, so free-text fields (names, narrations) are safe to
interpolate.
"""
from pathlib import Path
from jinja2 import Environment, FileSystemLoader, StrictUndefined

from ..parsers.base import format_bool, format_decimal, format_xero_date

# Template directory
TEMPLATE_DIR = Path(__file__).parent

# Available templates
TEMPLATES = {
    "contact": "contact.xml.j2",
    "invoice": "invoice.xml.j2",
    "credit_note": "credit_note.xml.j2",
    "bank_transaction": "bank_transaction.xml.j2",
    "manual_journal": "manual_journal.xml.j2",
    "payment": "payment.xml.j2",
    "batch": "batch.xml.j2",
}

_env = Environment(
    loader=FileSystemLoader(str(TEMPLATE_DIR)),
    autoescape=True,
    trim_blocks=True,
    lstrip_blocks=True,
    undefined=StrictUndefined,
)
_env.filters["xero_date"] = format_xero_date
_env.filters["xero_decimal"] = format_decimal
_env.filters["xero_bool"] = format_bool


def get_template_path(name: str) -> Path:
    """Get path to a template file."""
    if name not in TEMPLATES:
        raise ValueError(f"Unknown template: {name}. Valid: {list(TEMPLATES.keys())}")
    return TEMPLATE_DIR / TEMPLATES[name]


def render(name: str, **context) -> str:
    """Render a request template by its short name."""
    get_template_path(name)
    return _env.get_template(TEMPLATES[name]).render(**context).strip()


def render_batch(wrapper: str, bodies: list[str]) -> str:
    """Wrap already-rendered element bodies in a plural element, e.g. <Invoices>."""
    return render("batch", wrapper=wrapper, bodies=bodies)
