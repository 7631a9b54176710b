from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from marshmallow import ValidationError

from ..schemas.invoice_schema import InvoiceFormSchema, to_minor_units  # noqa: F401

invoice_form_schema = InvoiceFormSchema()


@dataclass
class ValidationResult:
    """Outcome of validating an invoice form.

    Exactly one of ``data`` (on success) or ``errors`` (on failure) is set.
    ``errors`` maps the form field name to its messages.
    """
    success: bool
    data: Optional[Dict[str, Any]] = None
    errors: Dict[str, List[str]] = field(default_factory=dict)

    @classmethod
    def ok(cls, data):
        return cls(success=True, data=data)

    @classmethod
    def failed(cls, errors):
        return cls(success=False, errors=errors)


def validate_invoice_form(form: Mapping[str, Any]) -> ValidationResult:
    """Validate the customerId, amount and status fields of an invoice form."""
    # MultiDict.items() yields the first value of each key
    raw = dict(form.items())
    try:
        data = invoice_form_schema.load(raw)
    except ValidationError as err:
        return ValidationResult.failed(_field_errors(err.messages))
    return ValidationResult.ok(data)


def _field_errors(messages) -> Dict[str, List[str]]:
    errors = {}
    for field_name, field_messages in messages.items():
        if isinstance(field_messages, list):
            errors[field_name] = [str(message) for message in field_messages]
        else:
            errors[field_name] = [str(field_messages)]
    return errors

