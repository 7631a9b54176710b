"""
Form actions for invoices: validate, persist, revalidate the cached listing.

The store and cache are passed in by the caller, so the actions hold no
connection state of their own. Create and update report problems through the
returned ActionState instead of raising; on success the state carries the
path the client should be redirected to.
"""
import logging
from dataclasses import dataclass
from datetime import date
from typing import Dict, List, Optional

from src.dashboard.utils.exceptions import PersistenceError
from .validation import to_minor_units, validate_invoice_form

logger = logging.getLogger(__name__)

INVOICES_PATH = "/dashboard/invoices"


@dataclass
class ActionState:
    errors: Optional[Dict[str, List[str]]] = None
    message: Optional[str] = None
    redirect_to: Optional[str] = None

    @property
    def succeeded(self):
        return self.redirect_to is not None

    def to_dict(self):
        return {"errors": self.errors, "message": self.message}


def create_invoice(form, *, store, cache, today=None) -> ActionState:
    validated = validate_invoice_form(form)
    if not validated.success:
        return ActionState(
            errors=validated.errors,
            message="Missing Fields. Failed to Create Invoice.",
        )

    data = validated.data
    amount_in_cents = to_minor_units(data["amount"])
    created_on = today or date.today()

    try:
        store.insert(data["customer_id"], amount_in_cents, data["status"], created_on)
    except PersistenceError:
        return ActionState(message="Database Error: Failed to Create Invoice.")

    logger.info(f"Created invoice for customer {data['customer_id']} ({amount_in_cents} cents)")
    cache.revalidate_path(INVOICES_PATH)
    return ActionState(redirect_to=INVOICES_PATH)


def update_invoice(invoice_id, form, *, store, cache) -> ActionState:
    validated = validate_invoice_form(form)
    if not validated.success:
        return ActionState(
            errors=validated.errors,
            message="Missing Fields. Failed to Update Invoice.",
        )

    data = validated.data
    amount_in_cents = to_minor_units(data["amount"])

    try:
        matched = store.update(invoice_id, data["customer_id"], amount_in_cents, data["status"])
    except PersistenceError:
        return ActionState(message="Database Error: Failed to Update Invoice.")

    if not matched:
        logger.warning(f"Update matched no invoice with id {invoice_id}")
    else:
        logger.info(f"Updated invoice {invoice_id}")
    cache.revalidate_path(INVOICES_PATH)
    return ActionState(redirect_to=INVOICES_PATH)


def delete_invoice(invoice_id, *, store, cache):
    """Delete an invoice. Unknown ids are a no-op; database errors propagate."""
    store.delete(invoice_id)
    logger.info(f"Deleted invoice {invoice_id}")
    cache.revalidate_path(INVOICES_PATH)
