from flask import current_app, jsonify, redirect, request
from flask.views import MethodView
from flask_smorest import Blueprint, abort

from src.dashboard import db
from ..services.auth_service import login_required
from ..services.database_ops import (
    InvoiceStore,
    fetch_customers,
    fetch_filtered_invoices,
    fetch_invoice_by_id,
    fetch_invoices_pages,
)
from ..services.invoice_actions import INVOICES_PATH, create_invoice, delete_invoice, update_invoice
from ..schemas.invoice_schema import InvoiceListArgsSchema, InvoicePageSchema
from ..schemas.customer_schema import InvoiceEditFormSchema
from ..utils.exceptions import PersistenceError

blp = Blueprint(
    "Invoices", "invoices", url_prefix="/dashboard/invoices", description="Create, edit and list invoices"
)


def _store():
    return InvoiceStore(db.session)


def _page_cache():
    return current_app.extensions["page_cache"]


def _state_response(state):
    if state.succeeded:
        return redirect(state.redirect_to, code=303)
    return jsonify(state.to_dict()), 400


@blp.route("")
class InvoiceList(MethodView):
    decorators = [login_required]

    @blp.doc(summary="List Invoices", description="Searches invoices by customer, amount, date or status, six per page, newest first.")
    @blp.arguments(InvoiceListArgsSchema, location="query")
    @blp.response(200, InvoicePageSchema)
    def get(self, args):
        """List invoices matching a search query"""
        query, page = args["query"], args["page"]
        cache = _page_cache()
        cache_key = f"{query}|{page}"
        cached = cache.get(INVOICES_PATH, cache_key)
        if cached is not None:
            return cached

        try:
            result = {
                "invoices": fetch_filtered_invoices(query, page),
                "total_pages": fetch_invoices_pages(query),
                "current_page": page,
                "query": query,
            }
        except PersistenceError as e:
            current_app.logger.error(f"Listing invoices failed: {e}")
            abort(500, message=e.message)

        cache.set(INVOICES_PATH, result, cache_key)
        return result

    @blp.doc(summary="Create Invoice", description="Validates the invoice form and inserts a new invoice dated today. Redirects to the listing on success; returns field errors otherwise.")
    def post(self):
        """Create an invoice from form fields"""
        state = create_invoice(request.form, store=_store(), cache=_page_cache())
        return _state_response(state)


@blp.route("/<string:invoice_id>")
class InvoiceDetail(MethodView):
    decorators = [login_required]

    @blp.doc(summary="Get Invoice For Editing", description="Returns the invoice (amount in dollars) and the customer options for the edit form.")
    @blp.response(200, InvoiceEditFormSchema)
    def get(self, invoice_id):
        """Load an invoice into the edit form"""
        try:
            invoice = fetch_invoice_by_id(invoice_id)
            if invoice is None:
                abort(404, message=f"Invoice with ID {invoice_id} not found.")
            return {"invoice": invoice, "customers": fetch_customers()}
        except PersistenceError as e:
            current_app.logger.error(f"Loading invoice {invoice_id} failed: {e}")
            abort(500, message=e.message)

    @blp.doc(summary="Update Invoice", description="Validates the invoice form and updates customer, amount and status. Redirects to the listing on success.")
    def post(self, invoice_id):
        """Update an invoice from form fields"""
        state = update_invoice(invoice_id, request.form, store=_store(), cache=_page_cache())
        return _state_response(state)

    @blp.doc(summary="Delete Invoice")
    @blp.response(204)
    def delete(self, invoice_id):
        """Delete an invoice"""
        try:
            delete_invoice(invoice_id, store=_store(), cache=_page_cache())
        except PersistenceError as e:
            current_app.logger.error(f"Deleting invoice {invoice_id} failed: {e}")
            abort(500, message="Database Error: Failed to Delete Invoice.")


@blp.route("/<string:invoice_id>/delete")
class InvoiceDeleteForm(MethodView):
    decorators = [login_required]

    @blp.doc(summary="Delete Invoice (form)", description="Form-friendly delete that redirects back to the listing.")
    def post(self, invoice_id):
        """Delete an invoice from a form button"""
        try:
            delete_invoice(invoice_id, store=_store(), cache=_page_cache())
        except PersistenceError as e:
            current_app.logger.error(f"Deleting invoice {invoice_id} failed: {e}")
            abort(500, message="Database Error: Failed to Delete Invoice.")
        return redirect(INVOICES_PATH, code=303)
