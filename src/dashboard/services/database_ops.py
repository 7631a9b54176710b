import logging
import math

from sqlalchemy import String, asc, case, cast, delete, desc, func, insert, or_, update
from sqlalchemy.exc import SQLAlchemyError

from flask import current_app

from src.dashboard import db
from src.dashboard.models.models import Customer, Invoice, Revenue
from src.dashboard.utils.exceptions import PersistenceError

logger = logging.getLogger(__name__)


class InvoiceStore:
    """Parameterized writes against the invoices table.

    Every call runs one statement and commits it; a failed statement is
    rolled back and surfaces as PersistenceError.
    """

    def __init__(self, session):
        self.session = session

    def insert(self, customer_id, amount, status, date):
        stmt = insert(Invoice).values(
            customer_id=customer_id,
            amount=amount,
            status=status,
            date=date,
        )
        self._execute(stmt, "insert")

    def update(self, invoice_id, customer_id, amount, status):
        stmt = (
            update(Invoice)
            .where(Invoice.id == invoice_id)
            .values(customer_id=customer_id, amount=amount, status=status)
        )
        return self._execute(stmt, "update").rowcount

    def delete(self, invoice_id):
        stmt = delete(Invoice).where(Invoice.id == invoice_id)
        return self._execute(stmt, "delete").rowcount

    def _execute(self, stmt, operation):
        try:
            result = self.session.execute(stmt)
            self.session.commit()
            return result
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Invoice {operation} failed: {e}", exc_info=True)
            raise PersistenceError(f"Failed to {operation} invoice") from e



def format_currency(amount):
    """Format an amount in minor units, e.g. 123456 -> '$1,234.56'."""
    return f"${amount / 100:,.2f}"


def _read(description, query):
    try:
        return query()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Failed to fetch {description}: {e}", exc_info=True)
        raise PersistenceError(f"Failed to fetch {description}") from e


MONTHS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]


def fetch_revenue():
    rows = _read("revenue data", lambda: Revenue.query.all())
    # Unknown month labels sort last
    rows = sorted(rows, key=lambda row: MONTHS.index(row.month) if row.month in MONTHS else len(MONTHS))
    return [{"month": row.month, "revenue": row.revenue} for row in rows]



def fetch_latest_invoices(limit=5):
    rows = _read("the latest invoices", lambda: (
        db.session.query(Invoice, Customer)
        .join(Customer, Invoice.customer_id == Customer.id)
        .order_by(desc(Invoice.date))
        .limit(limit)
        .all()
    ))
    return [
        {
            "id": invoice.id,
            "name": customer.name,
            "email": customer.email,
            "image_url": customer.image_url,
            "amount": format_currency(invoice.amount),
        }
        for invoice, customer in rows
    ]


def fetch_card_data():
    def query():
        invoice_count = db.session.query(func.count(Invoice.id)).scalar()
        customer_count = db.session.query(func.count(Customer.id)).scalar()
        paid, pending = db.session.query(
            func.sum(case((Invoice.status == "paid", Invoice.amount), else_=0)),
            func.sum(case((Invoice.status == "pending", Invoice.amount), else_=0)),
        ).one()
        return invoice_count, customer_count, paid, pending

    invoice_count, customer_count, paid, pending = _read("card data", query)
    return {
        "number_of_invoices": invoice_count or 0,
        "number_of_customers": customer_count or 0,
        "total_paid_invoices": format_currency(paid or 0),
        "total_pending_invoices": format_currency(pending or 0),
    }


def _filtered_invoices_query(query):
    pattern = f"%{query}%"
    return (
        db.session.query(Invoice, Customer)
        .join(Customer, Invoice.customer_id == Customer.id)
        .filter(or_(
            Customer.name.ilike(pattern),
            Customer.email.ilike(pattern),
            cast(Invoice.amount, String).ilike(pattern),
            cast(Invoice.date, String).ilike(pattern),
            Invoice.status.ilike(pattern),
        ))
    )


def _per_page(per_page):
    return per_page or current_app.config["ITEMS_PER_PAGE"]


def fetch_filtered_invoices(query, current_page, per_page=None):
    per_page = _per_page(per_page)
    offset = (current_page - 1) * per_page
    rows = _read("invoices", lambda: (
        _filtered_invoices_query(query)
        .order_by(desc(Invoice.date))
        .limit(per_page)
        .offset(offset)
        .all()
    ))
    return [
        {
            "id": invoice.id,
            "customer_id": invoice.customer_id,
            "name": customer.name,
            "email": customer.email,
            "image_url": customer.image_url,
            "amount": invoice.amount,
            "date": invoice.date,
            "status": invoice.status,
        }
        for invoice, customer in rows
    ]


def fetch_invoices_pages(query, per_page=None):
    per_page = _per_page(per_page)
    count = _read("total number of invoices", lambda: _filtered_invoices_query(query).count())
    return math.ceil(count / per_page)


def fetch_invoice_by_id(invoice_id):
    invoice = _read("invoice", lambda: db.session.get(Invoice, invoice_id))
    if invoice is None:
        return None
    return {
        "id": invoice.id,
        "customer_id": invoice.customer_id,
        # Convert amount from cents to dollars
        "amount": invoice.amount / 100,
        "status": invoice.status,
    }


def fetch_customers():
    rows = _read("all customers", lambda: Customer.query.order_by(asc(Customer.name)).all())
    return [{"id": customer.id, "name": customer.name} for customer in rows]


def fetch_filtered_customers(query):
    pattern = f"%{query}%"
    rows = _read("customer table", lambda: (
        db.session.query(
            Customer,
            func.count(Invoice.id),
            func.sum(case((Invoice.status == "pending", Invoice.amount), else_=0)),
            func.sum(case((Invoice.status == "paid", Invoice.amount), else_=0)),
        )
        .outerjoin(Invoice, Invoice.customer_id == Customer.id)
        .filter(or_(Customer.name.ilike(pattern), Customer.email.ilike(pattern)))
        .group_by(Customer.id, Customer.name, Customer.email, Customer.image_url)
        .order_by(asc(Customer.name))
        .all()
    ))
    return [
        {
            "id": customer.id,
            "name": customer.name,
            "email": customer.email,
            "image_url": customer.image_url,
            "total_invoices": total_invoices,
            "total_pending": format_currency(total_pending or 0),
            "total_paid": format_currency(total_paid or 0),
        }
        for customer, total_invoices, total_pending, total_paid in rows
    ]
