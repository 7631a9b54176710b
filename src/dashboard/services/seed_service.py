import logging
from datetime import date

import click
from werkzeug.security import generate_password_hash

from src.dashboard import db
from src.dashboard.models.models import Customer, Invoice, Revenue, User
from . import placeholder_data

logger = logging.getLogger(__name__)


def seed_users(users):
    inserted = 0
    for user in users:
        if db.session.get(User, user["id"]) is not None:
            continue
        db.session.add(User(
            id=user["id"],
            name=user["name"],
            email=user["email"],
            password=generate_password_hash(user["password"]),
        ))
        inserted += 1
    return inserted


def seed_customers(customers):
    inserted = 0
    for customer in customers:
        if db.session.get(Customer, customer["id"]) is not None:
            continue
        db.session.add(Customer(**customer))
        inserted += 1
    return inserted


def seed_invoices(invoices):
    # Seed invoices carry no id, so (customer, amount, date) stands in as the key
    inserted = 0
    for invoice in invoices:
        invoice_date = date.fromisoformat(invoice["date"])
        exists = db.session.query(Invoice.id).filter_by(
            customer_id=invoice["customer_id"],
            amount=invoice["amount"],
            date=invoice_date,
        ).first()
        if exists is not None:
            continue
        db.session.add(Invoice(
            customer_id=invoice["customer_id"],
            amount=invoice["amount"],
            status=invoice["status"],
            date=invoice_date,
        ))
        inserted += 1
    return inserted


def seed_revenue(revenue):
    inserted = 0
    for row in revenue:
        if db.session.get(Revenue, row["month"]) is not None:
            continue
        db.session.add(Revenue(**row))
        inserted += 1
    return inserted


def seed_database():
    """Create the tables and load the placeholder rows. Safe to run twice."""
    db.create_all()
    try:
        counts = {
            "users": seed_users(placeholder_data.users),
            "customers": seed_customers(placeholder_data.customers),
            "invoices": seed_invoices(placeholder_data.invoices),
            "revenue": seed_revenue(placeholder_data.revenue),
        }
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    logger.info(f"Seeded database: {counts}")
    return counts


def register_commands(app):
    @app.cli.command("seed-db")
    def seed_db_command():
        """Create tables and insert placeholder data."""
        counts = seed_database()
        click.echo(f"Database seeded successfully: {counts}")
