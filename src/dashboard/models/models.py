from src.dashboard import db
from datetime import date
from uuid import uuid4


def _new_id():
    return str(uuid4())


class User(db.Model):
    __tablename__ = 'users'
    id = db.Column(db.String(36), primary_key=True, default=_new_id)
    name = db.Column(db.String(255), nullable=False)
    email = db.Column(db.Text, nullable=False, unique=True)
    password = db.Column(db.Text, nullable=False)

    def __repr__(self):
        return f'<User {self.email}>'

class Customer(db.Model):
    __tablename__ = 'customers'
    id = db.Column(db.String(36), primary_key=True, default=_new_id)
    name = db.Column(db.String(255), nullable=False)
    email = db.Column(db.String(255), nullable=False)
    image_url = db.Column(db.String(255), nullable=False)

    def __repr__(self):
        return f'<Customer {self.name}>'

class Invoice(db.Model):
    __tablename__ = 'invoices'
    id = db.Column(db.String(36), primary_key=True, default=_new_id)
    customer_id = db.Column(db.String(36), nullable=False, index=True)
    amount = db.Column(db.Integer, nullable=False)  # minor units
    status = db.Column(db.String(255), nullable=False)
    date = db.Column(db.Date, nullable=False, default=date.today)

    def __repr__(self):
        return f'<Invoice {self.id}>'

class Revenue(db.Model):
    __tablename__ = 'revenue'
    month = db.Column(db.String(4), primary_key=True)
    revenue = db.Column(db.Integer, nullable=False)

    def __repr__(self):
        return f'<Revenue {self.month}>'
