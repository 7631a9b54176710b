from marshmallow import Schema, fields

from .invoice_schema import InvoiceFormDataSchema


class CustomerFieldSchema(Schema):
    id = fields.Str()
    name = fields.Str()


class CustomerTableSchema(Schema):
    id = fields.Str()
    name = fields.Str()
    email = fields.Str()
    image_url = fields.Str()
    total_invoices = fields.Int()
    total_pending = fields.Str()
    total_paid = fields.Str()


class CustomerQueryArgsSchema(Schema):
    query = fields.Str(load_default="")


class InvoiceEditFormSchema(Schema):
    invoice = fields.Nested(InvoiceFormDataSchema)
    customers = fields.List(fields.Nested(CustomerFieldSchema))
