from decimal import ROUND_HALF_UP, Decimal

from marshmallow import EXCLUDE, Schema, ValidationError, fields, pre_load, validate, validates

INVOICE_STATUSES = ["pending", "paid"]

CUSTOMER_REQUIRED = "Please select a customer."
AMOUNT_NOT_POSITIVE = "Please enter an amount greater than $0."
AMOUNT_INVALID = "Please enter a valid amount."
STATUS_INVALID = "Please select an invoice status."

# Largest value the INT amount column holds, in major units
MAX_AMOUNT = Decimal("21474836.47")
AMOUNT_TOO_LARGE = "Please enter an amount no greater than $21,474,836.47."


def to_minor_units(amount):
    """Convert a major-unit amount to whole cents, rounding half up."""
    return int((Decimal(amount) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class InvoiceFormSchema(Schema):
    """Raw invoice form fields, as posted by the create and edit forms.

    Keys are the form field names, so load errors come back keyed the way
    the form renders them (``customerId``, ``amount``, ``status``).
    """

    class Meta:
        unknown = EXCLUDE

    customer_id = fields.Str(
        required=True,
        data_key="customerId",
        error_messages={"required": CUSTOMER_REQUIRED, "null": CUSTOMER_REQUIRED, "invalid": CUSTOMER_REQUIRED},
    )
    amount = fields.Decimal(
        required=True,
        validate=[
            validate.Range(min=0, min_inclusive=False, error=AMOUNT_NOT_POSITIVE),
            validate.Range(max=MAX_AMOUNT, error=AMOUNT_TOO_LARGE),
        ],
        error_messages={
            "required": AMOUNT_NOT_POSITIVE,
            "null": AMOUNT_NOT_POSITIVE,
            "invalid": AMOUNT_INVALID,
            "special": AMOUNT_INVALID,
        },
    )
    status = fields.Str(
        required=True,
        validate=validate.OneOf(INVOICE_STATUSES, error=STATUS_INVALID),
        error_messages={"required": STATUS_INVALID, "null": STATUS_INVALID, "invalid": STATUS_INVALID},
    )

    @validates("amount")
    def validate_whole_cents(self, value, **kwargs):
        # Fractions of a cent round away; what is stored must still be positive
        if to_minor_units(value) < 1:
            raise ValidationError(AMOUNT_NOT_POSITIVE)

    @pre_load
    def drop_blank_fields(self, data, **kwargs):
        # Browsers post untouched inputs as empty strings; treat them as missing
        cleaned = {}
        for key, value in data.items():
            if isinstance(value, str):
                value = value.strip()
                if not value:
                    continue
            if value is None:
                continue
            cleaned[key] = value
        return cleaned


class InvoiceSchema(Schema):
    id = fields.Str(dump_only=True)
    customer_id = fields.Str(required=True)
    amount = fields.Int(required=True)
    status = fields.Str(required=True)
    date = fields.Date(required=True)


class InvoiceFormDataSchema(Schema):
    """An invoice prepared for the edit form, amount in major units."""
    id = fields.Str()
    customer_id = fields.Str()
    amount = fields.Float()
    status = fields.Str()


class InvoiceTableRowSchema(Schema):
    id = fields.Str()
    customer_id = fields.Str()
    name = fields.Str()
    email = fields.Str()
    image_url = fields.Str()
    amount = fields.Int()
    date = fields.Date()
    status = fields.Str()


class InvoiceListArgsSchema(Schema):
    query = fields.Str(load_default="")
    page = fields.Int(load_default=1, validate=validate.Range(min=1))


class InvoicePageSchema(Schema):
    invoices = fields.List(fields.Nested(InvoiceTableRowSchema))
    total_pages = fields.Int()
    current_page = fields.Int()
    query = fields.Str()


class ActionStateSchema(Schema):
    errors = fields.Dict(keys=fields.Str(), values=fields.List(fields.Str()), allow_none=True)
    message = fields.Str(allow_none=True)


class LatestInvoiceSchema(Schema):
    id = fields.Str()
    name = fields.Str()
    email = fields.Str()
    image_url = fields.Str()
    amount = fields.Str()


class CardDataSchema(Schema):
    number_of_invoices = fields.Int()
    number_of_customers = fields.Int()
    total_paid_invoices = fields.Str()
    total_pending_invoices = fields.Str()


class RevenueSchema(Schema):
    month = fields.Str()
    revenue = fields.Int()


class DashboardOverviewSchema(Schema):
    cards = fields.Nested(CardDataSchema)
    revenue = fields.List(fields.Nested(RevenueSchema))
    latest_invoices = fields.List(fields.Nested(LatestInvoiceSchema))
