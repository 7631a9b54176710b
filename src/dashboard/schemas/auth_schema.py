from marshmallow import EXCLUDE, Schema, fields, validate


class CredentialsSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    email = fields.Email(required=True)
    password = fields.Str(required=True, validate=validate.Length(min=6))


class AuthResponseSchema(Schema):
    message = fields.Str(allow_none=True)
