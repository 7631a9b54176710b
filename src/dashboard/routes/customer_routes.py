from flask import current_app
from flask.views import MethodView
from flask_smorest import Blueprint, abort
from ..services.auth_service import login_required
from ..services.database_ops import fetch_filtered_customers
from ..schemas.customer_schema import CustomerQueryArgsSchema, CustomerTableSchema
from ..utils.exceptions import PersistenceError

blp = Blueprint(
    "Customers", "customers", url_prefix="/dashboard", description="Operations on customers"
)

@blp.route("/customers")
class CustomerList(MethodView):
    decorators = [login_required]

    @blp.doc(summary="List Customers", description="Lists customers whose name or email matches the query, with invoice totals.")
    @blp.arguments(CustomerQueryArgsSchema, location="query")
    @blp.response(200, CustomerTableSchema(many=True))
    def get(self, args):
        """List customers with invoice totals"""
        try:
            return fetch_filtered_customers(args["query"])
        except PersistenceError as e:
            current_app.logger.error(f"Listing customers failed: {e}")
            abort(500, message=e.message)
