from flask import current_app
from flask.views import MethodView
from flask_smorest import Blueprint, abort
from ..services.auth_service import login_required
from ..services.database_ops import fetch_card_data, fetch_latest_invoices, fetch_revenue
from ..schemas.invoice_schema import DashboardOverviewSchema
from ..utils.exceptions import PersistenceError

blp = Blueprint(
    "Dashboard", "dashboard", url_prefix="/dashboard", description="Dashboard overview"
)

@blp.route("/")
class DashboardOverview(MethodView):
    decorators = [login_required]

    @blp.doc(summary="Get Dashboard Overview", description="Retrieves the summary cards, monthly revenue and the five most recent invoices.")
    @blp.response(200, DashboardOverviewSchema)
    def get(self):
        """Get dashboard overview data"""
        try:
            return {
                "cards": fetch_card_data(),
                "revenue": fetch_revenue(),
                "latest_invoices": fetch_latest_invoices(),
            }
        except PersistenceError as e:
            current_app.logger.error(f"Dashboard overview failed: {e}")
            abort(500, message=e.message)
