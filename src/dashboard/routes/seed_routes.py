from flask import current_app, jsonify
from flask.views import MethodView
from flask_smorest import Blueprint

from ..services.seed_service import seed_database

blp = Blueprint(
    "Seed", "seed", url_prefix="", description="Database seeding"
)

@blp.route("/seed")
class Seed(MethodView):
    @blp.doc(summary="Seed Database", description="Creates the tables and inserts placeholder users, customers, invoices and revenue. Rows that already exist are skipped.")
    def get(self):
        """Seed the database with placeholder data"""
        try:
            seed_database()
        except Exception as e:
            current_app.logger.error(f"Seeding error: {e}", exc_info=True)
            return jsonify({"error": str(e)}), 500
        return jsonify({"message": "Database seeded successfully"})
