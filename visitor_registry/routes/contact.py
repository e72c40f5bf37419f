# visitor_registry/routes/contact.py
from flask import Blueprint, current_app, request

bp = Blueprint("contact", __name__)


@bp.post("/contact")
def register_visitor():
    """Public visitor registration from the frontend form."""
    handler = current_app.extensions["visitor_registration"]
    result = handler.handle(request.get_data())
    return result.message, result.status, {"Content-Type": "text/plain; charset=utf-8"}
