from .registration import VisitorRegistrationHandler, VisitorRequest, validate_visitor
from .visitor_store import VisitorStore

__all__ = ["VisitorRegistrationHandler", "VisitorRequest", "VisitorStore", "validate_visitor"]
