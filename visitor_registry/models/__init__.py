from visitor_registry.extensions import db

from .visitor import Visitor

__all__ = ["db", "Visitor"]
