from .contact import bp as contact_bp
from .health import bp as health_bp

__all__ = ["contact_bp", "health_bp"]
