from typing import Optional

from email_validator import EmailNotValidError, validate_email


def is_blank(value: Optional[str]) -> bool:
    """True for None, empty or whitespace-only strings."""
    return value is None or not value.strip()


def is_valid_email(email: Optional[str]) -> bool:
    """
    Check that `email` is a syntactically valid mailbox address.

    Only the syntax is checked; no DNS lookups are made, so an address on a
    domain that does not exist still passes. Display-name forms such as
    ``Ada <ada@example.com>`` are rejected, as are single-label domains
    such as ``localhost``. Quoted local parts and bracketed IP literals
    are accepted.
    """
    if is_blank(email):
        return False
    try:
        validate_email(
            email,
            check_deliverability=False,
            allow_quoted_local=True,
            allow_domain_literal=True,
        )
    except EmailNotValidError:
        return False
    return True
