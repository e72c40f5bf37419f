# visitor_registry/services/registration.py
from __future__ import annotations

import json
import logging
from typing import Callable, Optional, Union

import sqlalchemy as sa

from visitor_registry.errors import ErrorKind, RegistrationResult
from visitor_registry.utils.validation import is_blank, is_valid_email

from .visitor_store import VisitorStore

SUCCESS_MESSAGE = "Registration successful! Thank you for visiting."
INVALID_JSON_MESSAGE = "Invalid JSON data received."
INVALID_FORMAT_MESSAGE = "Invalid data format received."
REQUIRED_FIELDS_MESSAGE = "First name, surname, and email are required fields."
INVALID_EMAIL_MESSAGE = "Please provide a valid email address."
CONFIG_ERROR_MESSAGE = "Database configuration error. Please contact support."
STORE_ERROR_MESSAGE = "Database error occurred. Please try again later."
UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred. Please try again."


class InvalidPayload(ValueError):
    pass


class VisitorRequest:
    """Registration form data as posted by the frontend."""

    FIELDS = ("firstname", "surname", "company", "email")

    def __init__(self, firstname: str = "", surname: str = "", company: str = "", email: str = ""):
        self.firstname = firstname or ""
        self.surname = surname or ""
        self.company = company or ""
        self.email = email or ""

    def __repr__(self):
        return f"<VisitorRequest {self.firstname!r} {self.surname!r} {self.email!r}>"

    @classmethod
    def from_json(cls, body: Union[bytes, str, None]) -> Optional["VisitorRequest"]:
        """
        Build a request from a raw JSON body.

        Keys are matched to fields case-insensitively and unknown keys are
        ignored. Returns None when the body is the JSON literal ``null``.
        Raises InvalidPayload when the body is not a JSON object of strings.
        """
        if isinstance(body, bytes):
            try:
                body = body.decode("utf-8-sig")
            except UnicodeDecodeError as e:
                raise InvalidPayload(f"body is not valid UTF-8: {e}") from e
        try:
            data = json.loads(body or "")
        except ValueError as e:
            raise InvalidPayload(str(e)) from e

        if data is None:
            return None
        if not isinstance(data, dict):
            raise InvalidPayload(f"expected a JSON object, got {type(data).__name__}")

        values = {}
        for key, value in data.items():
            name = key.lower()
            if name not in cls.FIELDS:
                continue
            if value is not None and not isinstance(value, str):
                raise InvalidPayload(f"{key} must be a string")
            values[name] = value
        return cls(**values)


def validate_visitor(visitor: VisitorRequest) -> Optional[str]:
    """Return the message of the first failed check, or None when the visitor is valid."""
    if is_blank(visitor.firstname) or is_blank(visitor.surname) or is_blank(visitor.email):
        return REQUIRED_FIELDS_MESSAGE
    if not is_valid_email(visitor.email):
        return INVALID_EMAIL_MESSAGE
    return None


class VisitorRegistrationHandler:
    """
    Validates a visitor registration and stores it.

    `connection_string` is read once at start-up; when it is empty every
    request fails with a configuration error. `engine_factory` lets the
    application hand over an engine it already manages; without one an
    engine is created from the connection string on first use and reused.
    """

    def __init__(
        self,
        connection_string: Optional[str],
        logger: Optional[logging.Logger] = None,
        engine_factory: Optional[Callable[[], sa.engine.Engine]] = None,
    ):
        self.connection_string = (connection_string or "").strip()
        self.logger = logger or logging.getLogger(__name__)
        self._engine_factory = engine_factory
        self._engine: Optional[sa.engine.Engine] = None

    @property
    def configured(self) -> bool:
        return bool(self.connection_string)

    @property
    def store(self) -> VisitorStore:
        if self._engine_factory is not None:
            return VisitorStore(self._engine_factory())
        if self._engine is None:
            self._engine = sa.create_engine(self.connection_string)
        return VisitorStore(self._engine)

    def handle(self, body: Union[bytes, str, None]) -> RegistrationResult:
        self.logger.info("Processing a visitor registration request.")
        try:
            return self._register(body)
        except Exception as e:
            self.logger.exception("Unexpected error: %s", e)
            return RegistrationResult.failure(ErrorKind.UNEXPECTED_ERROR, UNEXPECTED_ERROR_MESSAGE)

    def _register(self, body) -> RegistrationResult:
        if not self.configured:
            self.logger.error("POSTGRES_CONN_STRING is not configured.")
            return RegistrationResult.failure(ErrorKind.CONFIG_ERROR, CONFIG_ERROR_MESSAGE)

        self.logger.debug("Received registration data (%d bytes)", len(body or ""))
        try:
            visitor = VisitorRequest.from_json(body)
        except InvalidPayload as e:
            self.logger.warning("JSON parsing error: %s", e)
            return RegistrationResult.failure(ErrorKind.BAD_REQUEST, INVALID_FORMAT_MESSAGE)

        if visitor is None:
            self.logger.warning("Registration body was empty")
            return RegistrationResult.failure(ErrorKind.BAD_REQUEST, INVALID_JSON_MESSAGE)

        problem = validate_visitor(visitor)
        if problem:
            self.logger.warning("Registration rejected: %s", problem)
            return RegistrationResult.failure(ErrorKind.BAD_REQUEST, problem)

        try:
            self.store.save(visitor)
        except sa.exc.SQLAlchemyError as e:
            self.logger.exception("Database error: %s", e)
            return RegistrationResult.failure(ErrorKind.STORE_ERROR, STORE_ERROR_MESSAGE)

        self.logger.info(
            "Successfully registered visitor: %s %s (%s) from %s",
            visitor.firstname,
            visitor.surname,
            visitor.email,
            visitor.company or "No Company",
        )
        return RegistrationResult.success(SUCCESS_MESSAGE)
