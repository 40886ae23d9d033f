"""Identifier parsing for client-supplied ids."""

from typing import Union
from uuid import UUID

from app.exceptions.base import NotFoundError


def parse_uuid(
    value: Union[str, UUID, None],
    error_class: type[NotFoundError] = NotFoundError,
) -> UUID:
    """
    Parse a client-supplied identifier into a UUID.

    A value that is not shaped like one of our ids cannot name an existing
    row, so it is reported as not found without querying the database.

    Raises:
        error_class: If the value is empty or not a valid UUID
    """
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value).strip())
    except (TypeError, ValueError, AttributeError):
        raise error_class()

