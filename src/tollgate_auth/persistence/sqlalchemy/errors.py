"""Translation of driver-level failures into StoreUnavailableError."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.exc import DisconnectionError, InterfaceError, OperationalError

from tollgate_auth.exceptions import StoreUnavailableError

logger = logging.getLogger(__name__)


@contextmanager
def store_errors(operation: str) -> Iterator[None]:
    """Raise StoreUnavailableError for connection-level database failures."""
    try:
        yield
    except (OperationalError, InterfaceError, DisconnectionError) as e:
        logger.error("Database unavailable during %s: %s", operation, e)
        raise StoreUnavailableError(cause=e) from e
