"""Mapping of store failures onto domain errors."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from planning.domain.errors import PersistenceError
from planning.stores.interfaces import StoreError

logger = logging.getLogger(__name__)


@contextmanager
def store_failures_as_persistence_error(action: str) -> Iterator[None]:
    """Re-raise any StoreError as a single user-safe PersistenceError.

    The original cause is logged, never exposed.
    """
    try:
        yield
    except StoreError:
        logger.exception("Store failure while trying to %s", action)
        raise PersistenceError() from None
