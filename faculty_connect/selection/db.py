import logging
import time

from django.conf import settings
from django.db import DatabaseError, OperationalError, transaction

from .exceptions import StoreUnavailableError

logger = logging.getLogger(__name__)


def _retry_config():
    config = getattr(settings, 'FACULTY_CONNECT', {})
    return max(1, int(config.get('STORE_RETRY_ATTEMPTS', 5))), float(config.get('STORE_RETRY_BACKOFF', 0.05))


def atomic_with_retry(operation, label):
    """
    Run `operation()` inside transaction.atomic().

    OperationalError (lock timeouts, serialization failures) rolls the
    transaction back and retries with linear backoff. Any other database
    error, or running out of attempts, raises StoreUnavailableError.
    """
    attempts, backoff = _retry_config()
    last_error = None

    for attempt in range(1, attempts + 1):
        try:
            with transaction.atomic():
                return operation()
        except OperationalError as exc:
            last_error = exc
            logger.warning('%s: transaction conflict (attempt %d/%d): %s', label, attempt, attempts, exc)
            if attempt < attempts:
                time.sleep(backoff * attempt)
        except DatabaseError as exc:
            logger.exception('%s: database error', label)
            raise StoreUnavailableError() from exc

    logger.error('%s: giving up after %d attempts', label, attempts)
    raise StoreUnavailableError() from last_error
