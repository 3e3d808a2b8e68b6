"""
Transaction boundary shared by the business layer

Ledgers only stage changes on the session they were given; the operation that
owns a business transaction wraps its steps in atomic() so that every effect
lands together or none does.
"""

from contextlib import contextmanager

from app.buisness.core.errors import AssetVerseError, InvalidInputError
from app.logger import get_logger

logger = get_logger("assetverse.domain.core.unit_of_work")


@contextmanager
def atomic(session, operation):
    """
    Commit the session when the block succeeds, roll it back otherwise.

    Args:
        session: SQLAlchemy session the block writes through
        operation (str): Name used in log lines

    Raises:
        Whatever the block raised, after rollback
    """
    try:
        yield session
        session.commit()
    except AssetVerseError as e:
        session.rollback()
        logger.warning(f"{operation} rejected: {e.code}: {e.message}")
        raise
    except Exception:
        session.rollback()
        logger.error(f"{operation} failed, transaction rolled back", exc_info=True)
        raise


def parse_identifier(value, label):
    """
    Coerce an identifier received from a caller to an int.

    Raises:
        InvalidInputError: missing or malformed identifier
    """
    if value is None or value == '':
        raise InvalidInputError(f"{label} is required")
    if isinstance(value, bool):
        raise InvalidInputError(f"Invalid {label}")
    if isinstance(value, int):
        identifier = value
    else:
        text = str(value).strip()
        if not text.isdigit():
            raise InvalidInputError(f"Invalid {label}")
        identifier = int(text)
    if identifier <= 0:
        raise InvalidInputError(f"Invalid {label}")
    return identifier


def parse_text(value, label, required=True):
    """
    Strip a text field received from a caller.

    Returns:
        str, or None for an absent optional field

    Raises:
        InvalidInputError: required field missing, or a value that is not a string
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        if required:
            raise InvalidInputError(f"{label} is required")
        return None
    if not isinstance(value, str):
        raise InvalidInputError(f"{label} must be text")
    return value.strip()
