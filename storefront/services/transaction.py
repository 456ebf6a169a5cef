# storefront/services/transaction.py
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.domain.errors import StorefrontError, Unexpected
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@contextmanager
def atomic(db: Session, operation: str):
    """Wszystko albo nic: commit na koncu bloku, rollback przy kazdym bledzie.

    Bledy domenowe leca dalej bez zmian, bledy bazy jako Unexpected.
    Brak retry - ponowienie zdjecia ze stanu mogloby zdjac towar dwa razy.
    """
    try:
        yield
        db.commit()
    except StorefrontError:
        db.rollback()
        raise
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception(f"Blad bazy podczas {operation}")
        raise Unexpected(f"Store failure during {operation}") from e
    except BaseException:
        # takze przerwanie/anulowanie zadania
        db.rollback()
        raise
