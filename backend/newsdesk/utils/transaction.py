import logging
from contextlib import contextmanager
from newsdesk.extensions import db

logger = logging.getLogger(__name__)

@contextmanager
def transactional():
    """
    Unit of work around a multi-step write.
    Commits only if the block finishes; any exception rolls everything back.
    """
    try:
        yield db.session
        db.session.commit()
    except Exception:
        db.session.rollback()
        logger.warning("Transaction rolled back", exc_info=True)
        raise
