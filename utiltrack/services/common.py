import logging

from sqlalchemy.exc import SQLAlchemyError

from utiltrack.errors import NotFoundError, UtilizationError
from utiltrack.extensions import db

logger = logging.getLogger(__name__)


def get_or_404(model, object_id, label):
    obj = db.session.get(model, object_id)
    if obj is None:
        raise NotFoundError(f'{label} not found')
    return obj


def commit(action):
    """Commit the session; roll back and raise a 500 error when it fails"""
    try:
        db.session.commit()
    except SQLAlchemyError as exc:
        db.session.rollback()
        logger.exception("Failed to %s", action)
        raise UtilizationError(f'Failed to {action}', status_code=500) from exc
