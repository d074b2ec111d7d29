"""Allocation ledger keyed by (consultant, project, week_start, entry_type).

Writers never insert allocations directly; they go through
:func:`upsert_allocation` or :func:`increment_or_create`, which normalize the
week and fall back to an update when an insert loses a race on the unique
constraint. None of these functions commit: the caller owns the transaction.
"""
import logging
from datetime import datetime

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import joinedload

from utiltrack.errors import NotFoundError
from utiltrack.extensions import db
from utiltrack.models import Allocation, User
from utiltrack.utils.dates import week_start

logger = logging.getLogger(__name__)


def _key(consultant_id, project_id, week, entry_type):
    return dict(consultant_id=consultant_id, project_id=project_id,
                week_start=week_start(week), entry_type=entry_type)


def find_allocation(consultant_id, project_id, week, entry_type):
    return Allocation.query.filter_by(**_key(consultant_id, project_id, week, entry_type)).first()


def resolve_creator_id(ctx):
    """Actor's user id when that user still exists, else None"""
    if ctx is None or ctx.actor_id is None:
        return None
    user = db.session.get(User, ctx.actor_id)
    return user.id if user else None


def upsert_allocation(consultant_id, project_id, week, entry_type, hours, notes=None, created_by_id=None):
    """Create or overwrite the row for the key.

    Returns ``(allocation, created)``. ``notes=None`` keeps the stored notes.
    """
    key = _key(consultant_id, project_id, week, entry_type)
    allocation = Allocation.query.filter_by(**key).first()
    if allocation is None:
        try:
            with db.session.begin_nested():
                allocation = Allocation(hours=hours, notes=notes, created_by_id=created_by_id, **key)
                db.session.add(allocation)
            return allocation, True
        except IntegrityError:
            logger.info("Concurrent insert on allocation %s, updating instead", key)
            allocation = Allocation.query.filter_by(**key).one()

    allocation.hours = hours
    if notes is not None:
        allocation.notes = notes
    allocation.updated_at = datetime.utcnow()
    db.session.flush()
    return allocation, False


def _increment(key, hours):
    return Allocation.query.filter_by(**key).update(
        {Allocation.hours: Allocation.hours + hours, Allocation.updated_at: datetime.utcnow()},
        synchronize_session=False
    )


def increment_or_create(consultant_id, project_id, week, entry_type, hours, notes=None, created_by_id=None):
    """Add ``hours`` to the row for the key, creating it when missing.

    The increment is a single UPDATE statement so concurrent increments on
    the same key never lose hours. On increment, ``notes`` is appended to the
    stored notes. Returns ``(allocation, created)``.
    """
    key = _key(consultant_id, project_id, week, entry_type)
    if not _increment(key, hours):
        try:
            with db.session.begin_nested():
                allocation = Allocation(hours=hours, notes=notes, created_by_id=created_by_id, **key)
                db.session.add(allocation)
            return allocation, True
        except IntegrityError:
            logger.info("Concurrent insert on allocation %s, incrementing instead", key)
            _increment(key, hours)

    allocation = Allocation.query.filter_by(**key).one()
    db.session.refresh(allocation)
    if notes and notes not in (allocation.notes or ''):
        allocation.notes = f'{allocation.notes}; {notes}' if allocation.notes else notes
        db.session.flush()
    return allocation, False


def delete_allocation(consultant_id, project_id, week, entry_type):
    allocation = find_allocation(consultant_id, project_id, week, entry_type)
    if allocation is None:
        raise NotFoundError('Allocation not found')
    db.session.delete(allocation)
    db.session.flush()


def allocations_for_cell(consultant_id, week):
    return Allocation.query.filter_by(consultant_id=consultant_id, week_start=week_start(week)).all()


def allocations_in_range(start, end):
    """Rows whose week_start falls in [week_start(start), end]"""
    return Allocation.query.options(
        joinedload(Allocation.project), joinedload(Allocation.created_by)
    ).filter(
        Allocation.week_start >= week_start(start),
        Allocation.week_start <= end
    ).all()


def count_allocations(consultant_id=None, project_id=None):
    query = Allocation.query
    if consultant_id is not None:
        query = query.filter(Allocation.consultant_id == consultant_id)
    if project_id is not None:
        query = query.filter(Allocation.project_id == project_id)
    return query.count()
