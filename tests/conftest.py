from collections import namedtuple
from datetime import date

import pytest

from utiltrack import create_app
from utiltrack.auth import AuthContext
from utiltrack.extensions import db
from utiltrack.models import (Consultant, ConsultantGroup, ConsultantRole, Project, User, UserRole,
                              GroupType, RoleLevel, ProjectType, ProjectStatus)

# Wednesday; its week starts on Sunday 2026-01-11
TODAY = date(2026, 1, 14)
PAST_WEEK = date(2026, 1, 4)
CURRENT_WEEK = date(2026, 1, 11)
FUTURE_WEEK = date(2026, 1, 18)

Seed = namedtuple('Seed', [
    'admin_id', 'manager_id', 'employee_id',
    'jane_id', 'bob_id', 'carol_id',
    'acme_id', 'training_id', 'legacy_id'
])


@pytest.fixture
def app():
    app = create_app('testing')
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


def _consultant(name, standard_hours, groups, roles):
    return Consultant(
        name=name,
        standard_hours=standard_hours,
        groups=[ConsultantGroup(group=g) for g in groups],
        roles=[ConsultantRole(level=r) for r in roles]
    )


@pytest.fixture
def seed(app):
    jane = _consultant('Jane Smith', 40, [GroupType.TECH, GroupType.AI], [RoleLevel.LVL4])
    bob = _consultant('Bob Jones', 40, [GroupType.UX], [RoleLevel.LVL2])
    carol = _consultant('Carol White', 32, [GroupType.SA], [RoleLevel.LEAD])
    db.session.add_all([jane, bob, carol])
    db.session.flush()

    admin = User(email='admin@example.com', role=UserRole.ADMIN)
    manager = User(email='manager@example.com', role=UserRole.MANAGER)
    employee = User(email='jane@example.com', role=UserRole.EMPLOYEE, consultant_id=jane.id)

    acme = Project(client='Acme Corp', project_name='Website Redesign', timecode='ACME-WEB-001',
                   type=ProjectType.BILLABLE, status=ProjectStatus.ACTIVE)
    training = Project(client='Internal', project_name='Training & Development', timecode='INT-TRN-001',
                       type=ProjectType.ASSIGNED, status=ProjectStatus.ACTIVE)
    legacy = Project(client='OldClient', project_name='Legacy System', timecode='OLD-LEG-001',
                     type=ProjectType.BILLABLE, status=ProjectStatus.INACTIVE)
    db.session.add_all([admin, manager, employee, acme, training, legacy])
    db.session.commit()

    return Seed(admin.id, manager.id, employee.id, jane.id, bob.id, carol.id,
                acme.id, training.id, legacy.id)


@pytest.fixture
def admin_ctx(seed):
    return AuthContext(seed.admin_id, UserRole.ADMIN, None)


@pytest.fixture
def manager_ctx(seed):
    return AuthContext(seed.manager_id, UserRole.MANAGER, None)


@pytest.fixture
def employee_ctx(seed):
    return AuthContext(seed.employee_id, UserRole.EMPLOYEE, seed.jane_id)


def headers_for(ctx):
    headers = {'X-Actor-Id': str(ctx.actor_id), 'X-Actor-Role': ctx.role.value}
    if ctx.consultant_id is not None:
        headers['X-Consultant-Id'] = str(ctx.consultant_id)
    return headers
