from datetime import datetime
from utiltrack.extensions import db
from utiltrack.models.enums import GroupType, RoleLevel, OvertimePreference

class Consultant(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    standard_hours = db.Column(db.Float, nullable=False, default=40.0)  # Expected full-time weekly load
    overtime_preference = db.Column(db.Enum(OvertimePreference), default=OvertimePreference.NONE, nullable=False)
    overtime_hours_available = db.Column(db.Float, nullable=False, default=0.0)
    hr_manager = db.Column(db.String(100), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    groups = db.relationship('ConsultantGroup', backref='consultant', lazy=True, cascade='all, delete-orphan')
    roles = db.relationship('ConsultantRole', backref='consultant', lazy=True, cascade='all, delete-orphan')
    allocations = db.relationship('Allocation', backref='consultant', lazy=True)
    pto_requests = db.relationship('PTORequest', backref='consultant', lazy=True, cascade='all, delete-orphan')

    @property
    def group_values(self):
        return sorted(g.group.value for g in self.groups)

    @property
    def role_values(self):
        return sorted(r.level.value for r in self.roles)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'standard_hours': self.standard_hours,
            'overtime_preference': self.overtime_preference.value,
            'overtime_hours_available': self.overtime_hours_available,
            'hr_manager': self.hr_manager,
            'groups': self.group_values,
            'roles': self.role_values,
            'created_at': self.created_at.isoformat() if self.created_at else None
        }


class ConsultantGroup(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    consultant_id = db.Column(db.Integer, db.ForeignKey('consultant.id'), nullable=False)
    group = db.Column(db.Enum(GroupType), nullable=False)

    __table_args__ = (db.UniqueConstraint('consultant_id', 'group', name='unique_consultant_group'),)


class ConsultantRole(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    consultant_id = db.Column(db.Integer, db.ForeignKey('consultant.id'), nullable=False)
    level = db.Column(db.Enum(RoleLevel), nullable=False)

    __table_args__ = (db.UniqueConstraint('consultant_id', 'level', name='unique_consultant_role'),)
