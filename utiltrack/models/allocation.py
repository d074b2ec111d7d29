from datetime import datetime
from utiltrack.extensions import db
from utiltrack.models.enums import AllocationEntryType

class Allocation(db.Model):
    """Hours a consultant spends on a project during one week"""
    id = db.Column(db.Integer, primary_key=True)
    consultant_id = db.Column(db.Integer, db.ForeignKey('consultant.id'), nullable=False)
    project_id = db.Column(db.Integer, db.ForeignKey('project.id'), nullable=False)
    week_start = db.Column(db.Date, nullable=False)  # Always the Sunday of the week
    hours = db.Column(db.Float, nullable=False, default=0.0)
    entry_type = db.Column(db.Enum(AllocationEntryType), nullable=False)
    notes = db.Column(db.Text, nullable=True)
    created_by_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    created_by = db.relationship('User')

    # One row per consultant, project, week and entry type
    __table_args__ = (
        db.UniqueConstraint('consultant_id', 'project_id', 'week_start', 'entry_type', name='unique_allocation'),
        db.Index('idx_allocation_week', 'week_start')
    )

    def to_dict(self):
        return {
            'id': self.id,
            'consultant_id': self.consultant_id,
            'project_id': self.project_id,
            'week_start': self.week_start.isoformat(),
            'hours': self.hours,
            'entry_type': self.entry_type.value,
            'notes': self.notes,
            'created_by_id': self.created_by_id,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None
        }
