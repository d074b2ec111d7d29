from datetime import datetime
from utiltrack.extensions import db
from utiltrack.models.enums import ProjectType, ProjectStatus

class Project(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    client = db.Column(db.String(100), nullable=False)
    project_name = db.Column(db.String(100), nullable=False)
    timecode = db.Column(db.String(50), unique=True, nullable=False)
    type = db.Column(db.Enum(ProjectType), nullable=False)
    status = db.Column(db.Enum(ProjectStatus), default=ProjectStatus.ACTIVE, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    allocations = db.relationship('Allocation', backref='project', lazy=True)

    @property
    def label(self):
        return f'{self.project_name} ({self.timecode})'

    def to_dict(self):
        return {
            'id': self.id,
            'client': self.client,
            'project_name': self.project_name,
            'timecode': self.timecode,
            'type': self.type.value,
            'status': self.status.value,
            'created_at': self.created_at.isoformat() if self.created_at else None
        }
