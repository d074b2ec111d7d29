from datetime import datetime
from utiltrack.extensions import db
from utiltrack.models.enums import PTOStatus

class PTORequest(db.Model):
    """Paid time off request covering an inclusive date range"""
    id = db.Column(db.Integer, primary_key=True)
    consultant_id = db.Column(db.Integer, db.ForeignKey('consultant.id'), nullable=False)
    start_date = db.Column(db.Date, nullable=False)
    end_date = db.Column(db.Date, nullable=False)
    all_day = db.Column(db.Boolean, default=True, nullable=False)
    start_time = db.Column(db.String(5), nullable=True)  # HH:MM, only when not all day
    end_time = db.Column(db.String(5), nullable=True)
    status = db.Column(db.Enum(PTOStatus), default=PTOStatus.PENDING, nullable=False)
    approved_by_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    approved_by = db.relationship('User')

    def to_dict(self):
        return {
            'id': self.id,
            'consultant_id': self.consultant_id,
            'consultant_name': self.consultant.name if self.consultant else None,
            'start_date': self.start_date.isoformat(),
            'end_date': self.end_date.isoformat(),
            'all_day': self.all_day,
            'start_time': self.start_time,
            'end_time': self.end_time,
            'status': self.status.value,
            'approved_by_id': self.approved_by_id,
            'approved_by': self.approved_by.email if self.approved_by else None,
            'created_at': self.created_at.isoformat() if self.created_at else None
        }
