from datetime import datetime
from utiltrack.extensions import db
from utiltrack.models.enums import UserRole

class User(db.Model):
    """Application account, referenced as allocation creator and PTO approver"""
    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(120), unique=True, nullable=False)
    role = db.Column(db.Enum(UserRole), default=UserRole.EMPLOYEE, nullable=False)
    consultant_id = db.Column(db.Integer, db.ForeignKey('consultant.id'), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    consultant = db.relationship('Consultant', backref=db.backref('user', uselist=False))
