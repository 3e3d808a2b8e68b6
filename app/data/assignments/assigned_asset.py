from app import db
from datetime import datetime
from app.data.core.user_created_base import UserCreatedBase


class AssignedAsset(UserCreatedBase):
    """Unit of an asset handed to an employee through an approved request"""
    __tablename__ = 'assigned_assets'

    ASSIGNED = 'assigned'
    RETURNED = 'returned'

    asset_id = db.Column(db.Integer, db.ForeignKey('assets.id', ondelete='SET NULL'), nullable=True, index=True)
    request_id = db.Column(db.Integer, db.ForeignKey('asset_requests.id'), nullable=True)
    asset_name = db.Column(db.String(200), nullable=False)
    asset_image = db.Column(db.String(500), nullable=True)
    asset_type = db.Column(db.String(50), nullable=False)
    employee_email = db.Column(db.String(120), nullable=False, index=True)
    employee_name = db.Column(db.String(120), nullable=True)
    hr_email = db.Column(db.String(120), nullable=False, index=True)
    company_name = db.Column(db.String(200), nullable=True)
    assignment_date = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    return_date = db.Column(db.DateTime, nullable=True)
    status = db.Column(db.String(20), nullable=False, default=ASSIGNED)

    __table_args__ = (
        db.CheckConstraint("status IN ('assigned', 'returned')", name='ck_assigned_assets_status'),
    )

    def __repr__(self):
        return f'<AssignedAsset {self.id} {self.asset_name} -> {self.employee_email} [{self.status}]>'
