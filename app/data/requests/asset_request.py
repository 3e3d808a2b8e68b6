from app import db
from datetime import datetime
from app.data.core.user_created_base import UserCreatedBase


class AssetRequest(UserCreatedBase):
    """
    Employee request for one unit of an asset.

    asset_name, asset_type, asset_image and company_name are copied from the
    asset when the request is created and are not kept in sync afterwards.
    """
    __tablename__ = 'asset_requests'

    asset_id = db.Column(db.Integer, db.ForeignKey('assets.id', ondelete='SET NULL'), nullable=True, index=True)
    asset_name = db.Column(db.String(200), nullable=False)
    asset_type = db.Column(db.String(50), nullable=False)
    asset_image = db.Column(db.String(500), nullable=True)
    requester_email = db.Column(db.String(120), nullable=False, index=True)
    requester_name = db.Column(db.String(120), nullable=True)
    hr_email = db.Column(db.String(120), nullable=False, index=True)
    company_name = db.Column(db.String(200), nullable=True)
    request_date = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    approval_date = db.Column(db.DateTime, nullable=True)
    request_status = db.Column(db.String(20), nullable=False, default='pending')
    note = db.Column(db.Text, nullable=False, default='')
    processed_by = db.Column(db.String(120), nullable=True)

    __table_args__ = (
        db.CheckConstraint(
            "request_status IN ('pending', 'approved', 'rejected', 'returned')",
            name='ck_asset_requests_status',
        ),
        # One open request per (requester, asset)
        db.Index(
            'uq_asset_requests_pending',
            'requester_email',
            'asset_id',
            unique=True,
            sqlite_where=db.text("request_status = 'pending'"),
            postgresql_where=db.text("request_status = 'pending'"),
        ),
    )

    def __repr__(self):
        return f'<AssetRequest {self.id} {self.requester_email} -> {self.asset_name} [{self.request_status}]>'
