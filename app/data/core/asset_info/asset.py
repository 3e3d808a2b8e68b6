from app.data.core.user_created_base import UserCreatedBase
from app import db


class Asset(UserCreatedBase):
    __tablename__ = 'assets'

    RETURNABLE = 'Returnable'
    NON_RETURNABLE = 'Non-returnable'
    TYPES = (RETURNABLE, NON_RETURNABLE)

    name = db.Column(db.String(200), nullable=False)
    image = db.Column(db.String(500), nullable=False)
    asset_type = db.Column(db.String(50), nullable=False)
    total_quantity = db.Column(db.Integer, nullable=False)
    available_quantity = db.Column(db.Integer, nullable=False)
    hr_email = db.Column(db.String(120), nullable=False, index=True)
    company_name = db.Column(db.String(200), nullable=True)

    __table_args__ = (
        db.CheckConstraint('total_quantity > 0', name='ck_assets_total_quantity'),
        db.CheckConstraint(
            'available_quantity >= 0 AND available_quantity <= total_quantity',
            name='ck_assets_available_quantity',
        ),
        db.CheckConstraint(
            "asset_type IN ('Returnable', 'Non-returnable')",
            name='ck_assets_asset_type',
        ),
    )

    @property
    def is_returnable(self):
        return self.asset_type == self.RETURNABLE

    @property
    def units_out(self):
        """Units currently held by employees"""
        return self.total_quantity - self.available_quantity

    def __repr__(self):
        return f'<Asset {self.name} ({self.available_quantity}/{self.total_quantity})>'
