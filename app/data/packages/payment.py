from app import db
from datetime import datetime
from app.data.core.user_created_base import UserCreatedBase


class Payment(UserCreatedBase):
    __tablename__ = 'payments'

    hr_email = db.Column(db.String(120), nullable=False, index=True)
    package_name = db.Column(db.String(50), nullable=False)
    employee_limit = db.Column(db.Integer, nullable=False)
    amount = db.Column(db.Float, nullable=False)
    transaction_id = db.Column(db.String(255), unique=True, nullable=False)
    payment_date = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    status = db.Column(db.String(20), nullable=False, default='completed')

    def __repr__(self):
        return f'<Payment {self.transaction_id} {self.hr_email} {self.package_name}>'
