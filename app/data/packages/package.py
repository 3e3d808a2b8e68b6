from app import db
from app.data.core.user_created_base import UserCreatedBase


class Package(UserCreatedBase):
    __tablename__ = 'packages'

    name = db.Column(db.String(50), unique=True, nullable=False)
    employee_limit = db.Column(db.Integer, nullable=False)
    price = db.Column(db.Float, nullable=False)
    features = db.Column(db.JSON, nullable=True)

    def __repr__(self):
        return f'<Package {self.name} ({self.employee_limit} employees)>'
