from app import db, login_manager
from werkzeug.security import generate_password_hash, check_password_hash
from flask_login import UserMixin
from datetime import datetime
from app.buisness.core.data_insertion_mixin import DataInsertionMixin


class User(UserMixin, DataInsertionMixin, db.Model):
    __tablename__ = 'users'

    ROLE_HR = 'hr'
    ROLE_EMPLOYEE = 'employee'
    ROLES = (ROLE_HR, ROLE_EMPLOYEE)

    PRIVATE_FIELDS = frozenset({'password_hash'})

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    email = db.Column(db.String(120), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    role = db.Column(db.String(20), nullable=False, default=ROLE_EMPLOYEE)
    date_of_birth = db.Column(db.Date, nullable=True)
    profile_image = db.Column(db.String(500), nullable=True)

    # HR only
    company_name = db.Column(db.String(200), nullable=True)
    company_logo = db.Column(db.String(500), nullable=True)
    capacity_limit = db.Column(db.Integer, nullable=False, default=5)
    current_affiliate_count = db.Column(db.Integer, nullable=False, default=0)
    subscription = db.Column(db.String(50), nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        db.CheckConstraint("role IN ('hr', 'employee')", name='ck_users_role'),
        db.CheckConstraint('capacity_limit >= 0', name='ck_users_capacity_limit'),
        db.CheckConstraint('current_affiliate_count >= 0', name='ck_users_affiliate_count'),
    )

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        return check_password_hash(self.password_hash, password)

    @property
    def is_hr(self):
        return self.role == self.ROLE_HR

    @property
    def is_employee(self):
        return self.role == self.ROLE_EMPLOYEE

    def __repr__(self):
        return f'<User {self.email} ({self.role})>'


@login_manager.user_loader
def load_user(user_id):
    return db.session.get(User, int(user_id))
