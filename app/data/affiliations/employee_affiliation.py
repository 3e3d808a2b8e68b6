from app import db
from datetime import datetime
from app.data.core.user_created_base import UserCreatedBase


class EmployeeAffiliation(UserCreatedBase):
    __tablename__ = 'employee_affiliations'

    ACTIVE = 'active'
    INACTIVE = 'inactive'

    employee_email = db.Column(db.String(120), nullable=False, index=True)
    employee_name = db.Column(db.String(120), nullable=True)
    hr_email = db.Column(db.String(120), nullable=False, index=True)
    company_name = db.Column(db.String(200), nullable=True)
    company_logo = db.Column(db.String(500), nullable=True)
    affiliation_date = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    removed_date = db.Column(db.DateTime, nullable=True)
    status = db.Column(db.String(20), nullable=False, default=ACTIVE)

    __table_args__ = (
        db.CheckConstraint("status IN ('active', 'inactive')", name='ck_employee_affiliations_status'),
        # Inactive rows are history; only one live link per pair
        db.Index(
            'uq_employee_affiliations_active',
            'employee_email',
            'hr_email',
            unique=True,
            sqlite_where=db.text("status = 'active'"),
            postgresql_where=db.text("status = 'active'"),
        ),
    )

    def __repr__(self):
        return f'<EmployeeAffiliation {self.employee_email} @ {self.hr_email} [{self.status}]>'
