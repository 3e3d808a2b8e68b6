"""
Employee/HR affiliation records
"""

from .employee_affiliation import EmployeeAffiliation
