"""
Registration, credentials and profile maintenance
"""

from datetime import date

import pytest

from app.buisness.core.errors import (
    ConflictError,
    InvalidCredentialsError,
    InvalidInputError,
    NotFoundError,
)
from app.buisness.core.user_directory import UserDirectory


def test_register_hr_defaults(make_hr):
    hr = make_hr()
    assert hr.is_hr
    assert hr.capacity_limit == 5
    assert hr.current_affiliate_count == 0
    assert hr.subscription == 'basic'
    assert hr.profile_image == hr.company_logo
    assert hr.date_of_birth == date(1988, 3, 14)


def test_register_hr_uses_configured_capacity(session):
    directory = UserDirectory(session, default_capacity=3)
    hr = directory.register_hr('Maya', 'hr@acme.test', 'secret123', 'Acme', 'https://img.test/a.png', '1988-03-14')
    assert hr.capacity_limit == 3


def test_register_hr_requires_every_field(directory):
    with pytest.raises(InvalidInputError):
        directory.register_hr('Maya', 'hr@acme.test', 'secret123', '', 'https://img.test/a.png', '1988-03-14')


def test_register_employee_gets_default_avatar(make_employee):
    employee = make_employee()
    assert employee.is_employee
    assert employee.profile_image == 'https://img.test/avatar.png'
    assert employee.company_name is None


def test_duplicate_email_conflicts_across_roles(make_hr, make_employee):
    make_hr(email='shared@acme.test')
    with pytest.raises(ConflictError):
        make_employee(email='shared@acme.test')


def test_email_is_normalized(directory, make_employee):
    make_employee(email='  Tanvir@Acme.Test ')
    assert directory.get_by_email('tanvir@acme.test') is not None
    assert directory.authenticate('TANVIR@acme.test', 'secret123').email == 'tanvir@acme.test'


def test_bad_date_of_birth(directory):
    with pytest.raises(InvalidInputError):
        directory.register_employee('Tanvir', 'tanvir@acme.test', 'secret123', '02/07/1995')


def test_authenticate_does_not_reveal_which_part_failed(directory, make_employee):
    make_employee()
    with pytest.raises(InvalidCredentialsError) as wrong_password:
        directory.authenticate('tanvir@acme.test', 'wrong-password')
    with pytest.raises(InvalidCredentialsError) as unknown_email:
        directory.authenticate('nobody@acme.test', 'secret123')
    assert wrong_password.value.message == unknown_email.value.message


def test_update_profile_ignores_empty_values(directory, make_employee):
    make_employee()
    user = directory.update_profile('tanvir@acme.test', name='Tanvir H.', profile_image='', date_of_birth='1995-08-01')
    assert user.name == 'Tanvir H.'
    assert user.profile_image == 'https://img.test/avatar.png'
    assert user.date_of_birth == date(1995, 8, 1)


def test_update_profile_unknown_user(directory):
    with pytest.raises(NotFoundError):
        directory.update_profile('nobody@acme.test', name='X')


def test_set_capacity_only_for_hr(session, directory, make_employee):
    make_employee()
    with pytest.raises(InvalidInputError):
        directory.set_capacity('tanvir@acme.test', 10, 'standard')
