"""
Availability bookkeeping and HR-scoped asset maintenance
"""

import pytest

from app.buisness.core.errors import ConflictError, InvalidInputError, NotFoundError
from app.buisness.core.unit_of_work import atomic
from app.buisness.inventory.inventory_ledger import InventoryLedger
from app.buisness.requests.workflow import RequestWorkflow
from app.data.core.asset_info.asset import Asset
from app.data.requests.asset_request import AssetRequest


@pytest.fixture
def ledger(session):
    return InventoryLedger(session)


def test_create_asset_starts_fully_available(make_hr, make_asset):
    hr = make_hr()
    asset = make_asset(hr, quantity=3)
    assert asset.total_quantity == 3
    assert asset.available_quantity == 3
    assert asset.hr_email == hr.email
    assert asset.company_name == 'Acme Corp'


@pytest.mark.parametrize('quantity', [0, -1, 1.5, 'three', True])
def test_create_asset_rejects_bad_quantity(ledger, make_hr, quantity):
    hr = make_hr()
    with pytest.raises(InvalidInputError):
        ledger.create_asset(hr, 'Laptop', 'https://img.test/l.png', Asset.RETURNABLE, quantity)


def test_create_asset_rejects_unknown_type(ledger, make_hr):
    hr = make_hr()
    with pytest.raises(InvalidInputError):
        ledger.create_asset(hr, 'Laptop', 'https://img.test/l.png', 'Borrowable', 2)


def test_create_asset_requires_all_fields(ledger, make_hr):
    hr = make_hr()
    with pytest.raises(InvalidInputError) as exc_info:
        ledger.create_asset(hr, '', 'https://img.test/l.png', Asset.RETURNABLE, 2)
    assert exc_info.value.message == "All fields are required"


@pytest.mark.parametrize('field', ['name', 'image'])
def test_create_asset_rejects_non_text_fields(ledger, make_hr, field):
    hr = make_hr()
    values = {'name': 'Laptop', 'image': 'https://img.test/l.png'}
    values[field] = 123
    with pytest.raises(InvalidInputError) as exc_info:
        ledger.create_asset(hr, values['name'], values['image'], Asset.RETURNABLE, 2)
    assert exc_info.value.message.endswith("must be text")


def test_reserve_until_exhausted(session, ledger, make_hr, make_asset):
    asset = make_asset(make_hr(), quantity=2)
    assert ledger.reserve(asset.id) is True
    assert ledger.reserve(asset.id) is True
    assert ledger.reserve(asset.id) is False
    session.commit()
    assert session.get(Asset, asset.id).available_quantity == 0


def test_release_is_capped_at_total(session, ledger, make_hr, make_asset):
    asset = make_asset(make_hr(), quantity=1)
    assert ledger.release(asset.id) is False
    assert ledger.reserve(asset.id) is True
    assert ledger.release(asset.id) is True
    session.commit()
    assert session.get(Asset, asset.id).available_quantity == 1


def test_reserve_and_release_missing_asset(ledger):
    assert ledger.reserve(9999) is False
    assert ledger.release(9999) is False


def test_get_owned_hides_other_hr_assets(ledger, make_hr, make_asset):
    asset = make_asset(make_hr())
    other = make_hr(email='hr@globex.test', company_name='Globex')
    with pytest.raises(NotFoundError):
        ledger.get_owned(asset.id, other.email)
    with pytest.raises(InvalidInputError):
        ledger.get_owned('abc', other.email)


def test_update_total_shifts_available(session, ledger, make_hr, make_asset):
    hr = make_hr()
    asset = make_asset(hr, quantity=3)
    ledger.reserve(asset.id)
    session.commit()

    with atomic(session, 'update'):
        ledger.update_asset(hr.email, asset.id, name='Dell Latitude 7440', total_quantity=5)

    asset = session.get(Asset, asset.id)
    assert asset.name == 'Dell Latitude 7440'
    assert asset.total_quantity == 5
    assert asset.available_quantity == 4


def test_update_total_below_units_out_conflicts(session, ledger, make_hr, make_asset):
    hr = make_hr()
    asset = make_asset(hr, quantity=3)
    ledger.reserve(asset.id)
    ledger.reserve(asset.id)
    session.commit()

    with pytest.raises(ConflictError) as exc_info:
        with atomic(session, 'update'):
            ledger.update_asset(hr.email, asset.id, name='Renamed', total_quantity=1)
    assert "2 unit(s) already issued" in exc_info.value.message

    asset = session.get(Asset, asset.id)
    assert asset.name == 'Dell Latitude 5440'
    assert (asset.total_quantity, asset.available_quantity) == (3, 1)


def test_update_rejects_unknown_fields(ledger, make_hr, make_asset):
    hr = make_hr()
    asset = make_asset(hr)
    with pytest.raises(InvalidInputError):
        ledger.update_asset(hr.email, asset.id, available_quantity=10)


def test_delete_rejects_pending_requests_first(session, ledger, make_hr, make_employee, make_asset):
    hr = make_hr()
    make_employee()
    asset = make_asset(hr, quantity=2)
    asset_id = asset.id
    request = RequestWorkflow(session).create_request('tanvir@acme.test', asset_id)

    with atomic(session, 'delete'):
        ledger.delete_asset(hr.email, asset_id)

    assert session.get(Asset, asset_id) is None
    request = session.get(AssetRequest, request.id)
    assert request.request_status == 'rejected'
    assert request.asset_id is None
    assert request.asset_name == 'Dell Latitude 5440'


def test_delete_refused_while_returnable_units_are_out(session, ledger, make_hr, make_employee, make_asset):
    hr = make_hr()
    make_employee()
    asset = make_asset(hr, quantity=2)
    workflow = RequestWorkflow(session)
    request = workflow.create_request('tanvir@acme.test', asset.id)
    workflow.approve_request(hr.email, request.id)

    with pytest.raises(ConflictError):
        with atomic(session, 'delete'):
            ledger.delete_asset(hr.email, asset.id)
    assert session.get(Asset, asset.id) is not None


def test_delete_allowed_after_non_returnable_units_consumed(session, ledger, make_hr, make_employee, make_asset):
    hr = make_hr()
    make_employee()
    asset = make_asset(hr, name='Notebook Pack', asset_type=Asset.NON_RETURNABLE, quantity=2)
    asset_id = asset.id
    workflow = RequestWorkflow(session)
    request = workflow.create_request('tanvir@acme.test', asset_id)
    workflow.approve_request(hr.email, request.id)

    with atomic(session, 'delete'):
        ledger.delete_asset(hr.email, asset_id)
    assert session.get(Asset, asset_id) is None


def test_type_change_refused_while_returnable_units_are_out(session, ledger, make_hr, make_employee, make_asset):
    hr = make_hr()
    make_employee()
    asset = make_asset(hr, quantity=1)
    asset_id = asset.id
    workflow = RequestWorkflow(session)
    request = workflow.create_request('tanvir@acme.test', asset_id)
    workflow.approve_request(hr.email, request.id)

    with pytest.raises(ConflictError):
        with atomic(session, 'update'):
            ledger.update_asset(hr.email, asset_id, asset_type=Asset.NON_RETURNABLE)
    assert session.get(Asset, asset_id).asset_type == Asset.RETURNABLE

    with pytest.raises(ConflictError):
        with atomic(session, 'delete'):
            ledger.delete_asset(hr.email, asset_id)
    assert session.get(Asset, asset_id) is not None


def test_type_change_allowed_once_units_are_returned(session, ledger, make_hr, make_employee, make_asset):
    hr = make_hr()
    make_employee()
    asset = make_asset(hr, quantity=1)
    asset_id = asset.id
    workflow = RequestWorkflow(session)
    request = workflow.create_request('tanvir@acme.test', asset_id)
    assignment = workflow.approve_request(hr.email, request.id)
    workflow.return_asset('tanvir@acme.test', assignment.id)

    with atomic(session, 'update'):
        ledger.update_asset(hr.email, asset_id, asset_type=Asset.NON_RETURNABLE)
    assert session.get(Asset, asset_id).asset_type == Asset.NON_RETURNABLE


def test_delete_counts_units_issued_as_returnable(session, ledger, make_hr, make_employee, make_asset):
    """A request made before a type change is issued with the type it was made for"""
    hr = make_hr()
    make_employee()
    asset = make_asset(hr, quantity=2)
    asset_id = asset.id
    workflow = RequestWorkflow(session)
    request = workflow.create_request('tanvir@acme.test', asset_id)

    with atomic(session, 'update'):
        ledger.update_asset(hr.email, asset_id, asset_type=Asset.NON_RETURNABLE)
    assignment = workflow.approve_request(hr.email, request.id)
    assert assignment.asset_type == Asset.RETURNABLE

    with pytest.raises(ConflictError) as exc_info:
        with atomic(session, 'delete'):
            ledger.delete_asset(hr.email, asset_id)
    assert "1 returnable unit(s)" in exc_info.value.message


def test_outstanding_for_asset_counts_held_units_by_issued_type(session, ledger, make_hr, make_employee,
                                                                make_asset):
    hr = make_hr()
    make_employee()
    make_employee(email='nadia@acme.test', name='Nadia Islam')
    asset = make_asset(hr, quantity=3)
    asset_id = asset.id
    workflow = RequestWorkflow(session)
    first = workflow.approve_request(hr.email, workflow.create_request('tanvir@acme.test', asset_id).id)
    workflow.approve_request(hr.email, workflow.create_request('nadia@acme.test', asset_id).id)

    assignments = ledger.assignments
    assert assignments.outstanding_for_asset(asset_id) == 2
    assert assignments.outstanding_for_asset(asset_id, Asset.RETURNABLE) == 2
    assert assignments.outstanding_for_asset(asset_id, Asset.NON_RETURNABLE) == 0

    workflow.return_asset('tanvir@acme.test', first.id)
    assert assignments.outstanding_for_asset(asset_id, Asset.RETURNABLE) == 1


def test_update_rejects_non_text_name(session, ledger, make_hr, make_asset):
    hr = make_hr()
    asset = make_asset(hr)
    asset_id = asset.id
    with pytest.raises(InvalidInputError):
        with atomic(session, 'update'):
            ledger.update_asset(hr.email, asset_id, name=['Laptop'])
    assert session.get(Asset, asset_id).name == 'Dell Latitude 5440'


def test_list_available_skips_exhausted_and_filters(session, ledger, make_hr, make_asset):
    hr = make_hr()
    laptop = make_asset(hr, name='Laptop', quantity=1)
    make_asset(hr, name='Laptop Stand', quantity=2)
    make_asset(hr, name='Notebook', asset_type=Asset.NON_RETURNABLE, quantity=5)
    ledger.reserve(laptop.id)
    session.commit()

    page = ledger.list_available(search='laptop')
    assert [a.name for a in page.items] == ['Laptop Stand']

    page = ledger.list_available(asset_type=Asset.NON_RETURNABLE)
    assert [a.name for a in page.items] == ['Notebook']

    page = ledger.list_available(asset_type='all', limit=2)
    assert page.total == 2
    assert page.pages == 1


def test_list_for_hr_is_scoped_and_paginated(ledger, make_hr, make_asset):
    hr = make_hr()
    other = make_hr(email='hr@globex.test', company_name='Globex')
    for index in range(3):
        make_asset(hr, name=f'Chair {index}')
    make_asset(other, name='Globex Chair')

    page = ledger.list_for_hr(hr.email, page=1, limit=2)
    assert page.total == 3
    assert page.pages == 2
    assert len(page.items) == 2
    assert all(a.hr_email == hr.email for a in page.items)
