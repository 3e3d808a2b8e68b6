#!/usr/bin/env python3
"""
Debug Data Manager
Central controller for demo data insertion

Handles:
- Loading debug data JSON files
- Checking if data is already present
- Inserting accounts, assets and requests through the business layer
- Fail-fast error handling
"""

from pathlib import Path
import json
from flask import current_app
from app import db
from app.logger import get_logger

logger = get_logger("assetverse.debug_data_manager")


def insert_debug_data(enabled=True):
    """
    Insert demo data

    Args:
        enabled (bool): Whether to insert debug data (default: True)

    Returns:
        dict: Summary of inserted data

    Raises:
        Exception: If any debug data insertion fails (fail-fast)
    """
    if not enabled:
        logger.info("Debug data insertion is disabled")
        return {}

    debug_data = _load_debug_data_file('core')
    if not debug_data:
        logger.info("No debug data file found for core, skipping")
        return {'core': {'status': 'skipped', 'reason': 'file_not_found'}}

    if _check_debug_data_present(debug_data):
        logger.info("Debug data already present, skipping")
        return {'core': {'status': 'skipped', 'reason': 'data_present'}}

    try:
        counts = _insert_core_debug_data(debug_data['Core'])
    except Exception as e:
        logger.error(f"Failed to insert debug data: {e}")
        db.session.rollback()
        raise

    logger.info(f"Debug data insertion completed successfully: {counts}")
    return {'core': {'status': 'inserted', **counts}}


def _load_debug_data_file(module_name):
    """
    Load debug data JSON file for a module

    Returns:
        dict: Debug data or None if file doesn't exist
    """
    debug_file = Path(__file__).parent / 'data' / f'{module_name}.json'

    if not debug_file.exists():
        return None

    try:
        with open(debug_file, 'r') as f:
            data = json.load(f)
        logger.debug(f"Loaded debug data file: {debug_file}")
        return data
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON in {debug_file}: {e}")
        raise


def _check_debug_data_present(debug_data):
    """True when any demo HR account already exists"""
    from app.data.core.user_info.user import User

    for hr_data in debug_data.get('Core', {}).get('HR', {}).values():
        if db.session.query(User).filter_by(email=hr_data['email']).first():
            return True
    return False


def _insert_core_debug_data(core_data):
    from app.buisness.core.unit_of_work import atomic
    from app.buisness.core.user_directory import UserDirectory
    from app.buisness.inventory.inventory_ledger import InventoryLedger
    from app.buisness.requests.workflow import RequestWorkflow

    directory = UserDirectory(
        db.session,
        default_capacity=current_app.config['DEFAULT_CAPACITY_LIMIT'],
        default_avatar=current_app.config['DEFAULT_AVATAR_URL'],
    )
    ledger = InventoryLedger(db.session)
    workflow = RequestWorkflow(db.session, inventory=ledger)

    for hr_data in core_data.get('HR', {}).values():
        directory.register_hr(**hr_data)
    for employee_data in core_data.get('Employees', {}).values():
        directory.register_employee(**employee_data)

    assets_by_name = {}
    for asset_data in core_data.get('Assets', {}).values():
        hr_user = directory.get_required(asset_data['hr_email'])
        with atomic(db.session, 'debug_create_asset'):
            asset = ledger.create_asset(
                hr_user,
                asset_data['name'],
                asset_data['image'],
                asset_data['asset_type'],
                asset_data['quantity'],
            )
        assets_by_name[asset.name] = asset

    approved = 0
    for request_data in core_data.get('Requests', []):
        asset = assets_by_name[request_data['asset_name']]
        asset_request = workflow.create_request(
            request_data['requester_email'], asset.id, note=request_data.get('note')
        )
        if request_data.get('approve'):
            workflow.approve_request(asset.hr_email, asset_request.id)
            approved += 1

    return {
        'users': len(core_data.get('HR', {})) + len(core_data.get('Employees', {})),
        'assets': len(assets_by_name),
        'requests': len(core_data.get('Requests', [])),
        'approved': approved,
    }
