"""
Asset inventory routes
HR-owned CRUD plus the availability browse used by employees
"""

from flask import Blueprint, jsonify, request
from flask_login import login_required, current_user

from app import db
from app.buisness.core.errors import NotFoundError
from app.buisness.core.unit_of_work import atomic
from app.buisness.inventory.inventory_ledger import InventoryLedger
from app.logger import get_logger
from app.presentation.routes.decorators import hr_required
from app.presentation.routes.helpers import json_body, page_args, paginated

bp = Blueprint('assets', __name__)
logger = get_logger("assetverse.routes.assets")


@bp.route('', methods=['POST'])
@login_required
@hr_required
def create():
    """Add an asset to the HR's inventory"""
    data = json_body()
    ledger = InventoryLedger(db.session)
    with atomic(db.session, 'create_asset'):
        asset = ledger.create_asset(
            current_user,
            name=data.get('name'),
            image=data.get('image'),
            asset_type=data.get('asset_type'),
            quantity=data.get('quantity'),
        )
    return jsonify({'message': 'Asset added successfully', 'asset': asset.to_dict()}), 201


@bp.route('/hr', methods=['GET'])
@login_required
@hr_required
def list_hr():
    """The HR's own assets, newest first"""
    page, limit = page_args()
    pagination = InventoryLedger(db.session).list_for_hr(
        current_user.email,
        search=request.args.get('search'),
        asset_type=request.args.get('type'),
        page=page,
        limit=limit,
    )
    return jsonify(paginated(pagination, 'assets', 'total_assets', [a.to_dict() for a in pagination.items]))


@bp.route('/available', methods=['GET'])
@login_required
def list_available():
    """Assets with at least one unit available"""
    page, limit = page_args()
    pagination = InventoryLedger(db.session).list_available(
        search=request.args.get('search'),
        asset_type=request.args.get('type'),
        page=page,
        limit=limit,
    )
    return jsonify(paginated(pagination, 'assets', 'total_assets', [a.to_dict() for a in pagination.items]))


@bp.route('/<asset_id>', methods=['GET'])
@login_required
def detail(asset_id):
    asset = InventoryLedger(db.session).get_asset(asset_id)
    if asset is None:
        raise NotFoundError("Asset not found")
    return jsonify({'asset': asset.to_dict()})


@bp.route('/<asset_id>', methods=['PUT'])
@login_required
@hr_required
def update(asset_id):
    """Edit an owned asset; a new total_quantity shifts availability by the same amount"""
    data = json_body()
    fields = {key: data[key] for key in InventoryLedger.EDITABLE_FIELDS if key in data}
    if 'quantity' in data and 'total_quantity' not in fields:
        fields['total_quantity'] = data['quantity']

    ledger = InventoryLedger(db.session)
    with atomic(db.session, 'update_asset'):
        asset = ledger.update_asset(current_user.email, asset_id, **fields)
    return jsonify({'message': 'Asset updated successfully', 'asset': asset.to_dict()})


@bp.route('/<asset_id>', methods=['DELETE'])
@login_required
@hr_required
def delete(asset_id):
    ledger = InventoryLedger(db.session)
    with atomic(db.session, 'delete_asset'):
        ledger.delete_asset(current_user.email, asset_id)
    return jsonify({'message': 'Asset deleted successfully'})
