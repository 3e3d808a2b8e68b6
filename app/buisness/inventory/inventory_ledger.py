from __future__ import annotations

from datetime import datetime

from sqlalchemy import update

from app.buisness.core.errors import ConflictError, InvalidInputError, NotFoundError
from app.buisness.assignments.assignment_ledger import AssignmentLedger
from app.buisness.core.unit_of_work import parse_identifier, parse_text
from app.buisness.requests.state_machine import RequestStateMachine
from app.data.assignments.assigned_asset import AssignedAsset
from app.data.core.asset_info.asset import Asset
from app.data.requests.asset_request import AssetRequest
from app.logger import get_logger

logger = get_logger("assetverse.domain.inventory")


class InventoryLedger:
    """
    Asset availability bookkeeping and HR-scoped asset maintenance.

    Responsibilities:
    - reserve()/release() move one unit with a conditional UPDATE so that
      0 <= available_quantity <= total_quantity holds under concurrent writers
    - Asset CRUD restricted to the owning HR account

    Changes are staged on the session; callers own the commit.
    """

    EDITABLE_FIELDS = ('name', 'image', 'asset_type', 'total_quantity')

    def __init__(self, session, assignments: AssignmentLedger = None):
        self.session = session
        self.assignments = assignments or AssignmentLedger(session)

    # ========== Availability ==========

    def reserve(self, asset_id: int) -> bool:
        """
        Take one unit out of stock.

        Returns:
            bool: False when the asset is missing or exhausted
        """
        result = self.session.execute(
            update(Asset)
            .where(Asset.id == asset_id, Asset.available_quantity > 0)
            .values(available_quantity=Asset.available_quantity - 1, updated_at=datetime.utcnow())
            .execution_options(synchronize_session=False)
        )
        self._expire(asset_id)
        reserved = result.rowcount == 1
        if not reserved:
            logger.warning(f"Reserve refused for asset {asset_id}: no unit available")
        return reserved

    def release(self, asset_id: int) -> bool:
        """
        Put one unit back, never above total_quantity.

        Returns:
            bool: False when the asset is missing or already full
        """
        result = self.session.execute(
            update(Asset)
            .where(Asset.id == asset_id, Asset.available_quantity < Asset.total_quantity)
            .values(available_quantity=Asset.available_quantity + 1, updated_at=datetime.utcnow())
            .execution_options(synchronize_session=False)
        )
        self._expire(asset_id)
        released = result.rowcount == 1
        if not released:
            logger.warning(f"Release skipped for asset {asset_id}: missing or already at total quantity")
        return released

    def _expire(self, asset_id: int) -> None:
        # Bulk UPDATE bypasses the identity map
        for obj in list(self.session.identity_map.values()):
            if isinstance(obj, Asset) and obj.id == asset_id:
                self.session.expire(obj)

    # ========== Lookup ==========

    def get_asset(self, asset_id) -> Asset | None:
        asset_id = parse_identifier(asset_id, 'asset ID')
        return self.session.get(Asset, asset_id)

    def get_owned(self, asset_id, hr_email: str) -> Asset:
        """
        Load an asset owned by hr_email.

        Raises:
            NotFoundError: asset missing or owned by someone else
        """
        asset = self.get_asset(asset_id)
        if asset is None or asset.hr_email != hr_email:
            raise NotFoundError("Asset not found")
        return asset

    def list_for_hr(self, hr_email: str, search: str | None = None, asset_type: str | None = None,
                    page: int = 1, limit: int = 10):
        query = self.session.query(Asset).filter(Asset.hr_email == hr_email)
        query = self._apply_filters(query, search, asset_type)
        return query.order_by(Asset.created_at.desc(), Asset.id.desc()).paginate(
            page=page, per_page=limit, error_out=False
        )

    def list_available(self, search: str | None = None, asset_type: str | None = None,
                       page: int = 1, limit: int = 10):
        query = self.session.query(Asset).filter(Asset.available_quantity > 0)
        query = self._apply_filters(query, search, asset_type)
        return query.order_by(Asset.created_at.desc(), Asset.id.desc()).paginate(
            page=page, per_page=limit, error_out=False
        )

    @staticmethod
    def _apply_filters(query, search, asset_type):
        if search and search.strip():
            query = query.filter(Asset.name.ilike(f"%{search.strip()}%"))
        if asset_type and asset_type != 'all':
            query = query.filter(Asset.asset_type == asset_type)
        return query

    # ========== Maintenance ==========

    def create_asset(self, hr_user, name, image, asset_type, quantity) -> Asset:
        """
        Add an asset to the HR's inventory with every unit available.

        Raises:
            InvalidInputError: missing or non-text field, unknown type or non-positive quantity
        """
        if not name or not image or not asset_type or quantity in (None, ''):
            raise InvalidInputError("All fields are required")
        name = parse_text(name, 'Name')
        image = parse_text(image, 'Image')
        asset_type = self._validate_type(asset_type)
        quantity = self._validate_quantity(quantity)

        asset = Asset(
            name=name,
            image=image,
            asset_type=asset_type,
            total_quantity=quantity,
            available_quantity=quantity,
            hr_email=hr_user.email,
            company_name=hr_user.company_name,
        )
        self.session.add(asset)
        self.session.flush()
        logger.info(f"Asset {asset.id} '{asset.name}' added by {hr_user.email} (quantity {quantity})")
        return asset

    def update_asset(self, hr_email: str, asset_id, **fields) -> Asset:
        """
        Edit asset metadata. A new total_quantity moves available_quantity by the same delta.

        Raises:
            NotFoundError: asset missing or not owned
            InvalidInputError: bad type or quantity
            ConflictError: new total lower than the units already issued, or a type
                change while returnable units are assigned
        """
        asset = self.get_owned(asset_id, hr_email)
        unknown = set(fields) - set(self.EDITABLE_FIELDS)
        if unknown:
            raise InvalidInputError(f"Cannot update fields: {', '.join(sorted(unknown))}")

        new_type = None
        if fields.get('asset_type'):
            new_type = self._validate_type(fields['asset_type'])
            if new_type != asset.asset_type:
                held = self.assignments.outstanding_for_asset(asset.id, Asset.RETURNABLE)
                if held:
                    raise ConflictError(
                        f"Asset type cannot change while {held} returnable unit(s) are assigned"
                    )

        if fields.get('name'):
            asset.name = parse_text(fields['name'], 'Name')
        if fields.get('image'):
            asset.image = parse_text(fields['image'], 'Image')
        if new_type:
            asset.asset_type = new_type
        self.session.flush()

        if fields.get('total_quantity') not in (None, ''):
            new_total = self._validate_quantity(fields['total_quantity'])
            issued = asset.units_out
            delta = new_total - asset.total_quantity
            # Guard on the stored total so a concurrent approve/return is not overwritten
            result = self.session.execute(
                update(Asset)
                .where(
                    Asset.id == asset.id,
                    Asset.total_quantity == asset.total_quantity,
                    Asset.available_quantity + delta >= 0,
                )
                .values(
                    total_quantity=new_total,
                    available_quantity=Asset.available_quantity + delta,
                    updated_at=datetime.utcnow(),
                )
                .execution_options(synchronize_session=False)
            )
            self.session.expire(asset)
            if result.rowcount != 1:
                raise ConflictError(
                    f"Total quantity cannot go below the {issued} unit(s) already issued"
                )

        self.session.flush()
        logger.info(f"Asset {asset.id} updated by {hr_email}: {sorted(fields)}")
        return asset

    def delete_asset(self, hr_email: str, asset_id) -> None:
        """
        Remove an asset. Pending requests against it are rejected first.

        Raises:
            NotFoundError: asset missing or not owned
            ConflictError: returnable units are still assigned to employees
        """
        asset = self.get_owned(asset_id, hr_email)
        # Counted from the assignment snapshots; consumed Non-returnable units never come back
        held = self.assignments.outstanding_for_asset(asset.id, Asset.RETURNABLE)
        if held:
            raise ConflictError(f"Asset has {held} returnable unit(s) assigned and cannot be deleted")

        rejected = self.session.execute(
            update(AssetRequest)
            .where(
                AssetRequest.asset_id == asset.id,
                AssetRequest.request_status == RequestStateMachine.PENDING,
            )
            .values(
                request_status=RequestStateMachine.REJECTED,
                processed_by=hr_email,
                approval_date=datetime.utcnow(),
            )
            .execution_options(synchronize_session=False)
        ).rowcount
        if rejected:
            logger.info(f"Rejected {rejected} pending request(s) for deleted asset {asset.id}")

        # History keeps its snapshot fields; drop the link so a reused id cannot match it
        for model in (AssetRequest, AssignedAsset):
            self.session.execute(
                update(model)
                .where(model.asset_id == asset.id)
                .values(asset_id=None)
                .execution_options(synchronize_session=False)
            )

        self.session.delete(asset)
        self.session.flush()
        logger.info(f"Asset {asset.id} deleted by {hr_email}")

    @staticmethod
    def _validate_type(asset_type):
        if asset_type not in Asset.TYPES:
            raise InvalidInputError(f"Asset type must be one of: {', '.join(Asset.TYPES)}")
        return asset_type

    @staticmethod
    def _validate_quantity(quantity):
        if isinstance(quantity, bool):
            raise InvalidInputError("Quantity must be a positive integer")
        if isinstance(quantity, float) and not quantity.is_integer():
            raise InvalidInputError("Quantity must be a positive integer")
        try:
            quantity = int(quantity)
        except (TypeError, ValueError):
            raise InvalidInputError("Quantity must be a positive integer")
        if quantity <= 0:
            raise InvalidInputError("Quantity must be a positive integer")
        return quantity
