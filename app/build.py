#!/usr/bin/env python3
"""
Database build for AssetVerse

1. create missing tables
2. make sure every subscription package in build_data_critical.json exists
3. optionally load the demo accounts from app/debug/data/

Step 2 runs on every start; a database without packages cannot take upgrades,
so a failure there stops the build.
"""

import json
from pathlib import Path

from app import create_app, db
from app.logger import get_logger

logger = get_logger("assetverse.build")

CRITICAL_DATA_FILE = Path(__file__).parent / 'data' / 'core' / 'build_data_critical.json'


def load_critical_data():
    if not CRITICAL_DATA_FILE.exists():
        message = f"Package definitions missing: {CRITICAL_DATA_FILE}"
        logger.error(message)
        raise FileNotFoundError(message)

    with open(CRITICAL_DATA_FILE, 'r') as f:
        return json.load(f)


def _package_definitions(critical_data):
    return list(critical_data['Core']['Packages'].values())


def verify_critical_data(critical_data=None):
    """True when every defined package has a row"""
    from app.data.packages.package import Package

    definitions = _package_definitions(critical_data or load_critical_data())
    names = [definition['name'] for definition in definitions]
    present = {name for (name,) in db.session.query(Package.name).filter(Package.name.in_(names))}
    missing = [name for name in names if name not in present]
    if missing:
        logger.warning(f"Packages missing: {', '.join(missing)}")
        return False
    return True


def insert_critical_data():
    """
    Insert any package that is not in the database yet.

    Raises:
        RuntimeError: If the insert fails or the packages are still missing afterwards
    """
    from app.data.packages.package import Package

    critical_data = load_critical_data()
    if verify_critical_data(critical_data):
        logger.debug("Packages present")
        return

    try:
        for definition in _package_definitions(critical_data):
            package, created = Package.find_or_create_from_dict(definition, lookup_fields=['name'])
            if created:
                logger.info(f"Package {package.name} added "
                            f"(limit {package.employee_limit}, price {package.price})")
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        logger.error(f"Package insert failed: {e}")
        raise RuntimeError(f"Package insert failed: {e}") from e

    if not verify_critical_data(critical_data):
        raise RuntimeError("Packages still missing after insert")


def build_database(app=None, build_tables=True, enable_debug_data=True):
    """
    Args:
        app: Flask application (created when omitted)
        build_tables (bool): Create missing tables first
        enable_debug_data (bool): Load demo accounts, assets and requests
    """
    app = app or create_app()

    with app.app_context():
        if build_tables:
            db.create_all()
            logger.info("Tables created")

        insert_critical_data()

        if enable_debug_data:
            from app.debug.debug_data_manager import insert_debug_data
            summary = insert_debug_data(enabled=True)
            logger.info(f"Demo data: {summary}")

        logger.info("Database build complete")


if __name__ == '__main__':
    build_database(enable_debug_data=False)
