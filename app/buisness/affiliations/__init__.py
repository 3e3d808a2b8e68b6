"""
Employee/HR affiliations and the capacity quota
"""

from app.buisness.affiliations.affiliation_ledger import AffiliationLedger

__all__ = ['AffiliationLedger']
