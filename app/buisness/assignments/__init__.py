from app.buisness.assignments.assignment_ledger import AssignmentLedger

__all__ = ['AssignmentLedger']
