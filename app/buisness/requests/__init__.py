"""
Asset request business layer.

Main entry point: app.buisness.requests.workflow.RequestWorkflow (domain facade)

- RequestWorkflow: create / approve / reject / return
- State machines: request and assignment status transitions
- Policies: business rule validation

The ledgers import the state machines from here, so this package does not
import the workflow itself.
"""

from app.buisness.requests.state_machine import RequestStateMachine, AssignmentStateMachine

__all__ = [
    'RequestStateMachine',
    'AssignmentStateMachine',
]
