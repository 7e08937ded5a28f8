"""
Status transition rules for credit notes, proforma invoices and
payroll entries.

Each machine is a table of allowed moves. A machine built with
guarded=False accepts any move between its states; credit notes
work that way because their status is a free-choice field.
"""

from dataclasses import dataclass
from enum import Enum

from erp_ledger.models.enums import (
    CreditNoteStatus,
    PayrollStatus,
    ProformaStatus,
)


class InvalidTransition(ValueError):
    """Raised when a status change is not allowed from the current state."""


@dataclass(frozen=True)
class StateMachine:
    name: str
    states: type[Enum]
    transitions: dict
    guarded: bool = True

    def can_transition(self, current, target) -> bool:
        current = self.states(current)
        target = self.states(target)
        if not self.guarded:
            return True
        return target in self.transitions.get(current, set())

    def require(self, current, target) -> None:
        if not self.can_transition(current, target):
            current = self.states(current)
            target = self.states(target)
            raise InvalidTransition(
                f"Cannot move {self.name} from {current.value} "
                f"to {target.value}"
            )


CREDIT_NOTE_MACHINE = StateMachine(
    name="credit note",
    states=CreditNoteStatus,
    transitions={},
    guarded=False,
)

# Only the moves with an explicit action are listed; free edits of
# a proforma's status go through check_proforma_status_edit().
PROFORMA_MACHINE = StateMachine(
    name="proforma invoice",
    states=ProformaStatus,
    transitions={
        ProformaStatus.DRAFT: {ProformaStatus.APPROVED},
        ProformaStatus.SENT: {ProformaStatus.APPROVED},
        ProformaStatus.APPROVED: {ProformaStatus.CONVERTED},
        ProformaStatus.REJECTED: set(),
        ProformaStatus.CONVERTED: set(),  # Terminal
        ProformaStatus.EXPIRED: set(),
    },
)

PAYROLL_MACHINE = StateMachine(
    name="payroll entry",
    states=PayrollStatus,
    transitions={
        PayrollStatus.DRAFT: {PayrollStatus.APPROVED},
        PayrollStatus.APPROVED: {PayrollStatus.PAID},
        PayrollStatus.PAID: set(),  # Terminal
    },
)


def can_transition(machine: StateMachine, current, target) -> bool:
    return machine.can_transition(current, target)


def require_transition(machine: StateMachine, current, target) -> None:
    machine.require(current, target)


def check_proforma_status_edit(current, target) -> None:
    """
    Rules for a status sent through the generic proforma update.

    approved goes through the approve guard, converted is only
    reachable via the conversion action, and a converted proforma
    is frozen. Anything else is a free choice.
    """
    current = ProformaStatus(current)
    target = ProformaStatus(target)
    if current == target:
        return
    if current == ProformaStatus.CONVERTED:
        raise InvalidTransition("A converted proforma invoice cannot change status")
    if target == ProformaStatus.APPROVED:
        if not PROFORMA_MACHINE.can_transition(current, target):
            raise InvalidTransition(
                f"Cannot approve proforma invoice from {current.value} status"
            )
    elif target == ProformaStatus.CONVERTED:
        raise InvalidTransition(
            "Use the convert-to-invoice action to convert a proforma invoice"
        )


def can_edit_payroll_adjustments(status) -> bool:
    """Additions and deductions can only change while the entry is a draft."""
    return PayrollStatus(status) == PayrollStatus.DRAFT


def available_actions(kind: str, status) -> list[str]:
    """The actions a page offers for a document in the given status."""
    if kind == "proforma":
        status = ProformaStatus(status)
        if status in (ProformaStatus.DRAFT, ProformaStatus.SENT):
            return ["approve"]
        if status == ProformaStatus.APPROVED:
            return ["convert"]
        return []
    if kind == "payroll":
        status = PayrollStatus(status)
        if status == PayrollStatus.DRAFT:
            return ["approve", "edit_adjustments"]
        if status == PayrollStatus.APPROVED:
            return ["pay"]
        return []
    if kind == "credit_note":
        CreditNoteStatus(status)
        return ["edit", "delete"]
    raise ValueError(f"Unknown document kind: {kind}")
