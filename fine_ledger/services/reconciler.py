"""
Status reconciliation.

A violation's status is a pure function of its fine amount and
the sum of all payments recorded against it.
"""

from fine_ledger.models.enums import ViolationStatus


def reconcile(fine_amount: int, total_paid: int) -> ViolationStatus:
    """
    Derive the settlement status.

    total_paid must be the authoritative sum of every payment row
    for the violation, never a running delta, so the result does
    not depend on the order in which payments were written.
    """
    if total_paid <= 0:
        return ViolationStatus.UNPAID
    if total_paid < fine_amount:
        return ViolationStatus.PARTIALLY_PAID
    return ViolationStatus.PAID
