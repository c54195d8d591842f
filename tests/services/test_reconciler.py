"""
Tests for status reconciliation.
"""

import pytest

from fine_ledger.models.enums import ViolationStatus
from fine_ledger.services.reconciler import reconcile


@pytest.mark.parametrize(
    "fine_amount, total_paid, expected",
    [
        (20, 0, ViolationStatus.UNPAID),
        (20, 1, ViolationStatus.PARTIALLY_PAID),
        (20, 19, ViolationStatus.PARTIALLY_PAID),
        (20, 20, ViolationStatus.PAID),
        (30, 30, ViolationStatus.PAID),
        (30, 31, ViolationStatus.PAID),
    ],
)
def test_status_follows_paid_total(fine_amount, total_paid, expected):
    assert reconcile(fine_amount, total_paid) == expected


def test_reconcile_is_pure():
    results = {reconcile(20, 5) for _ in range(10)}
    assert results == {ViolationStatus.PARTIALLY_PAID}
