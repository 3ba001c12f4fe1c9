import sys
import os
from decimal import Decimal

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from dispute_tracker import DisputeTracker
from models import DisputeState


class TestDisputeTracker:
    def setup_method(self):
        self.tracker = DisputeTracker()

    def test_record_and_lookup_deposit(self):
        self.tracker.record_deposit(10, client_id=1, amount=Decimal("2.5"))

        record = self.tracker.lookup(10)

        assert record.transaction_id == 10
        assert record.client_id == 1
        assert record.amount == Decimal("2.5")
        assert record.state == DisputeState.NONE

    def test_lookup_missing(self):
        assert self.tracker.lookup(1) is None

    def test_set_state(self):
        self.tracker.record_deposit(1, 1, Decimal("1"))

        self.tracker.set_state(1, DisputeState.DISPUTED)
        assert self.tracker.lookup(1).state == DisputeState.DISPUTED

        self.tracker.set_state(1, DisputeState.RESOLVED)
        assert self.tracker.lookup(1).state == DisputeState.RESOLVED

    def test_set_state_unknown_deposit(self):
        with pytest.raises(KeyError):
            self.tracker.set_state(1, DisputeState.DISPUTED)

    def test_withdrawals_are_known_but_not_disputable(self):
        self.tracker.record_withdrawal(5)

        assert self.tracker.is_known(5)
        assert self.tracker.lookup(5) is None
        assert len(self.tracker) == 0

    def test_is_known(self):
        self.tracker.record_deposit(1, 1, Decimal("1"))

        assert self.tracker.is_known(1)
        assert not self.tracker.is_known(2)
