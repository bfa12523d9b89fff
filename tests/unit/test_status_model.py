import pytest

from app.core.exceptions import ValidationError
from app.models.shared.enums import DeliveryStatus
from app.services.logistics import status_model


class TestStatusModel:
    """Status ordering, progress and transition policies"""

    def test_rank_is_strictly_increasing_in_display_order(self):
        ranks = [status_model.rank(status) for status in status_model.STATUS_ORDER]
        assert ranks == [0, 1, 2]

    def test_every_status_has_a_rank(self):
        for status in DeliveryStatus:
            assert status_model.rank(status) in {0, 1, 2}

    @pytest.mark.parametrize("status, percent", [
        (DeliveryStatus.PENDING, 0),
        (DeliveryStatus.IN_TRANSIT, 50),
        (DeliveryStatus.DELIVERED, 100),
    ])
    def test_progress_percent(self, status, percent):
        assert status_model.progress_percent(status) == percent

    @pytest.mark.parametrize("value", ["In Transit", "in transit", "IN_TRANSIT", "  In Transit  "])
    def test_parse_status_accepts_display_value_and_member_name(self, value):
        assert status_model.parse_status(value) == DeliveryStatus.IN_TRANSIT

    @pytest.mark.parametrize("value", ["Lost", "", None, 3])
    def test_parse_status_rejects_unknown_values(self, value):
        with pytest.raises(ValidationError) as exc_info:
            status_model.parse_status(value)
        assert exc_info.value.field == "status"
        assert exc_info.value.status_code == 422

    def test_step_flags_for_in_transit(self):
        status = DeliveryStatus.IN_TRANSIT
        assert [status_model.is_step_reached(step, status) for step in range(3)] == [True, True, False]
        assert [status_model.is_current(step, status) for step in range(3)] == [False, True, False]

    def test_default_policy_allows_backwards_transitions(self):
        assert status_model.can_transition(DeliveryStatus.DELIVERED, DeliveryStatus.PENDING)
        assert status_model.can_transition(DeliveryStatus.PENDING, DeliveryStatus.DELIVERED)

    def test_forward_only_policy(self):
        assert status_model.forward_only(DeliveryStatus.PENDING, DeliveryStatus.IN_TRANSIT)
        assert status_model.forward_only(DeliveryStatus.IN_TRANSIT, DeliveryStatus.IN_TRANSIT)
        assert not status_model.forward_only(DeliveryStatus.DELIVERED, DeliveryStatus.PENDING)

    def test_timeline(self):
        steps = status_model.timeline("Delivered")
        assert [step["status"] for step in steps] == list(status_model.STATUS_ORDER)
        assert all(step["reached"] for step in steps)
        assert [step["current"] for step in steps] == [False, False, True]
