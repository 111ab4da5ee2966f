"""Tests for rider assignment and daily delivery tracking."""

from datetime import timedelta

import pytest

from fresh_grocery.exceptions import (
    AuthorizationException,
    InvalidOperationException,
    InvalidStatusTransitionException,
    RecordNotFoundException,
    ResourceConflictException,
)
from fresh_grocery.models.delivery import DailyDeliveryStatus, DeliveryStatus
from fresh_grocery.models.order import PaymentStatus
from fresh_grocery.models.subscription import SubscriptionType
from fresh_grocery.utils import local_today
from tests.testing_utils import make_assignment, make_order, make_rider


class TestAssignment:
    """Opening assignments and attaching riders."""

    def test_assign_generates_daily_schedule(self, container, session):
        rider = make_rider(container)

        assignment = make_assignment(container, rider)

        today = local_today("UTC")
        assert assignment.status == DeliveryStatus.ASSIGNED
        assert assignment.rider_id == rider.id
        assert assignment.assigned_at is not None
        assert assignment.total_days == 7
        assert [d.day_number for d in assignment.daily_deliveries] == list(range(1, 8))
        assert assignment.daily_deliveries[0].delivery_date == today
        assert assignment.daily_deliveries[-1].delivery_date == today + timedelta(days=6)
        assert all(d.status == DailyDeliveryStatus.PENDING for d in assignment.daily_deliveries)

    @pytest.mark.parametrize(
        "subscription_type,days",
        [(SubscriptionType.MONTHLY, 30), (SubscriptionType.YEARLY, 365)],
    )
    def test_total_days_follow_subscription_type(self, container, session, subscription_type, days):
        rider = make_rider(container)

        assignment = make_assignment(container, rider, subscription_type=subscription_type)

        assert assignment.total_days == days
        assert len(assignment.daily_deliveries) == days

    def test_custom_start_date(self, container, session):
        rider = make_rider(container)
        order = make_order(container)
        start = local_today("UTC") + timedelta(days=3)

        assignment = container.delivery_service().assign_rider(order.id, rider.id, start_date=start)

        assert assignment.daily_deliveries[0].delivery_date == start

    def test_create_without_rider_is_pending(self, container, session):
        order = make_order(container)

        assignment = container.delivery_service().create_assignment(order.id, notes="Gate code 42")

        assert assignment.status == DeliveryStatus.PENDING
        assert assignment.rider_id is None
        assert assignment.daily_deliveries == []
        assert assignment.notes == "Gate code 42"

    def test_second_assignment_for_order_conflicts(self, container, session):
        order = make_order(container)
        service = container.delivery_service()
        service.create_assignment(order.id)

        with pytest.raises(ResourceConflictException):
            service.create_assignment(order.id)

    def test_assign_rider_to_pending_assignment(self, container, session):
        rider = make_rider(container)
        order = make_order(container)
        service = container.delivery_service()
        pending = service.create_assignment(order.id)

        assignment = service.assign_rider(order.id, rider.id)

        assert assignment.id == pending.id
        assert assignment.status == DeliveryStatus.ASSIGNED
        assert len(assignment.daily_deliveries) == 7

    def test_reassign_keeps_schedule(self, container, session):
        first = make_rider(container, "rider-1")
        second = make_rider(container, "rider-2")
        assignment = make_assignment(container, first)
        day_ids = [d.id for d in assignment.daily_deliveries]

        container.delivery_service().assign_rider(assignment.order_id, second.id)

        assert assignment.rider_id == second.id
        assert [d.id for d in assignment.daily_deliveries] == day_ids

    def test_unavailable_rider_refused(self, container, session):
        rider = make_rider(container)
        container.rider_service().set_availability("rider-1", False)
        order = make_order(container)

        with pytest.raises(InvalidOperationException, match="unavailable"):
            container.delivery_service().assign_rider(order.id, rider.id)

    def test_pending_rider_refused(self, container, session):
        rider = make_rider(container, approved=False)
        order = make_order(container)

        with pytest.raises(InvalidOperationException, match="pending"):
            container.delivery_service().assign_rider(order.id, rider.id)

    def test_failed_payment_refused(self, container, session):
        rider = make_rider(container)
        order = make_order(container)
        container.order_service().update_payment_status(order.id, PaymentStatus.FAILED)

        with pytest.raises(InvalidOperationException, match="failed"):
            container.delivery_service().assign_rider(order.id, rider.id)

    def test_reassign_closed_assignment_refused(self, container, session):
        rider = make_rider(container)
        assignment = make_assignment(container, rider)
        container.delivery_service().update_status(assignment, DeliveryStatus.CANCELLED)

        with pytest.raises(InvalidOperationException, match="cancelled"):
            container.delivery_service().assign_rider(assignment.order_id, rider.id)

    def test_missing_order(self, container, session):
        rider = make_rider(container)

        with pytest.raises(RecordNotFoundException):
            container.delivery_service().assign_rider(9999, rider.id)


class TestStatusUpdates:
    """Assignment status transitions."""

    def test_forward_transitions(self, container, session):
        rider = make_rider(container)
        assignment = make_assignment(container, rider)
        service = container.delivery_service()

        service.update_status(assignment, DeliveryStatus.PICKED_UP, notes=" Left at gate ")
        assert assignment.picked_up_at is not None
        assert assignment.notes == "Left at gate"

        service.update_status(assignment, DeliveryStatus.IN_PROGRESS)
        service.update_status(assignment, DeliveryStatus.COMPLETED)
        assert assignment.delivered_at is not None

    def test_illegal_transition(self, container, session):
        rider = make_rider(container)
        assignment = make_assignment(container, rider)

        with pytest.raises(InvalidStatusTransitionException):
            container.delivery_service().update_status(assignment, DeliveryStatus.COMPLETED)

    def test_assigned_requires_rider(self, container, session):
        order = make_order(container)
        service = container.delivery_service()
        assignment = service.create_assignment(order.id)

        with pytest.raises(InvalidOperationException, match="no rider"):
            service.update_status(assignment, DeliveryStatus.ASSIGNED)

    def test_rider_can_only_update_own_assignment(self, container, session):
        owner = make_rider(container, "rider-1")
        other = make_rider(container, "rider-2")
        assignment = make_assignment(container, owner)

        with pytest.raises(AuthorizationException):
            container.delivery_service().update_status_as_rider(
                assignment.id, other, DeliveryStatus.PICKED_UP
            )

    def test_cancel_for_order_leaves_closed_assignment(self, container, session):
        rider = make_rider(container)
        assignment = make_assignment(container, rider)
        service = container.delivery_service()
        service.update_status(assignment, DeliveryStatus.IN_PROGRESS)
        service.update_status(assignment, DeliveryStatus.COMPLETED)

        service.cancel_for_order(assignment.order)

        assert assignment.status == DeliveryStatus.COMPLETED


class TestDailyDeliveries:
    """Riders resolving each scheduled day."""

    def test_mark_delivered_updates_progress(self, container, session):
        rider = make_rider(container)
        assignment = make_assignment(container, rider)
        day_one = assignment.daily_deliveries[0]

        daily = container.delivery_service().mark_daily_delivered(day_one.id, rider, notes="Handed over")

        assert daily.status == DailyDeliveryStatus.DELIVERED
        assert daily.delivered_at is not None
        assert daily.notes == "Handed over"
        assert assignment.delivered_days == 1
        assert assignment.status == DeliveryStatus.IN_PROGRESS
        assert assignment.progress_percent == pytest.approx(14.3)

    def test_missed_day_does_not_count(self, container, session):
        rider = make_rider(container)
        assignment = make_assignment(container, rider)

        container.delivery_service().mark_daily_missed(assignment.daily_deliveries[0].id, rider)

        assert assignment.delivered_days == 0
        assert assignment.daily_deliveries[0].delivered_at is None

    def test_resolving_every_day_completes(self, container, session):
        rider = make_rider(container)
        assignment = make_assignment(container, rider)
        service = container.delivery_service()

        for daily in assignment.daily_deliveries[:-1]:
            service.mark_daily_delivered(daily.id, rider)
        assert assignment.status == DeliveryStatus.IN_PROGRESS

        service.mark_daily_missed(assignment.daily_deliveries[-1].id, rider)

        assert assignment.status == DeliveryStatus.COMPLETED
        assert assignment.delivered_days == 6
        assert assignment.delivered_at is not None

    def test_day_cannot_be_resolved_twice(self, container, session):
        rider = make_rider(container)
        assignment = make_assignment(container, rider)
        service = container.delivery_service()
        daily_id = assignment.daily_deliveries[0].id
        service.mark_daily_delivered(daily_id, rider)

        with pytest.raises(InvalidOperationException, match="already delivered"):
            service.mark_daily_missed(daily_id, rider)

    def test_other_rider_cannot_mark(self, container, session):
        owner = make_rider(container, "rider-1")
        other = make_rider(container, "rider-2")
        assignment = make_assignment(container, owner)

        with pytest.raises(AuthorizationException):
            container.delivery_service().mark_daily_delivered(assignment.daily_deliveries[0].id, other)

    def test_cancelled_assignment_cannot_be_marked(self, container, session):
        rider = make_rider(container)
        assignment = make_assignment(container, rider)
        service = container.delivery_service()
        service.update_status(assignment, DeliveryStatus.CANCELLED)

        with pytest.raises(InvalidOperationException, match="cancelled"):
            service.mark_daily_delivered(assignment.daily_deliveries[0].id, rider)

    def test_unknown_day(self, container, session):
        rider = make_rider(container)

        with pytest.raises(RecordNotFoundException):
            container.delivery_service().mark_daily_delivered(424242, rider)


class TestRiderViews:
    """Today's list and stats."""

    def test_todays_deliveries(self, container, session):
        rider = make_rider(container)
        first = make_assignment(container, rider, customer_id="customer-1")
        make_assignment(container, rider, customer_id="customer-2")
        service = container.delivery_service()

        today = service.todays_deliveries(rider)
        assert len(today) == 2
        assert all(d.day_number == 1 for d in today)

        service.mark_daily_delivered(first.daily_deliveries[0].id, rider)
        assert len(service.todays_deliveries(rider)) == 1

    def test_todays_deliveries_on_other_day(self, container, session):
        rider = make_rider(container)
        make_assignment(container, rider)
        tomorrow = local_today("UTC") + timedelta(days=1)

        today = container.delivery_service().todays_deliveries(rider, today=tomorrow)

        assert [d.day_number for d in today] == [2]

    def test_cancelled_assignment_not_listed_today(self, container, session):
        rider = make_rider(container)
        assignment = make_assignment(container, rider)
        service = container.delivery_service()
        service.update_status(assignment, DeliveryStatus.CANCELLED)

        assert service.todays_deliveries(rider) == []

    def test_rider_stats(self, container, session):
        rider = make_rider(container)
        open_assignment = make_assignment(container, rider, customer_id="customer-1")
        done = make_assignment(container, rider, customer_id="customer-2")
        service = container.delivery_service()
        service.update_status(done, DeliveryStatus.IN_PROGRESS)
        service.update_status(done, DeliveryStatus.COMPLETED)

        stats = service.rider_stats(rider)

        assert stats.active_assignments == 1
        assert stats.completed_assignments == 1
        assert stats.today_pending == 1
        assert open_assignment.status == DeliveryStatus.ASSIGNED
