"""Delivery lifecycle: rider assignment and per-day delivery tracking."""

import logging
from dataclasses import dataclass
from datetime import date, timedelta

from prometheus_client import Counter
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from fresh_grocery.app_config import AppSettings
from fresh_grocery.exceptions import (
    AuthorizationException,
    InvalidOperationException,
    InvalidStatusTransitionException,
    RecordNotFoundException,
    ResourceConflictException,
)
from fresh_grocery.models.delivery import (
    CLOSED_DELIVERY_STATUSES,
    DailyDelivery,
    DailyDeliveryStatus,
    DeliveryAssignment,
    DeliveryStatus,
)
from fresh_grocery.models.order import DELIVERABLE_PAYMENT_STATUSES, Order
from fresh_grocery.models.rider import Rider
from fresh_grocery.utils import local_today, utcnow
from fresh_grocery.utils.pricing import subscription_days

DELIVERY_STATUS_CHANGES_TOTAL = Counter(
    "delivery_status_changes_total",
    "Total delivery assignment status changes by new status",
    ["status"],
)
DAILY_DELIVERIES_RESOLVED_TOTAL = Counter(
    "daily_deliveries_resolved_total",
    "Total daily deliveries marked by riders, by outcome",
    ["status"],
)

logger = logging.getLogger(__name__)

DELIVERY_TRANSITIONS: dict[DeliveryStatus, frozenset[DeliveryStatus]] = {
    DeliveryStatus.PENDING: frozenset({DeliveryStatus.ASSIGNED, DeliveryStatus.CANCELLED}),
    DeliveryStatus.ASSIGNED: frozenset(
        {DeliveryStatus.PICKED_UP, DeliveryStatus.IN_PROGRESS, DeliveryStatus.CANCELLED}
    ),
    DeliveryStatus.PICKED_UP: frozenset(
        {DeliveryStatus.IN_PROGRESS, DeliveryStatus.DELIVERED, DeliveryStatus.CANCELLED}
    ),
    DeliveryStatus.IN_PROGRESS: frozenset({DeliveryStatus.COMPLETED, DeliveryStatus.CANCELLED}),
    DeliveryStatus.DELIVERED: frozenset({DeliveryStatus.COMPLETED}),
    DeliveryStatus.COMPLETED: frozenset(),
    DeliveryStatus.CANCELLED: frozenset(),
}


@dataclass
class RiderStats:
    active_assignments: int
    completed_assignments: int
    today_pending: int


class DeliveryService:
    """Service for delivery assignments and their daily schedule.

    An assignment covers one order for the number of days its subscription
    type spans. When a rider is first attached, one ``DailyDelivery`` row
    per day is generated; riders then resolve each day as delivered or
    missed, and the assignment completes once no pending day is left.
    """

    def __init__(self, db: Session, app_settings: AppSettings):
        self.db = db
        self.app_settings = app_settings

    # ── Queries ───────────────────────────────────────────────────────

    def get_assignment(self, assignment_id: int) -> DeliveryAssignment:
        assignment = self.db.get(DeliveryAssignment, assignment_id)
        if assignment is None:
            raise RecordNotFoundException("Delivery assignment", assignment_id)
        return assignment

    def find_for_order(self, order_id: int) -> DeliveryAssignment | None:
        stmt = select(DeliveryAssignment).where(DeliveryAssignment.order_id == order_id)
        return self.db.scalars(stmt).unique().first()

    def list_all(self, status: DeliveryStatus | None = None) -> list[DeliveryAssignment]:
        stmt = select(DeliveryAssignment)
        if status is not None:
            stmt = stmt.where(DeliveryAssignment.status == DeliveryStatus(status))
        stmt = stmt.order_by(DeliveryAssignment.created_at.desc(), DeliveryAssignment.id.desc())
        return list(self.db.scalars(stmt).unique())

    def list_rider_assignments(self, rider: Rider) -> list[DeliveryAssignment]:
        stmt = (
            select(DeliveryAssignment)
            .where(DeliveryAssignment.rider_id == rider.id)
            .order_by(DeliveryAssignment.created_at.desc(), DeliveryAssignment.id.desc())
        )
        return list(self.db.scalars(stmt).unique())

    def todays_deliveries(self, rider: Rider, today: date | None = None) -> list[DailyDelivery]:
        """Pending deliveries due today on the rider's open assignments."""
        today = today or self._today()
        stmt = (
            select(DailyDelivery)
            .join(DailyDelivery.assignment)
            .where(
                DeliveryAssignment.rider_id == rider.id,
                DeliveryAssignment.status.not_in(list(CLOSED_DELIVERY_STATUSES)),
                DailyDelivery.delivery_date == today,
                DailyDelivery.status == DailyDeliveryStatus.PENDING,
            )
            .order_by(DailyDelivery.delivery_assignment_id, DailyDelivery.day_number)
        )
        return list(self.db.scalars(stmt))

    def rider_stats(self, rider: Rider, today: date | None = None) -> RiderStats:
        def count(*conditions) -> int:  # type: ignore[no-untyped-def]
            stmt = select(func.count(DeliveryAssignment.id)).where(
                DeliveryAssignment.rider_id == rider.id, *conditions
            )
            return self.db.scalar(stmt) or 0

        return RiderStats(
            active_assignments=count(
                DeliveryAssignment.status.not_in(
                    [DeliveryStatus.PENDING, DeliveryStatus.COMPLETED, DeliveryStatus.CANCELLED]
                )
            ),
            completed_assignments=count(DeliveryAssignment.status == DeliveryStatus.COMPLETED),
            today_pending=len(self.todays_deliveries(rider, today)),
        )

    # ── Assignment ────────────────────────────────────────────────────

    def create_assignment(
        self,
        order_id: int,
        rider_id: int | None = None,
        start_date: date | None = None,
        notes: str | None = None,
    ) -> DeliveryAssignment:
        """Open an assignment for an order, optionally with a rider right away."""
        order = self._get_deliverable_order(order_id)
        if self.find_for_order(order.id) is not None:
            raise ResourceConflictException("Delivery assignment", f"order {order.id}")

        assignment = DeliveryAssignment(
            order=order,
            status=DeliveryStatus.PENDING,
            total_days=self._total_days(order),
            delivered_days=0,
            notes=notes,
        )
        self.db.add(assignment)

        if rider_id is not None:
            self._attach_rider(assignment, self._get_assignable_rider(rider_id), start_date)

        self.db.flush()
        logger.info(
            "Created delivery assignment %s for order %s (%s days, status %s)",
            assignment.id,
            order.id,
            assignment.total_days,
            assignment.status.value,
        )
        return assignment

    def assign_rider(
        self, order_id: int, rider_id: int, start_date: date | None = None
    ) -> DeliveryAssignment:
        """Give an order's delivery to a rider, replacing any current rider."""
        order = self._get_deliverable_order(order_id)
        rider = self._get_assignable_rider(rider_id)

        assignment = self.find_for_order(order.id)
        if assignment is None:
            return self.create_assignment(order.id, rider.id, start_date=start_date)

        if not assignment.is_open:
            raise InvalidOperationException(
                "reassign the delivery", f"it is already {assignment.status.value}"
            )

        previous_rider_id = assignment.rider_id
        self._attach_rider(assignment, rider, start_date)
        self.db.flush()

        logger.info(
            "Assignment %s rider %s -> %s", assignment.id, previous_rider_id, rider.id
        )
        return assignment

    def update_status(
        self,
        assignment: DeliveryAssignment,
        status: DeliveryStatus,
        notes: str | None = None,
    ) -> DeliveryAssignment:
        status = DeliveryStatus(status)
        current = assignment.status

        if status != current:
            if status not in DELIVERY_TRANSITIONS[current]:
                raise InvalidStatusTransitionException("Delivery", current.value, status.value)
            if status == DeliveryStatus.ASSIGNED and assignment.rider_id is None:
                raise InvalidOperationException("mark the delivery assigned", "no rider is assigned")
            self._set_status(assignment, status)

        if notes is not None:
            assignment.notes = notes.strip() or None

        self.db.flush()
        return assignment

    def update_status_as_rider(
        self,
        assignment_id: int,
        rider: Rider,
        status: DeliveryStatus,
        notes: str | None = None,
    ) -> DeliveryAssignment:
        assignment = self.get_assignment(assignment_id)
        if assignment.rider_id != rider.id:
            raise AuthorizationException("This delivery is not assigned to you")
        return self.update_status(assignment, status, notes)

    def cancel_for_order(self, order: Order) -> DeliveryAssignment | None:
        """Cancel the order's assignment if it is still open."""
        assignment = self.find_for_order(order.id)
        if assignment is None or not assignment.is_open:
            return assignment
        self._set_status(assignment, DeliveryStatus.CANCELLED)
        self.db.flush()
        return assignment

    # ── Daily deliveries ──────────────────────────────────────────────

    def mark_daily_delivered(
        self, daily_id: int, rider: Rider, notes: str | None = None
    ) -> DailyDelivery:
        return self._resolve_daily(daily_id, rider, DailyDeliveryStatus.DELIVERED, notes)

    def mark_daily_missed(
        self, daily_id: int, rider: Rider, notes: str | None = None
    ) -> DailyDelivery:
        return self._resolve_daily(daily_id, rider, DailyDeliveryStatus.MISSED, notes)

    def _resolve_daily(
        self,
        daily_id: int,
        rider: Rider,
        outcome: DailyDeliveryStatus,
        notes: str | None,
    ) -> DailyDelivery:
        daily = self.db.get(DailyDelivery, daily_id)
        if daily is None:
            raise RecordNotFoundException("Daily delivery", daily_id)

        assignment = daily.assignment
        if assignment.rider_id != rider.id:
            raise AuthorizationException("This delivery is not assigned to you")
        if not assignment.is_open:
            raise InvalidOperationException(
                f"mark day {daily.day_number} {outcome.value}",
                f"the assignment is {assignment.status.value}",
            )
        if daily.status != DailyDeliveryStatus.PENDING:
            raise InvalidOperationException(
                f"mark day {daily.day_number} {outcome.value}",
                f"it is already {daily.status.value}",
            )

        daily.status = outcome
        if outcome == DailyDeliveryStatus.DELIVERED:
            daily.delivered_at = utcnow()
        if notes is not None:
            daily.notes = notes.strip() or None

        self.db.flush()
        DAILY_DELIVERIES_RESOLVED_TOTAL.labels(status=outcome.value).inc()

        self._refresh_progress(assignment)
        self.db.flush()

        logger.info(
            "Assignment %s day %s marked %s (%s/%s delivered)",
            assignment.id,
            daily.day_number,
            outcome.value,
            assignment.delivered_days,
            assignment.total_days,
        )
        return daily

    def _refresh_progress(self, assignment: DeliveryAssignment) -> None:
        days = assignment.daily_deliveries
        assignment.delivered_days = sum(1 for d in days if d.status == DailyDeliveryStatus.DELIVERED)
        any_pending = any(d.status == DailyDeliveryStatus.PENDING for d in days)

        if not any_pending:
            self._set_status(assignment, DeliveryStatus.COMPLETED)
        elif assignment.status in (DeliveryStatus.ASSIGNED, DeliveryStatus.PICKED_UP):
            self._set_status(assignment, DeliveryStatus.IN_PROGRESS)

    # ── Helpers ───────────────────────────────────────────────────────

    def _attach_rider(
        self, assignment: DeliveryAssignment, rider: Rider, start_date: date | None
    ) -> None:
        assignment.rider = rider
        assignment.rider_id = rider.id
        assignment.assigned_at = utcnow()
        if assignment.status != DeliveryStatus.ASSIGNED:
            self._set_status(assignment, DeliveryStatus.ASSIGNED)

        if not assignment.daily_deliveries:
            start = start_date or self._today()
            for day_number in range(1, assignment.total_days + 1):
                assignment.daily_deliveries.append(
                    DailyDelivery(
                        day_number=day_number,
                        delivery_date=start + timedelta(days=day_number - 1),
                        status=DailyDeliveryStatus.PENDING,
                    )
                )

    def _set_status(self, assignment: DeliveryAssignment, status: DeliveryStatus) -> None:
        previous = assignment.status
        assignment.status = status
        now = utcnow()
        if status == DeliveryStatus.PICKED_UP:
            assignment.picked_up_at = now
        elif status in (DeliveryStatus.DELIVERED, DeliveryStatus.COMPLETED):
            assignment.delivered_at = now

        DELIVERY_STATUS_CHANGES_TOTAL.labels(status=status.value).inc()
        logger.info(
            "Assignment %s: %s -> %s",
            assignment.id,
            previous.value if previous else None,
            status.value,
        )

    def _get_deliverable_order(self, order_id: int) -> Order:
        order = self.db.get(Order, order_id)
        if order is None:
            raise RecordNotFoundException("Order", order_id)
        if order.payment_status not in DELIVERABLE_PAYMENT_STATUSES:
            raise InvalidOperationException(
                "assign a delivery", f"the order payment is {order.payment_status.value}"
            )
        return order

    def _get_assignable_rider(self, rider_id: int) -> Rider:
        rider = self.db.get(Rider, rider_id)
        if rider is None:
            raise RecordNotFoundException("Rider", rider_id)
        if not rider.is_assignable:
            raise InvalidOperationException(
                "assign the rider",
                f"rider {rider.id} is {rider.status.value} and "
                f"{'available' if rider.is_available else 'unavailable'}",
            )
        return rider

    def _total_days(self, order: Order) -> int:
        if order.subscription is not None:
            return subscription_days(order.subscription.type)
        return self.app_settings.default_delivery_days

    def _today(self) -> date:
        return local_today(self.app_settings.delivery_timezone)
