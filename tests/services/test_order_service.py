"""Tests for checkout and order payment tracking."""

from dataclasses import replace
from decimal import Decimal

import pytest

from fresh_grocery.exceptions import (
    AuthorizationException,
    InvalidOperationException,
    InvalidStatusTransitionException,
    RecordNotFoundException,
    ValidationException,
)
from fresh_grocery.models.delivery import DeliveryStatus
from fresh_grocery.models.order import PaymentMethod, PaymentStatus
from fresh_grocery.models.subscription import SubscriptionStatus, SubscriptionType
from tests.testing_utils import (
    VALID_WALLET_DETAILS,
    make_assignment,
    make_order,
    make_product,
    make_profile,
    make_rider,
    make_subscription,
)


class TestPaymentDetailsValidation:
    """Checkout field rules."""

    @pytest.fixture
    def order_service(self, container, session):
        return container.order_service()

    def test_valid_wallet_details_are_trimmed(self, order_service):
        details = replace(VALID_WALLET_DETAILS, sender_name="  Ali Khan  ")

        normalized = order_service.validate_payment_details(PaymentMethod.JAZZCASH, details)

        assert normalized == {
            "sender_name": "Ali Khan",
            "sender_account": "0300-1234567",
            "sender_mobile": "03001234567",
            "delivery_address": "House 12, Street 4, Gulberg III, Lahore",
        }

    def test_name_with_digits_rejected(self, order_service):
        details = replace(VALID_WALLET_DETAILS, sender_name="Ali 2")

        with pytest.raises(ValidationException, match="letters and spaces"):
            order_service.validate_payment_details(PaymentMethod.EASYPAISA, details)

    def test_wallet_account_with_letters_rejected(self, order_service):
        details = replace(VALID_WALLET_DETAILS, sender_account="0300-ABC")

        with pytest.raises(ValidationException, match="digits and dashes"):
            order_service.validate_payment_details(PaymentMethod.EASYPAISA, details)

    @pytest.mark.parametrize("mobile", ["12345", "030012345678", "0300-123456"])
    def test_bad_mobile_rejected(self, order_service, mobile):
        details = replace(VALID_WALLET_DETAILS, sender_mobile=mobile)

        with pytest.raises(ValidationException, match="10 or 11 digits"):
            order_service.validate_payment_details(PaymentMethod.EASYPAISA, details)

    def test_short_address_rejected(self, order_service):
        details = replace(VALID_WALLET_DETAILS, delivery_address="Lahore")

        with pytest.raises(ValidationException, match="at least 10 characters"):
            order_service.validate_payment_details(PaymentMethod.EASYPAISA, details)

    def test_all_errors_reported_together(self, order_service):
        details = replace(
            VALID_WALLET_DETAILS, sender_name="", sender_mobile="1", delivery_address=""
        )

        with pytest.raises(ValidationException) as exc_info:
            order_service.validate_payment_details(PaymentMethod.EASYPAISA, details)

        message = exc_info.value.message
        assert "sender_name is required" in message
        assert "sender_mobile must be 10 or 11 digits" in message
        assert "delivery_address is required" in message

    def test_bank_transfer_normalizes_iban_and_bank(self, order_service):
        details = replace(
            VALID_WALLET_DETAILS, sender_account="pk36 habb 0012 3456", bank_code=" HBL "
        )

        normalized = order_service.validate_payment_details(PaymentMethod.BANK_TRANSFER, details)

        assert normalized["sender_account"] == "PK36HABB00123456"
        assert normalized["bank_code"] == "hbl"
        assert normalized["bank_name"] == "HBL - Habib Bank Limited"

    def test_bank_transfer_requires_known_bank(self, order_service):
        details = replace(VALID_WALLET_DETAILS, bank_code="nobank")

        with pytest.raises(ValidationException, match="supported bank"):
            order_service.validate_payment_details(PaymentMethod.BANK_TRANSFER, details)


class TestCreateOrder:
    """Placing orders."""

    def test_amount_is_server_side_quote(self, container, session):
        product = make_product(container, price="250")
        subscription = make_subscription(container, items=[(product, 2)])

        order = container.order_service().create_order(
            "customer-1", subscription.id, PaymentMethod.EASYPAISA, VALID_WALLET_DETAILS
        )

        assert order.amount_pkr == Decimal("3500.00")
        assert order.payment_status == PaymentStatus.PENDING
        assert order.payment_details["sender_name"] == "Ali Khan"

    def test_yearly_order_is_discounted(self, container, session):
        product = make_product(container, price="100")
        subscription = make_subscription(
            container, subscription_type=SubscriptionType.YEARLY, items=[(product, 1)]
        )

        order = container.order_service().create_order(
            "customer-1", subscription.id, PaymentMethod.JAZZCASH, VALID_WALLET_DETAILS
        )

        assert order.amount_pkr == Decimal("32850.00")

    def test_empty_basket_refused(self, container, session):
        subscription = make_subscription(container)

        with pytest.raises(InvalidOperationException, match="no items"):
            container.order_service().create_order(
                "customer-1", subscription.id, PaymentMethod.EASYPAISA, VALID_WALLET_DETAILS
            )

    def test_paused_subscription_refused(self, container, session):
        product = make_product(container)
        subscription = make_subscription(container, items=[(product, 1)])
        container.subscription_service().set_status(subscription, SubscriptionStatus.PAUSED)

        with pytest.raises(InvalidOperationException, match="paused"):
            container.order_service().create_order(
                "customer-1", subscription.id, PaymentMethod.EASYPAISA, VALID_WALLET_DETAILS
            )

    def test_other_users_subscription_refused(self, container, session):
        product = make_product(container)
        subscription = make_subscription(container, user_id="customer-2", items=[(product, 1)])
        make_profile(container)

        with pytest.raises(AuthorizationException):
            container.order_service().create_order(
                "customer-1", subscription.id, PaymentMethod.EASYPAISA, VALID_WALLET_DETAILS
            )

    def test_address_saved_to_empty_profile(self, container, session):
        order = make_order(container)

        profile = container.profile_service().get_profile(order.user_id)
        assert profile.address == VALID_WALLET_DETAILS.delivery_address

    def test_existing_profile_address_kept(self, container, session):
        make_profile(container)
        container.profile_service().update_profile("customer-1", address="Flat 3, Clifton Block 5, Karachi")

        make_order(container)

        profile = container.profile_service().get_profile("customer-1")
        assert profile.address == "Flat 3, Clifton Block 5, Karachi"

    def test_list_user_orders(self, container, session):
        first = make_order(container, user_id="customer-1")
        make_order(container, user_id="customer-2")

        orders = container.order_service().list_user_orders("customer-1")

        assert [o.id for o in orders] == [first.id]

    def test_get_for_user(self, container, session):
        order = make_order(container)
        service = container.order_service()

        with pytest.raises(AuthorizationException):
            service.get_for_user(order.id, "someone-else")
        assert service.get_for_user(order.id, "admin-1", is_admin=True) is order

        with pytest.raises(RecordNotFoundException):
            service.get_order(9999)


class TestPaymentStatus:
    """Admin payment workflow."""

    def test_complete_with_transaction_id(self, container, session):
        order = make_order(container)

        updated = container.order_service().update_payment_status(
            order.id, PaymentStatus.COMPLETED, " TX-123 "
        )

        assert updated.payment_status == PaymentStatus.COMPLETED
        assert updated.transaction_id == "TX-123"

    def test_failed_can_retry(self, container, session):
        service = container.order_service()
        order = make_order(container)

        service.update_payment_status(order.id, PaymentStatus.FAILED)
        service.update_payment_status(order.id, PaymentStatus.PENDING)

        assert order.payment_status == PaymentStatus.PENDING

    def test_cancelled_is_final(self, container, session):
        service = container.order_service()
        order = make_order(container)
        service.update_payment_status(order.id, PaymentStatus.CANCELLED)

        with pytest.raises(InvalidStatusTransitionException):
            service.update_payment_status(order.id, PaymentStatus.PENDING)

    def test_completed_cannot_fail(self, container, session):
        service = container.order_service()
        order = make_order(container)
        service.update_payment_status(order.id, PaymentStatus.COMPLETED)

        with pytest.raises(InvalidStatusTransitionException):
            service.update_payment_status(order.id, PaymentStatus.FAILED)

    def test_cancel_cascades_to_open_delivery(self, container, session):
        rider = make_rider(container)
        assignment = make_assignment(container, rider)

        container.order_service().update_payment_status(assignment.order_id, PaymentStatus.CANCELLED)

        assert assignment.status == DeliveryStatus.CANCELLED

    def test_revenue_and_counts(self, container, session):
        service = container.order_service()
        paid = make_order(container, user_id="customer-1", price="100")
        make_order(container, user_id="customer-2", price="50")
        service.update_payment_status(paid.id, PaymentStatus.COMPLETED)

        assert service.completed_revenue() == Decimal("700")
        assert service.count_by_status(PaymentStatus.COMPLETED) == 1
        assert service.count_by_status(PaymentStatus.PENDING) == 1
        assert len(service.list_all(PaymentStatus.PENDING)) == 1
        assert len(service.list_all(limit=1)) == 1
