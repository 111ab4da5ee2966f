"""Receiving accounts shown at checkout."""

from flask import Blueprint
from spectree import Response as SpectreeResponse

from fresh_grocery.consts import ACCOUNT_TITLE, BANK_ACCOUNTS, CURRENCY, WALLET_ACCOUNTS
from fresh_grocery.schemas.order_schema import (
    BankAccountSchema,
    PaymentMethodsResponseSchema,
    WalletAccountSchema,
)
from fresh_grocery.utils.auth import public
from fresh_grocery.utils.spectree_config import api

payment_methods_bp = Blueprint("payment_methods", __name__, url_prefix="/payment-methods")


@payment_methods_bp.route("", methods=["GET"])
@public
@api.validate(resp=SpectreeResponse(HTTP_200=PaymentMethodsResponseSchema))
def list_payment_methods():
    """Wallet numbers and bank IBANs customers transfer their payment into."""
    return PaymentMethodsResponseSchema(
        account_title=ACCOUNT_TITLE,
        currency=CURRENCY,
        wallets=[
            WalletAccountSchema(method=method, **account)
            for method, account in WALLET_ACCOUNTS.items()
        ],
        banks=[BankAccountSchema(code=code, **bank) for code, bank in BANK_ACCOUNTS.items()],
    ).model_dump(mode="json")
