"""Static storefront constants."""

API_TITLE = "Fresh Grocery API"
API_DESCRIPTION = (
    "Grocery subscription storefront: product catalog, subscriptions, "
    "checkout, rider assignment and daily delivery tracking."
)

CURRENCY = "PKR"
ACCOUNT_TITLE = "Fresh Grocery PKR"

# Wallet accounts customers pay into, keyed by payment method
WALLET_ACCOUNTS: dict[str, dict[str, str]] = {
    "easypaisa": {
        "name": "EasyPaisa",
        "description": "Pay via EasyPaisa mobile wallet",
        "account_number": "0345-1234567",
    },
    "jazzcash": {
        "name": "JazzCash",
        "description": "Pay via JazzCash mobile wallet",
        "account_number": "0300-9876543",
    },
}

# Receiving bank accounts for bank transfers, keyed by bank code
BANK_ACCOUNTS: dict[str, dict[str, str]] = {
    "hbl": {"name": "HBL - Habib Bank Limited", "iban": "PK36HABB0012345678901234"},
    "ubl": {"name": "UBL - United Bank Limited", "iban": "PK36UBBL0012345678901234"},
    "mcb": {"name": "MCB - Muslim Commercial Bank", "iban": "PK36MCBL0012345678901234"},
    "alfalah": {"name": "Bank Alfalah", "iban": "PK36ALFH0012345678901234"},
    "meezan": {"name": "Meezan Bank (Islamic)", "iban": "PK36MEZN0012345678901234"},
    "allied": {"name": "Allied Bank", "iban": "PK36ABPL0012345678901234"},
    "askari": {"name": "Askari Bank", "iban": "PK36ASCM0012345678901234"},
    "faysal": {"name": "Faysal Bank", "iban": "PK36FAYS0012345678901234"},
    "standard": {"name": "Standard Chartered Pakistan", "iban": "PK36SCBL0012345678901234"},
    "js": {"name": "JS Bank", "iban": "PK36JSBL0012345678901234"},
}

PRODUCT_CSV_HEADERS = ["name", "description", "price_pkr", "category", "image_url"]
PRODUCT_CSV_EXAMPLE_ROW = [
    "Fresh Milk 1L",
    "Pure fresh milk from local farms",
    "250",
    "Dairy",
    "https://example.com/milk.jpg",
]
