"""Shared constants for roles, binding states and trader identifiers."""

import string

ROLE_TRADER = "trader"
ROLE_INVESTOR = "investor"
VALID_ROLES = [ROLE_TRADER, ROLE_INVESTOR]

# "none" is never stored; it is the state of an investor with no binding row
BINDING_NONE = "none"
BINDING_PENDING = "pending"
BINDING_APPROVED = "approved"
STORED_BINDING_STATUSES = [BINDING_PENDING, BINDING_APPROVED]

TRADER_UID_LENGTH = 8
TRADER_UID_ALPHABET = string.ascii_uppercase + string.digits

DEFAULT_CURRENCY = "USD"
CURRENCY_SYMBOLS: dict[str, str] = {
    "USD": "$",
    "PHP": "₱",
}
