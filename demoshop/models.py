from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple, Union


class Gender(str, Enum):
    MALE = "Male"
    FEMALE = "Female"


class ShippingMethod(str, Enum):
    GROUND = "Ground"
    NEXT_DAY_AIR = "Next Day Air"
    SECOND_DAY_AIR = "2nd Day Air"


class UserDefect(str, Enum):
    """The single field a negative-test user is broken on."""
    INVALID_EMAIL = "invalid_email"
    SHORT_PASSWORD = "short_password"
    MISMATCHED_PASSWORDS = "mismatched_passwords"


@dataclass(frozen=True)
class User:
    gender: Gender
    first_name: str
    last_name: str
    email: str
    password: str
    confirm_password: str


@dataclass(frozen=True)
class UserVariant:
    defect: UserDefect
    user: User


@dataclass(frozen=True)
class Address:
    first_name: str
    last_name: str
    email: str
    company: str
    country: str
    state: str
    city: str
    address1: str
    address2: str
    zip_code: str
    phone_number: str


@dataclass(frozen=True)
class CreditCard:
    number: str
    holder_name: str
    expiry_month: str   # "01".."12"
    expiry_year: str    # four digits
    cvv: str
    kind: str = "credit_card"


@dataclass(frozen=True)
class PayPal:
    email: str
    password: str
    kind: str = "paypal"


PaymentMethod = Union[CreditCard, PayPal]


@dataclass(frozen=True)
class OrderItem:
    product_id: int
    product_name: str
    quantity: int


@dataclass(frozen=True)
class Order:
    billing_address: Address
    shipping_address: Address
    payment_method: PaymentMethod
    shipping_method: ShippingMethod
    notes: str
    is_guest: Optional[bool] = None
    create_account: Optional[bool] = None
    express_checkout: Optional[bool] = None
    user: Optional[User] = None
    items: Tuple[OrderItem, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class InvalidInputs:
    """Hostile strings for form-validation tests."""
    invalid_email: str
    short_password: str
    empty: str
    long_text: str
    special_chars: str
    sql_injection: str
    xss_script: str
