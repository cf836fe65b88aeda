from __future__ import annotations

import re
from dataclasses import replace
from typing import Dict, List, Tuple

from demoshop.generator import DataGenerator
from demoshop.models import (
    Address,
    CreditCard,
    Order,
    OrderItem,
    PayPal,
    PaymentMethod,
    User,
    UserDefect,
)

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

INVALID_EMAIL = "invalid-email"
SHORT_PASSWORD = "123"
MISMATCHED_CONFIRMATION = "DifferentPassword123!"
MIN_PASSWORD_LENGTH = 6
INVALID_CARD_NUMBER = "1234567890123456"


def is_valid_email(text: str) -> bool:
    return bool(EMAIL_RE.match(text or ""))


def luhn_valid(number: str) -> bool:
    if not number.isdigit():
        return False
    total = 0
    for i, ch in enumerate(reversed(number)):
        d = int(ch)
        if i % 2 == 1:
            d *= 2
            if d > 9:
                d -= 9
        total += d
    return total % 10 == 0


def _check_count(n) -> None:
    if isinstance(n, bool) or not isinstance(n, int):
        raise TypeError(f"count must be an int, got {type(n).__name__}")
    if n < 0:
        raise ValueError(f"count must be >= 0, got {n}")


class UserFactory:
    """
    Users for registration and login tests.

    Invalid variants start from a valid user and break exactly one rule, so a
    failing assertion points at a single validation message.
    """

    def __init__(self, gen: DataGenerator):
        self.gen = gen

    def create_valid_user(self) -> User:
        return self.gen.generate_user()

    def create_user_with_invalid_email(self) -> User:
        return replace(self.create_valid_user(), email=INVALID_EMAIL)

    def create_user_with_short_password(self) -> User:
        # confirmation follows the password so only the length rule fails
        return replace(self.create_valid_user(), password=SHORT_PASSWORD,
                       confirm_password=SHORT_PASSWORD)

    def create_user_with_mismatched_passwords(self) -> User:
        return replace(self.create_valid_user(), confirm_password=MISMATCHED_CONFIRMATION)

    def create_invalid_user(self, defect: UserDefect) -> User:
        builders = {
            UserDefect.INVALID_EMAIL: self.create_user_with_invalid_email,
            UserDefect.SHORT_PASSWORD: self.create_user_with_short_password,
            UserDefect.MISMATCHED_PASSWORDS: self.create_user_with_mismatched_passwords,
        }
        return builders[UserDefect(defect)]()

    def create_multiple(self, n: int = 5) -> List[User]:
        _check_count(n)
        return [self.create_valid_user() for _ in range(n)]


class AddressFactory:
    def __init__(self, gen: DataGenerator):
        self.gen = gen

    def create_us_address(self) -> Address:
        return self.gen.generate_address()

    def create_international_address(self) -> Address:
        return replace(self.gen.generate_address(), country="Canada")

    def create_incomplete_address(self) -> Address:
        return replace(self.gen.generate_address(), address1="", city="")

    def create_matching_billing_and_shipping(self) -> Dict[str, Address]:
        address = self.gen.generate_address()
        return {"billing": address, "shipping": address}

    def create_different_billing_and_shipping(self) -> Dict[str, Address]:
        return {
            "billing": self.gen.generate_billing_address(),
            "shipping": self.gen.generate_shipping_address(),
        }

    def create_multiple(self, n: int) -> List[Address]:
        _check_count(n)
        return [self.create_us_address() for _ in range(n)]


class PaymentFactory:
    def __init__(self, gen: DataGenerator):
        self.gen = gen

    def create_valid_credit_card(self) -> CreditCard:
        return self.gen.generate_credit_card()

    def create_expired_credit_card(self) -> CreditCard:
        return self.gen.generate_expired_credit_card()

    def create_invalid_credit_card(self) -> CreditCard:
        return replace(self.gen.generate_credit_card(), number=INVALID_CARD_NUMBER)

    def create_paypal(self) -> PayPal:
        return self.gen.generate_paypal()

    def create_multiple_payment_methods(self) -> Tuple[PaymentMethod, ...]:
        return (self.create_valid_credit_card(), self.create_paypal())


class OrderFactory:
    def __init__(self, gen: DataGenerator):
        self.gen = gen
        self.users = UserFactory(gen)
        self.payments = PaymentFactory(gen)

    def create_simple_order(self) -> Order:
        return self.gen.generate_order()

    def create_guest_order(self) -> Order:
        return replace(self.gen.generate_order(), is_guest=True, create_account=False)

    def create_registered_user_order(self) -> Order:
        order = self.gen.generate_order()
        return replace(order, is_guest=False, user=self.users.create_valid_user())

    def create_express_checkout_order(self) -> Order:
        order = self.gen.generate_order()
        return replace(order, express_checkout=True, payment_method=self.payments.create_paypal())

    def create_invalid_payment_order(self) -> Order:
        order = self.gen.generate_order()
        return replace(order, payment_method=self.payments.create_invalid_credit_card())

    def create_bulk_order(self, item_count: int = 5) -> Order:
        _check_count(item_count)
        order = self.gen.generate_order()
        items = tuple(
            OrderItem(product_id=i, product_name=f"Test Product {i}",
                      quantity=self.gen.random_number(1, 3))
            for i in range(1, item_count + 1)
        )
        return replace(order, items=items)
