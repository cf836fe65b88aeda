from __future__ import annotations

import logging
import re
import string
from datetime import date
from typing import Callable, List, Optional, Sequence, TypeVar

from faker import Faker

from demoshop.models import (
    Address,
    CreditCard,
    Gender,
    InvalidInputs,
    Order,
    PayPal,
    ShippingMethod,
    User,
)

log = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_PASSWORD = "Test123!"

# Published gateway test numbers; they pass Luhn so checkout forms accept them.
TEST_CARD_NUMBERS = (
    "4111111111111111",  # Visa
    "5555555555554444",  # Mastercard
    "378282246310005",   # American Express
    "4000000000000002",  # Visa, declined
)

SEARCH_TERMS = ("laptop", "book", "phone", "camera", "watch", "headphones")

_EMAIL_SUFFIX_ALPHABET = string.ascii_lowercase + string.digits


class DataGenerator:
    """
    Fake data for one test (or one bot run).

    All randomness goes through a single seedable source: the instance random
    of the wrapped Faker. Faker providers use it, and so does every pick this
    class makes itself (enum choices, ranges, suffixes). Nothing here touches
    the module-level `random` state, so two generators never interfere.

        gen = DataGenerator(seed=7)
        gen.generate_user()   # same user on every run seeded with 7
        gen.reset_seed()      # back to entropy-seeded output
    """

    def __init__(self, seed: Optional[int] = None, locale: str = "en_US",
                 today: Callable[[], date] = date.today):
        self.fake = Faker(locale)
        self._today = today
        self._seed: Optional[int] = None
        if seed is None:
            self.reset_seed()
        else:
            self.seed(seed)

    # ---- seed control ----

    @property
    def current_seed(self) -> Optional[int]:
        return self._seed

    @property
    def rng(self):
        return self.fake.random

    def seed(self, value: int) -> None:
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"seed must be an int, got {type(value).__name__}")
        self.fake.seed_instance(value)
        self._seed = value
        log.debug("generator seeded with %d", value)

    def reset_seed(self) -> None:
        # seed_instance(None) re-seeds the instance random from OS entropy
        self.fake.seed_instance(None)
        self._seed = None

    # ---- primitives ----

    def pick(self, options: Sequence[T]) -> T:
        if not options:
            raise ValueError("cannot pick from an empty sequence")
        return self.rng.choice(list(options))

    def random_number(self, lo: int = 1, hi: int = 100) -> int:
        if lo > hi:
            raise ValueError(f"lo ({lo}) must not exceed hi ({hi})")
        return self.rng.randint(lo, hi)

    def random_items(self, items: Sequence[T], count: int) -> List[T]:
        if count < 0:
            raise ValueError(f"count must be >= 0, got {count}")
        pool = list(items)
        return self.rng.sample(pool, min(count, len(pool)))

    def current_year(self) -> int:
        return self._today().year

    # ---- people ----

    def generate_first_name(self) -> str:
        return self.fake.first_name()

    def generate_last_name(self) -> str:
        return self.fake.last_name()

    def generate_email(self, first_name: Optional[str] = None,
                       last_name: Optional[str] = None) -> str:
        first = _local_part(first_name if first_name is not None else self.fake.first_name())
        last = _local_part(last_name if last_name is not None else self.fake.last_name())
        suffix = "".join(self.rng.choices(_EMAIL_SUFFIX_ALPHABET, k=6))
        domain = self.fake.free_email_domain()
        return f"{first}.{last}.{suffix}@{domain}".lower()

    def generate_password(self, length: int = 10) -> str:
        if length < 4:
            raise ValueError("password length must be at least 4")
        return self.fake.password(length=length, special_chars=True, digits=True,
                                  upper_case=True, lower_case=True)

    def generate_user(self) -> User:
        first = self.generate_first_name()
        last = self.generate_last_name()
        return User(
            gender=self.pick(list(Gender)),
            first_name=first,
            last_name=last,
            email=self.generate_email(first, last),
            password=DEFAULT_PASSWORD,
            confirm_password=DEFAULT_PASSWORD,
        )

    # ---- addresses ----

    def generate_zip_code(self) -> str:
        if self.rng.random() < 0.5:
            return self.fake.numerify("#####")
        return self.fake.numerify("#####-####")

    def generate_phone_number(self) -> str:
        return self.fake.phone_number()

    def generate_address(self) -> Address:
        first = self.generate_first_name()
        last = self.generate_last_name()
        return Address(
            first_name=first,
            last_name=last,
            email=self.generate_email(first, last),
            company=self.fake.company(),
            country="United States",
            state=self.fake.state(),
            city=self.fake.city(),
            address1=self.fake.street_address(),
            address2=self.fake.secondary_address(),
            zip_code=self.generate_zip_code(),
            phone_number=self.generate_phone_number(),
        )

    def generate_billing_address(self) -> Address:
        return self.generate_address()

    def generate_shipping_address(self) -> Address:
        return self.generate_address()

    # ---- payment ----

    def generate_card_number(self) -> str:
        return self.pick(TEST_CARD_NUMBERS)

    def generate_credit_card(self) -> CreditCard:
        year = self.current_year() + self.rng.randint(1, 3)
        return self._card(year)

    def generate_expired_credit_card(self) -> CreditCard:
        year = self.current_year() - self.rng.randint(1, 5)
        return self._card(year)

    def _card(self, year: int) -> CreditCard:
        number = self.generate_card_number()
        cvv_digits = 4 if number.startswith(("34", "37")) else 3
        return CreditCard(
            number=number,
            holder_name=self.fake.name(),
            expiry_month=f"{self.rng.randint(1, 12):02d}",
            expiry_year=str(year),
            cvv="".join(self.rng.choices(string.digits, k=cvv_digits)),
        )

    def generate_paypal(self) -> PayPal:
        return PayPal(email=self.generate_email(), password=self.generate_password())

    # ---- orders ----

    def generate_shipping_method(self) -> ShippingMethod:
        return self.pick(list(ShippingMethod))

    def generate_order(self) -> Order:
        return Order(
            billing_address=self.generate_billing_address(),
            shipping_address=self.generate_shipping_address(),
            payment_method=self.generate_credit_card(),
            shipping_method=self.generate_shipping_method(),
            notes=self.generate_text(),
        )

    # ---- free text / misc ----

    def generate_text(self, words: int = 8) -> str:
        return self.fake.sentence(nb_words=words)

    def generate_search_term(self) -> str:
        return self.pick(SEARCH_TERMS)

    def generate_unique_id(self) -> str:
        stamp = "".join(self.rng.choices("0123456789abcdef", k=12))
        tail = "".join(self.rng.choices(string.ascii_letters + string.digits, k=5))
        return f"test_{stamp}_{tail}"

    def generate_invalid_inputs(self) -> InvalidInputs:
        return InvalidInputs(
            invalid_email="invalid-email-format",
            short_password="123",
            empty="",
            long_text=" ".join(self.fake.words(nb=100)),
            special_chars="!@#$%^&*()_+{}[]|\\:;\"<>?,./`~",
            sql_injection="'; DROP TABLE users; --",
            xss_script='<script>alert("XSS")</script>',
        )


def _local_part(name: str) -> str:
    cleaned = re.sub(r"[^a-z]", "", name.lower())
    return cleaned or "user"
