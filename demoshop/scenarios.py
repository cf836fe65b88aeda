from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional, Tuple, Union

from demoshop.factories import OrderFactory, UserFactory
from demoshop.generator import DataGenerator
from demoshop.models import Order, User, UserDefect, UserVariant

log = logging.getLogger(__name__)


class ScenarioKind(str, Enum):
    HAPPY_PATH = "happy_path"
    GUEST_CHECKOUT = "guest_checkout"
    INVALID_PAYMENT = "invalid_payment"
    REGISTRATION_ERRORS = "registration_errors"
    EXPRESS_CHECKOUT = "express_checkout"
    BULK_ORDER = "bulk_order"


class UnknownScenarioError(ValueError):
    pass


@dataclass(frozen=True)
class Scenario:
    kind: ScenarioKind
    description: str
    user: Optional[User] = None
    order: Optional[Order] = None
    valid_user: Optional[User] = None
    invalid_users: Tuple[UserVariant, ...] = field(default_factory=tuple)


class ScenarioFactory:
    """
    Named bundles of entities, one per test situation.

    Unknown kinds fall back to `happy_path` with a warning. Pass
    `strict=True` to get `UnknownScenarioError` instead.
    """

    def __init__(self, gen: DataGenerator, strict: bool = False):
        self.gen = gen
        self.strict = strict
        self.users = UserFactory(gen)
        self.orders = OrderFactory(gen)

    def resolve_kind(self, kind: Union[str, ScenarioKind]) -> ScenarioKind:
        try:
            return ScenarioKind(kind)
        except ValueError:
            if self.strict:
                raise UnknownScenarioError(f"unknown scenario kind: {kind!r}") from None
            log.warning("unknown scenario kind %r, using happy_path", kind)
            return ScenarioKind.HAPPY_PATH

    def create_scenario(self, kind: Union[str, ScenarioKind]) -> Scenario:
        kind = self.resolve_kind(kind)
        build = getattr(self, f"_build_{kind.value}")
        return build()

    def create_data_driven(self, kinds: Iterable[Union[str, ScenarioKind]]) -> List[Scenario]:
        return [self.create_scenario(k) for k in kinds]

    def _build_happy_path(self) -> Scenario:
        return Scenario(
            kind=ScenarioKind.HAPPY_PATH,
            description="Complete successful purchase flow",
            user=self.users.create_valid_user(),
            order=self.orders.create_simple_order(),
        )

    def _build_guest_checkout(self) -> Scenario:
        return Scenario(
            kind=ScenarioKind.GUEST_CHECKOUT,
            description="Guest user checkout without registration",
            order=self.orders.create_guest_order(),
        )

    def _build_invalid_payment(self) -> Scenario:
        return Scenario(
            kind=ScenarioKind.INVALID_PAYMENT,
            description="Checkout with invalid payment method",
            user=self.users.create_valid_user(),
            order=self.orders.create_invalid_payment_order(),
        )

    def _build_registration_errors(self) -> Scenario:
        variants = tuple(
            UserVariant(defect=d, user=self.users.create_invalid_user(d)) for d in UserDefect
        )
        return Scenario(
            kind=ScenarioKind.REGISTRATION_ERRORS,
            description="Test various registration validation errors",
            valid_user=self.users.create_valid_user(),
            invalid_users=variants,
        )

    def _build_express_checkout(self) -> Scenario:
        return Scenario(
            kind=ScenarioKind.EXPRESS_CHECKOUT,
            description="Registered user pays with PayPal express checkout",
            user=self.users.create_valid_user(),
            order=self.orders.create_express_checkout_order(),
        )

    def _build_bulk_order(self) -> Scenario:
        return Scenario(
            kind=ScenarioKind.BULK_ORDER,
            description="Registered user orders several products at once",
            user=self.users.create_valid_user(),
            order=self.orders.create_bulk_order(),
        )
