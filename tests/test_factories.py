import pytest

from demoshop.factories import (
    INVALID_CARD_NUMBER,
    MIN_PASSWORD_LENGTH,
    AddressFactory,
    OrderFactory,
    PaymentFactory,
    UserFactory,
    is_valid_email,
    luhn_valid,
)
from demoshop.models import CreditCard, PayPal, UserDefect


def broken_rules(user):
    rules = set()
    if not is_valid_email(user.email):
        rules.add("email")
    if len(user.password) < MIN_PASSWORD_LENGTH:
        rules.add("password_length")
    if user.password != user.confirm_password:
        rules.add("confirmation")
    return rules


@pytest.fixture
def users(gen):
    return UserFactory(gen)


def test_valid_user_breaks_nothing(users):
    for _ in range(20):
        assert broken_rules(users.create_valid_user()) == set()


def test_invalid_email_user(users):
    user = users.create_user_with_invalid_email()
    assert broken_rules(user) == {"email"}


def test_short_password_user(users):
    user = users.create_user_with_short_password()
    assert broken_rules(user) == {"password_length"}


def test_mismatched_passwords_user(users):
    user = users.create_user_with_mismatched_passwords()
    assert broken_rules(user) == {"confirmation"}


@pytest.mark.parametrize("defect,rule", [
    (UserDefect.INVALID_EMAIL, "email"),
    (UserDefect.SHORT_PASSWORD, "password_length"),
    (UserDefect.MISMATCHED_PASSWORDS, "confirmation"),
    ("invalid_email", "email"),
])
def test_create_invalid_user_by_defect(users, defect, rule):
    assert broken_rules(users.create_invalid_user(defect)) == {rule}


def test_create_invalid_user_unknown_defect(users):
    with pytest.raises(ValueError):
        users.create_invalid_user("too_handsome")


@pytest.mark.parametrize("n", [1, 2, 50])
def test_create_multiple_distinct_emails(users, n):
    created = users.create_multiple(n)
    assert len(created) == n
    assert len({u.email for u in created}) == n


def test_create_multiple_zero(users):
    assert users.create_multiple(0) == []


def test_create_multiple_rejects_negative(users):
    with pytest.raises(ValueError):
        users.create_multiple(-1)


@pytest.mark.parametrize("bad", [2.0, "3", True])
def test_create_multiple_rejects_non_int(users, bad):
    with pytest.raises(TypeError):
        users.create_multiple(bad)


def test_factories_are_reproducible(today):
    from demoshop.generator import DataGenerator

    a = UserFactory(DataGenerator(seed=8, today=today)).create_multiple(5)
    b = UserFactory(DataGenerator(seed=8, today=today)).create_multiple(5)
    assert a == b


def test_addresses(gen):
    factory = AddressFactory(gen)
    assert factory.create_us_address().country == "United States"
    assert factory.create_international_address().country == "Canada"

    incomplete = factory.create_incomplete_address()
    assert incomplete.address1 == ""
    assert incomplete.city == ""
    assert incomplete.state

    matching = factory.create_matching_billing_and_shipping()
    assert matching["billing"] == matching["shipping"]

    different = factory.create_different_billing_and_shipping()
    assert different["billing"] != different["shipping"]

    assert len(factory.create_multiple(3)) == 3


def test_payments(gen):
    factory = PaymentFactory(gen)

    for _ in range(20):
        assert int(factory.create_valid_credit_card().expiry_year) > 2026
        assert int(factory.create_expired_credit_card().expiry_year) <= 2026

    invalid = factory.create_invalid_credit_card()
    assert invalid.number == INVALID_CARD_NUMBER
    assert not luhn_valid(invalid.number)

    paypal = factory.create_paypal()
    assert isinstance(paypal, PayPal)
    assert is_valid_email(paypal.email)

    card, pp = factory.create_multiple_payment_methods()
    assert isinstance(card, CreditCard)
    assert isinstance(pp, PayPal)


def test_luhn():
    assert luhn_valid("4111111111111111")
    assert luhn_valid("378282246310005")
    assert not luhn_valid("4111111111111112")
    assert not luhn_valid("4111-1111")


def test_orders(gen):
    factory = OrderFactory(gen)

    guest = factory.create_guest_order()
    assert guest.is_guest is True
    assert guest.create_account is False

    registered = factory.create_registered_user_order()
    assert registered.is_guest is False
    assert is_valid_email(registered.user.email)

    express = factory.create_express_checkout_order()
    assert express.express_checkout is True
    assert isinstance(express.payment_method, PayPal)

    invalid = factory.create_invalid_payment_order()
    assert invalid.payment_method.number == INVALID_CARD_NUMBER


def test_bulk_order(gen):
    order = OrderFactory(gen).create_bulk_order(4)
    assert [i.product_id for i in order.items] == [1, 2, 3, 4]
    assert all(1 <= i.quantity <= 3 for i in order.items)
    assert order.items[0].product_name == "Test Product 1"

    assert OrderFactory(gen).create_bulk_order(0).items == ()
    with pytest.raises(ValueError):
        OrderFactory(gen).create_bulk_order(-2)


def test_email_check():
    assert is_valid_email("a.b@example.com")
    for bad in ["invalid-email", "test@", "test.com", "@test.com", "test space@test.com", ""]:
        assert not is_valid_email(bad)
