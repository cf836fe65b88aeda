import random
import re
from datetime import date

import pytest

from demoshop.factories import is_valid_email, luhn_valid
from demoshop.generator import SEARCH_TERMS, TEST_CARD_NUMBERS, DataGenerator
from demoshop.models import Gender, ShippingMethod

ZIP_RE = re.compile(r"^\d{5}(-\d{4})?$")


def _sequence(gen):
    return [
        gen.generate_user(),
        gen.generate_email(),
        gen.generate_address(),
        gen.generate_credit_card(),
        gen.generate_paypal(),
        gen.generate_order(),
        gen.generate_search_term(),
        gen.generate_text(),
        gen.generate_unique_id(),
        gen.random_number(1, 1000),
    ]


@pytest.mark.parametrize("seed", [0, 1, 42, 2 ** 31])
def test_same_seed_same_sequence(seed, today):
    a = DataGenerator(seed=seed, today=today)
    b = DataGenerator(seed=seed, today=today)
    assert _sequence(a) == _sequence(b)


def test_reseeding_an_instance_replays_sequence(gen):
    gen.seed(99)
    first = [gen.generate_user() for _ in range(10)]
    gen.seed(99)
    second = [gen.generate_user() for _ in range(10)]
    assert first == second
    assert gen.current_seed == 99


def test_different_seeds_diverge(today):
    a = [DataGenerator(seed=1, today=today).generate_email() for _ in range(1)]
    b = [DataGenerator(seed=2, today=today).generate_email() for _ in range(1)]
    assert a != b


def test_reset_seed_gives_unique_emails(gen):
    gen.reset_seed()
    assert gen.current_seed is None
    emails = {gen.generate_email() for _ in range(100)}
    assert len(emails) >= 99


def test_unseeded_generators_do_not_repeat_each_other():
    a = DataGenerator().generate_email()
    b = DataGenerator().generate_email()
    assert a != b


@pytest.mark.parametrize("bad", [True, "7", 1.5, None])
def test_seed_rejects_non_int(gen, bad):
    with pytest.raises(TypeError):
        gen.seed(bad)


def test_generation_leaves_global_random_alone(gen):
    random.seed(5)
    expected = random.random()

    random.seed(5)
    gen.generate_user()
    gen.generate_address()
    gen.generate_order()
    gen.random_items(range(10), 3)
    assert random.random() == expected


def test_user_fields(gen):
    user = gen.generate_user()
    assert user.gender in (Gender.MALE, Gender.FEMALE)
    assert user.first_name and user.last_name
    assert user.password == user.confirm_password == "Test123!"
    assert is_valid_email(user.email)
    assert user.email == user.email.lower()


def test_email_built_from_name(gen):
    email = gen.generate_email("Mary-Ann", "O'Neil")
    local, _, domain = email.partition("@")
    assert local.startswith("maryann.oneil.")
    assert re.fullmatch(r"[a-z0-9]{6}", local.rsplit(".", 1)[1])
    assert "." in domain


def test_email_with_unusable_name_falls_back(gen):
    assert gen.generate_email("123", "!!").startswith("user.user.")


def test_zip_codes_match_format(gen):
    for _ in range(200):
        assert ZIP_RE.match(gen.generate_zip_code())


def test_address_fields(gen):
    address = gen.generate_address()
    assert address.country == "United States"
    assert ZIP_RE.match(address.zip_code)
    assert is_valid_email(address.email)
    for value in (address.company, address.state, address.city, address.address1, address.phone_number):
        assert value


def test_card_numbers_come_from_allow_list(gen):
    for _ in range(50):
        card = gen.generate_credit_card()
        assert card.number in TEST_CARD_NUMBERS
        assert luhn_valid(card.number)


def test_card_expiry_in_future(gen):
    for _ in range(50):
        card = gen.generate_credit_card()
        assert int(card.expiry_year) > 2026
        assert 1 <= int(card.expiry_month) <= 12
        assert len(card.expiry_month) == 2


def test_expired_card_expiry_in_past(gen):
    for _ in range(50):
        assert int(gen.generate_expired_credit_card().expiry_year) <= 2026


def test_cvv_length_follows_card_brand(gen):
    for _ in range(50):
        card = gen.generate_credit_card()
        expected = 4 if card.number.startswith("37") else 3
        assert len(card.cvv) == expected
        assert card.cvv.isdigit()


def test_current_year_is_injectable():
    gen = DataGenerator(seed=1, today=lambda: date(2031, 1, 1))
    assert gen.current_year() == 2031
    assert int(gen.generate_credit_card().expiry_year) > 2031


def test_order_fields(gen):
    order = gen.generate_order()
    assert order.shipping_method in list(ShippingMethod)
    assert order.payment_method.kind == "credit_card"
    assert order.notes
    assert order.is_guest is None
    assert order.items == ()


def test_search_term_from_pool(gen):
    assert gen.generate_search_term() in SEARCH_TERMS


def test_unique_id_format(gen):
    assert re.fullmatch(r"test_[0-9a-f]{12}_[A-Za-z0-9]{5}", gen.generate_unique_id())


def test_invalid_inputs(gen):
    bad = gen.generate_invalid_inputs()
    assert not is_valid_email(bad.invalid_email)
    assert len(bad.short_password) < 6
    assert bad.empty == ""
    assert len(bad.long_text.split()) == 100
    assert "<script>" in bad.xss_script


def test_random_number_bounds(gen):
    values = {gen.random_number(1, 3) for _ in range(100)}
    assert values <= {1, 2, 3}
    assert gen.random_number(5, 5) == 5
    with pytest.raises(ValueError):
        gen.random_number(3, 1)


def test_random_items(gen):
    picked = gen.random_items(["a", "b", "c", "d"], 2)
    assert len(picked) == 2
    assert len(set(picked)) == 2
    assert sorted(gen.random_items([1, 2, 3], 10)) == [1, 2, 3]
    assert gen.random_items([1, 2, 3], 0) == []
    with pytest.raises(ValueError):
        gen.random_items([1, 2], -1)


def test_pick_from_empty_raises(gen):
    with pytest.raises(ValueError):
        gen.pick([])


def test_short_password_length_rejected(gen):
    with pytest.raises(ValueError):
        gen.generate_password(length=3)
    assert len(gen.generate_password(length=12)) == 12
