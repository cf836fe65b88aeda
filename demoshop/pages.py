"""
Page objects for the demo web shop.

Each class wraps a Playwright `Page` (or anything with the same API, such as
a mock) and knows one screen's selectors. They share no base class; the
`ShopPage` protocol is their common shape and what `ensure_open` accepts.
Values that the shop renders in shifting markup (cart badge, totals) are
read through `demoshop.query`.
"""
from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, List, Optional, Protocol

from demoshop.config import Settings
from demoshop.models import Gender, User
from demoshop.query import count_cart_rows, expected_cart_total, extract_count, extract_price

log = logging.getLogger(__name__)


class ShopPage(Protocol):
    page: Any
    settings: Settings
    path: str

    def open(self) -> None: ...

    def is_displayed(self) -> bool: ...


def navigate(page, settings: Settings, path: str) -> None:
    url = settings.url(path)
    log.debug("goto %s", url)
    page.goto(url, wait_until="domcontentloaded")


def ensure_open(screen: ShopPage) -> bool:
    """Opens `screen` unless it is already showing. True when it navigated."""
    if screen.is_displayed():
        return False
    screen.open()
    return True


def first_present(page, selectors: List[str]) -> Optional[str]:
    for sel in selectors:
        if page.locator(sel).count() > 0:
            return sel
    return None


class HeaderComponent:
    path = "/"

    SEARCH_BOX = "#small-searchterms"
    SEARCH_BUTTON = 'input[value="Search"]'
    CART_LINKS = ["#topcartlink a", ".ico-cart"]
    LOGIN_LINK = ".ico-login"
    LOGOUT_LINK = ".ico-logout"

    def __init__(self, page, settings: Optional[Settings] = None):
        self.page = page
        self.settings = settings or Settings()

    def open(self) -> None:
        navigate(self.page, self.settings, self.path)

    def is_displayed(self) -> bool:
        return self.page.locator(".header").count() > 0

    def open_cart(self) -> None:
        sel = first_present(self.page, self.CART_LINKS)
        if sel is None:
            navigate(self.page, self.settings, "/cart")
        else:
            self.page.locator(sel).first.click()

    def search(self, term: str) -> None:
        self.page.fill(self.SEARCH_BOX, term)
        self.page.click(self.SEARCH_BUTTON)

    def is_logged_in(self) -> bool:
        return self.page.locator(self.LOGOUT_LINK).count() > 0

    def log_out(self) -> None:
        if self.is_logged_in():
            self.page.locator(self.LOGOUT_LINK).first.click()

    def cart_count(self) -> int:
        return extract_count(self.page)


class RegisterPage:
    path = "/register"

    GENDER_MALE = "#gender-male"
    GENDER_FEMALE = "#gender-female"
    FIRST_NAME = "#FirstName"
    LAST_NAME = "#LastName"
    EMAIL = "#Email"
    PASSWORD = "#Password"
    CONFIRM_PASSWORD = "#ConfirmPassword"
    SUBMIT = "#register-button"
    RESULT = ".result"
    FIELD_ERRORS = ".field-validation-error, .validation-summary-errors li"

    SUCCESS_TEXT = "Your registration completed"

    def __init__(self, page, settings: Optional[Settings] = None):
        self.page = page
        self.settings = settings or Settings()

    def open(self) -> None:
        navigate(self.page, self.settings, self.path)

    def is_displayed(self) -> bool:
        return self.page.locator(self.FIRST_NAME).count() > 0

    def register(self, user: User) -> None:
        self.page.click(self.GENDER_MALE if user.gender == Gender.MALE else self.GENDER_FEMALE)
        self.page.fill(self.FIRST_NAME, user.first_name)
        self.page.fill(self.LAST_NAME, user.last_name)
        self.page.fill(self.EMAIL, user.email)
        self.page.fill(self.PASSWORD, user.password)
        self.page.fill(self.CONFIRM_PASSWORD, user.confirm_password)
        self.page.click(self.SUBMIT)

    def registration_succeeded(self) -> bool:
        result = self.page.locator(self.RESULT)
        if result.count() == 0:
            return False
        return self.SUCCESS_TEXT in result.first.inner_text()

    def validation_errors(self) -> List[str]:
        texts = self.page.locator(self.FIELD_ERRORS).all_inner_texts()
        return [t.strip() for t in texts if t.strip()]


class LoginPage:
    path = "/login"

    EMAIL = "#Email"
    PASSWORD = "#Password"
    REMEMBER_ME = "#RememberMe"
    SUBMIT = 'input[value="Log in"]'
    ERROR_SUMMARY = ".validation-summary-errors"

    def __init__(self, page, settings: Optional[Settings] = None):
        self.page = page
        self.settings = settings or Settings()

    def open(self) -> None:
        navigate(self.page, self.settings, self.path)

    def is_displayed(self) -> bool:
        return self.page.locator(self.SUBMIT).count() > 0

    def login(self, email: str, password: str, remember: bool = False) -> None:
        self.page.fill(self.EMAIL, email)
        self.page.fill(self.PASSWORD, password)
        if remember:
            self.page.check(self.REMEMBER_ME)
        self.page.click(self.SUBMIT)

    def error_text(self) -> str:
        summary = self.page.locator(self.ERROR_SUMMARY)
        if summary.count() == 0:
            return ""
        return summary.first.inner_text().strip()


class ProductPage:
    ADD_TO_CART = ['input[id^="add-to-cart-button"]', 'input[value="Add to cart"]']
    QUANTITY = 'input[id*="EnteredQuantity"], .qty-input'
    NOTIFICATION = ".bar-notification"
    TITLE = ".product-name"

    def __init__(self, page, path: str, settings: Optional[Settings] = None):
        self.page = page
        self.path = path
        self.settings = settings or Settings()

    def open(self) -> None:
        navigate(self.page, self.settings, self.path)

    def is_displayed(self) -> bool:
        return self.page.locator(self.TITLE).count() > 0

    def add_to_cart(self, quantity: int = 1) -> None:
        if quantity < 1:
            raise ValueError(f"quantity must be >= 1, got {quantity}")
        if quantity > 1:
            self.page.locator(self.QUANTITY).first.fill(str(quantity))
        sel = first_present(self.page, self.ADD_TO_CART)
        if sel is None:
            raise AssertionError(f"no add-to-cart button on {self.path}")
        self.page.locator(sel).first.click()

    def price(self) -> Optional[Decimal]:
        return extract_price(self.page, "unit")

    def notification_text(self) -> str:
        bar = self.page.locator(self.NOTIFICATION)
        if bar.count() == 0:
            return ""
        return bar.first.inner_text().strip()


class CartPage:
    path = "/cart"

    REMOVE_CHECKBOXES = '.remove-from-cart input[type="checkbox"]'
    UPDATE_CART = 'input[value="Update shopping cart"], .update-cart-button'
    TERMS = "#termsofservice"
    CHECKOUT = "#checkout, .checkout-button"

    def __init__(self, page, settings: Optional[Settings] = None):
        self.page = page
        self.settings = settings or Settings()

    def open(self) -> None:
        navigate(self.page, self.settings, self.path)

    def is_displayed(self) -> bool:
        return self.page.locator(".shopping-cart-page, .order-summary-content").count() > 0

    def row_count(self) -> int:
        return count_cart_rows(self.page)

    def total(self) -> Optional[Decimal]:
        return extract_price(self.page, "total")

    def expected_total(self) -> Decimal:
        return expected_cart_total(self.page)

    def is_empty(self) -> bool:
        return self.row_count() == 0

    def remove_all(self) -> int:
        boxes = self.page.locator(self.REMOVE_CHECKBOXES)
        n = boxes.count()
        if n == 0:
            log.debug("cart already empty")
            return 0
        for i in range(n):
            boxes.nth(i).check()
        self.page.locator(self.UPDATE_CART).first.click()
        return n

    def checkout(self) -> None:
        self.page.check(self.TERMS)
        self.page.locator(self.CHECKOUT).first.click()
