# examples/cart_bot.py
# Adds a book to the cart and checks the header badge and the cart total.
#   python -m demoshop.runner run examples.cart_bot:run

from demoshop.pages import CartPage, HeaderComponent, ProductPage, ensure_open
from demoshop.waits import eventually

PRODUCT_PATH = "/computing-and-internet"


def run(page, data, settings):
    header = HeaderComponent(page, settings)
    cart = CartPage(page, settings)

    cart.open()
    cart.remove_all()

    product = ProductPage(page, PRODUCT_PATH, settings)
    ensure_open(product)
    assert product.price() is not None, "product page shows no price"

    quantity = data.random_number(1, 3)
    product.add_to_cart(quantity)

    def badge_updated():
        assert header.cart_count() == quantity, f"cart badge shows {header.cart_count()}, want {quantity}"

    eventually(badge_updated, timeout_s=10, interval_s=0.3, label="cart badge")

    cart.open()

    def total_matches():
        assert cart.row_count() == 1, f"expected 1 cart row, got {cart.row_count()}"
        expected = cart.expected_total()
        assert expected > 0, "cart rows show no unit price"
        assert cart.total() == expected, f"total {cart.total()} != rows {expected}"

    eventually(total_matches, timeout_s=10, interval_s=0.3, label="cart total")
