"""
Pytest configuration and fixtures for the demoshop test suite.

No browser is started here: page objects get mock pages, the query layer
gets HTML strings.
"""
from datetime import date

import pytest

from demoshop.generator import DataGenerator

PINNED_TODAY = date(2026, 6, 15)


@pytest.fixture
def today():
    return lambda: PINNED_TODAY


@pytest.fixture
def gen(today):
    return DataGenerator(seed=1234, today=today)


@pytest.fixture
def header_cart_html():
    return """
    <html><body>
      <div class="header">
        <div class="header-links">
          <ul>
            <li><a href="/register" class="ico-register">Register</a></li>
            <li id="topcartlink">
              <a href="/cart" class="ico-cart">
                <span class="cart-label">Shopping cart</span>
                <span class="cart-qty">(3)</span>
              </a>
            </li>
          </ul>
        </div>
      </div>
    </body></html>
    """


@pytest.fixture
def cart_page_html():
    return """
    <html><body>
      <div class="header-links"><a href="/cart" class="ico-cart">Shopping cart (2)</a></div>
      <table class="cart">
        <thead><tr><th>Product</th><th>Price</th><th>Qty.</th><th>Total</th></tr></thead>
        <tbody>
          <tr class="cart-item-row">
            <td class="product"><a href="/book">Computing and Internet</a></td>
            <td><span class="product-unit-price">$10.00</span></td>
            <td><input class="qty-input" value="1"/></td>
            <td><span class="product-subtotal">$10.00</span></td>
          </tr>
          <tr class="cart-item-row">
            <td class="product"><a href="/laptop">14.1-inch Laptop</a></td>
            <td><span class="product-unit-price">$1,590.00</span></td>
            <td><input class="qty-input" value="1"/></td>
            <td><span class="product-subtotal">$1,590.00</span></td>
          </tr>
        </tbody>
      </table>
      <table class="cart-total">
        <tr><td class="cart-total-left">Sub-Total:</td><td class="cart-total-right">$1,600.00</td></tr>
        <tr><td class="cart-total-left">Total:</td>
            <td class="cart-total-right"><span class="product-price order-total">$1,600.00</span></td></tr>
      </table>
      <div class="footer">Free shipping on orders over $50.00</div>
    </body></html>
    """
