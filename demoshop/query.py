"""
Value extraction from rendered shop markup that keeps working when the
markup shifts between page states.

Every extractor is a `MatcherChain`: an ordered list of plain functions
`(Snapshot) -> Optional[value]`, tightest first. The first non-None result
wins. When nothing matches the caller gets a fixed default (0, None), never
an exception, because a missing element is a normal state of a live page.

Parsing is fixed to the target site's locale: `$` prefix, `.` decimals,
`,` thousands.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Callable, Generic, List, Optional, Sequence, TypeVar

from bs4 import BeautifulSoup, NavigableString, Tag

log = logging.getLogger(__name__)

T = TypeVar("T")

Matcher = Callable[["Snapshot"], Optional[T]]


class Snapshot:
    """Parsed markup of one rendered page state."""

    def __init__(self, soup: Tag):
        self.soup = soup

    @classmethod
    def of(cls, source: Any) -> "Snapshot":
        """Accepts an HTML string, a parsed soup/tag, a Snapshot, or a page with `content()`."""
        if isinstance(source, Snapshot):
            return source
        if isinstance(source, Tag):
            return cls(source)
        if isinstance(source, (str, bytes)):
            return cls(BeautifulSoup(source, "html.parser"))
        content = getattr(source, "content", None)
        if callable(content):
            return cls(BeautifulSoup(content(), "html.parser"))
        raise TypeError(f"cannot build a snapshot from {type(source).__name__}")

    def select(self, css: str) -> List[Tag]:
        return self.soup.select(css)

    def elements(self) -> List[Tag]:
        return self.soup.find_all(True)


def text_of(el: Tag) -> str:
    """Element text with all whitespace runs collapsed to one space."""
    return " ".join(el.get_text(" ").split())


class MatcherChain(Generic[T]):
    def __init__(self, name: str, matchers: Sequence[Matcher]):
        self.name = name
        self.matchers = list(matchers)

    def first(self, snapshot: Snapshot) -> Optional[T]:
        for matcher in self.matchers:
            result = matcher(snapshot)
            if result is not None:
                log.debug("%s: %s matched %r", self.name, matcher.__name__, result)
                return result
        log.debug("%s: no matcher matched", self.name)
        return None

    def with_matcher(self, matcher: Matcher, index: Optional[int] = None) -> "MatcherChain[T]":
        matchers = list(self.matchers)
        if index is None:
            matchers.append(matcher)
        else:
            matchers.insert(index, matcher)
        return MatcherChain(self.name, matchers)


# ---------------------------------------------------------------------------
# Cart count
# ---------------------------------------------------------------------------

CART_LINK_SELECTOR = ".header-links a, .header a, header a"
CART_ELEMENT_SELECTOR = 'a[href*="/cart"], #topcartlink, .ico-cart'

_EXACT_CART_RE = re.compile(r"^shopping cart\s*\(\s*(\d+)\s*\)$", re.IGNORECASE)
_CART_WORD_RE = re.compile(r"cart", re.IGNORECASE)
# "Shopping cart (9999)" plus slack for whitespace
_MAX_CART_TEXT = 40
_PAREN_NUMBER_RE = re.compile(r"\(\s*(\d+)\s*\)")


def header_cart_link(snapshot: Snapshot) -> Optional[int]:
    for link in snapshot.select(CART_LINK_SELECTOR):
        text = text_of(link)
        if "/cart" not in (link.get("href") or "") and "shopping cart" not in text.lower():
            continue
        m = _EXACT_CART_RE.match(text)
        if m:
            return int(m.group(1))
    return None


def exact_cart_text(snapshot: Snapshot) -> Optional[int]:
    """
    An element whose whole text is "Shopping cart (N)", however deeply the
    pieces are nested. Starts from each text node mentioning "cart" and
    climbs while the element text is still short enough to be the badge.
    """
    seen = set()
    for s in snapshot.soup.find_all(string=_CART_WORD_RE):
        el = s.parent
        while isinstance(el, Tag) and id(el) not in seen:
            seen.add(id(el))
            text = text_of(el)
            if len(text) > _MAX_CART_TEXT:
                break
            m = _EXACT_CART_RE.match(text)
            if m:
                return int(m.group(1))
            el = el.parent
    return None


def cart_element_last_number(snapshot: Snapshot) -> Optional[int]:
    for el in snapshot.select(CART_ELEMENT_SELECTOR):
        text = text_of(el)
        if "cart" not in text.lower():
            continue
        numbers = _PAREN_NUMBER_RE.findall(text)
        if numbers:
            # the count is the trailing badge
            return int(numbers[-1])
    return None


CART_COUNT_CHAIN: MatcherChain[int] = MatcherChain(
    "cart_count", [header_cart_link, exact_cart_text, cart_element_last_number]
)


def extract_count(source: Any, chain: MatcherChain[int] = CART_COUNT_CHAIN) -> int:
    result = chain.first(Snapshot.of(source))
    return 0 if result is None else result


# ---------------------------------------------------------------------------
# Prices
# ---------------------------------------------------------------------------

# integer part may be empty only when a fraction follows (".99")
_AMOUNT = r"(\d{1,3}(?:,\d{3})+|\d+|(?=\.\d))(\.\d+)?"
_AMOUNT_RE = re.compile(_AMOUNT)
_SYMBOL_AMOUNT_RE = re.compile(r"\$\s*" + _AMOUNT)
_DECIMAL_AMOUNT_RE = re.compile(r"\d\.\d{2}\b")
_NON_VISIBLE_TAGS = ("script", "style", "template")


def parse_price(text: Optional[str]) -> Optional[Decimal]:
    """
    "$1,234.56" -> Decimal("1234.56"). Parentheses are treated as wrapping,
    not as an accounting negative. Returns None when there is no amount.
    """
    if not text:
        return None
    s = text.strip()
    while s.startswith("(") and s.endswith(")"):
        s = s[1:-1].strip()
    m = _AMOUNT_RE.search(s)
    if not m:
        return None
    return _to_decimal(m)


def _to_decimal(m: re.Match) -> Decimal:
    return Decimal((m.group(1) or "0").replace(",", "") + (m.group(2) or ""))


@dataclass(frozen=True)
class PriceHit:
    value: Decimal
    element: Tag


def designated(selector: str, take_last: bool = False) -> Matcher:
    """Matcher for elements that exist only to carry this price."""
    def match(snapshot: Snapshot) -> Optional[PriceHit]:
        elements = snapshot.select(selector)
        if take_last:
            elements = list(reversed(elements))
        for el in elements:
            value = parse_price(text_of(el))
            if value is not None:
                return PriceHit(value, el)
        return None
    match.__name__ = f"designated({selector})"
    return match


def labelled(label_pattern: str) -> Matcher:
    """Matcher for a value sitting next to its label, e.g. `<td>Total:</td><td>$5</td>`."""
    label_re = re.compile(label_pattern, re.IGNORECASE)

    def match(snapshot: Snapshot) -> Optional[PriceHit]:
        for el in snapshot.elements():
            if not label_re.match(text_of(el)):
                continue
            sibling = el.find_next_sibling()
            while sibling is not None:
                value = parse_price(text_of(sibling))
                if value is not None:
                    return PriceHit(value, sibling)
                sibling = sibling.find_next_sibling()
        return None
    match.__name__ = f"labelled({label_pattern})"
    return match


def positional(last: bool) -> Matcher:
    """Any visible `$` amount in document order; first or last one."""
    def match(snapshot: Snapshot) -> Optional[PriceHit]:
        # comments, doctypes and CDATA are NavigableString subclasses
        strings = [
            s for s in snapshot.soup.find_all(string=_SYMBOL_AMOUNT_RE)
            if type(s) is NavigableString
            and s.parent is not None and s.parent.name not in _NON_VISIBLE_TAGS
        ]
        if not strings:
            return None
        s = strings[-1] if last else strings[0]
        return PriceHit(_to_decimal(_SYMBOL_AMOUNT_RE.search(str(s))), s.parent)
    match.__name__ = "positional(last)" if last else "positional(first)"
    return match


PRICE_CHAINS = {
    "total": MatcherChain("price.total", [
        designated('.order-total, [data-testid="order-total"], [data-testid="cart-total"]',
                   take_last=True),
        labelled(r"^(order\s+)?total\s*:?$"),
        positional(last=True),
    ]),
    "subtotal": MatcherChain("price.subtotal", [
        designated('.cart-subtotal, [data-testid="cart-subtotal"]', take_last=True),
        labelled(r"^sub-?\s*total\s*:?$"),
    ]),
    "unit": MatcherChain("price.unit", [
        designated('.product-unit-price, .unit-price, .price-value, [data-testid="unit-price"]'),
        labelled(r"^(unit\s+)?price\s*:?$"),
        positional(last=False),
    ]),
}


def locate_price(source: Any, field: str = "total") -> Optional[PriceHit]:
    try:
        chain = PRICE_CHAINS[field]
    except KeyError:
        raise ValueError(
            f"unknown price field {field!r}, expected one of {sorted(PRICE_CHAINS)}"
        ) from None
    return chain.first(Snapshot.of(source))


def extract_price(source: Any, field: str = "total") -> Optional[Decimal]:
    hit = locate_price(source, field)
    return None if hit is None else hit.value


UNIT_PRICE_SELECTOR = ".product-unit-price, .unit-price"
QUANTITY_SELECTOR = 'input.qty-input, input[name*="quantity" i], input[type="text"]'


def row_quantity(row: Tag) -> int:
    """Quantity input of a cart row; 1 when it is missing or not a positive number."""
    qty = row.select_one(QUANTITY_SELECTOR)
    raw = (qty.get("value") or "").strip() if qty is not None else ""
    if not raw.isdigit() or int(raw) < 1:
        return 1
    return int(raw)


def expected_cart_total(source: Any) -> Decimal:
    """
    What the cart total should read: unit price times quantity, summed over
    `tr.cart-item-row`. Rows without a readable unit price add nothing.
    """
    snapshot = Snapshot.of(source)
    total = Decimal("0")
    for row in snapshot.select("tr.cart-item-row"):
        price_el = row.select_one(UNIT_PRICE_SELECTOR)
        if price_el is None:
            continue
        value = parse_price(text_of(price_el))
        if value is None:
            continue
        total += value * row_quantity(row)
    return total


# ---------------------------------------------------------------------------
# Cart rows
# ---------------------------------------------------------------------------

def marked_cart_rows(snapshot: Snapshot) -> Optional[int]:
    rows = snapshot.select("tr.cart-item-row")
    return len(rows) or None


def priced_table_rows(snapshot: Snapshot) -> Optional[int]:
    tables = snapshot.select("table.cart, .cart table, table.shopping-cart-table, .shopping-cart-table table")
    count = 0
    for table in tables:
        for row in table.find_all("tr"):
            if row.find("th") is not None:
                continue
            if _DECIMAL_AMOUNT_RE.search(text_of(row)):
                count += 1
    return count or None


CART_ROWS_CHAIN: MatcherChain[int] = MatcherChain("cart_rows", [marked_cart_rows, priced_table_rows])


def count_cart_rows(source: Any) -> int:
    result = CART_ROWS_CHAIN.first(Snapshot.of(source))
    return 0 if result is None else result
