from decimal import Decimal

import pytest

from dressshop.app import ShopApp
from dressshop.models.order import PaymentMethod
from dressshop.models.product import ProductData
from dressshop.services import order_composer
from dressshop.services.pricing import compute_totals
from dressshop.storage import JsonFileRepository, MemoryRepository
from dressshop.utils.exceptions import (
    ConflictError,
    EmptyCartError,
    NotFoundError,
    StorageError,
    ValidationError,
)

CUSTOMER = dict(
    customer_name="Jane Doe",
    phone_number="+1 555 010 2030",
    address="12 Rose Street, Springfield",
)


class RecordingNotifier:
    def __init__(self, fail=False):
        self.fail = fail
        self.calls = []

    def send_order(self, phone_number, order):
        self.calls.append((phone_number, order.order_number))
        if self.fail:
            raise RuntimeError("WhatsApp unreachable")
        return True


class FailingRepository(MemoryRepository):
    """Memory store that fails inserts or clears for selected collections"""

    def __init__(self, fail_insert=(), fail_clear=()):
        super().__init__()
        self.fail_insert = set(fail_insert)
        self.fail_clear = set(fail_clear)

    def insert(self, collection, record, key=None):
        if collection in self.fail_insert:
            raise StorageError(f"cannot write {collection}")
        return super().insert(collection, record, key)

    def clear(self, collection):
        if collection in self.fail_clear:
            raise StorageError(f"cannot clear {collection}")
        return super().clear(collection)


def test_adding_same_combination_merges_lines(shop, products):
    a, _ = products
    first = shop.cart.add(a.id, 2, color="Pink", size="M")
    second = shop.cart.add(a.id, 3, color="Pink", size="M")

    assert second.id == first.id
    assert second.quantity == 5
    assert len(shop.cart.lines()) == 1


def test_different_color_or_size_makes_new_line(shop, products):
    a, _ = products
    shop.cart.add(a.id, 1, color="Pink", size="M")
    shop.cart.add(a.id, 1, color="Blue", size="M")
    shop.cart.add(a.id, 1, color="Pink", size="S")
    shop.cart.add(a.id, 1)
    assert len(shop.cart.lines()) == 4


def test_add_rejects_unknown_product_and_bad_quantity(shop, products):
    with pytest.raises(NotFoundError):
        shop.cart.add(999, 1)
    with pytest.raises(ValidationError):
        shop.cart.add(products[0].id, 0)


def test_set_quantity_zero_removes_line_from_totals(shop, products):
    a, b = products
    line_a = shop.cart.add(a.id, 2)
    shop.cart.add(b.id, 1)

    assert shop.cart.set_quantity(line_a.id, 0) is None

    summary = shop.cart.list()
    assert [item.product_id for item in summary.items] == [b.id]
    assert summary.count == 1
    assert summary.subtotal == 10.00


def test_set_quantity_updates_in_place_or_reports_missing(shop, products):
    line = shop.cart.add(products[0].id, 1)
    assert shop.cart.set_quantity(line.id, 7).quantity == 7
    with pytest.raises(NotFoundError):
        shop.cart.set_quantity(12345, 2)
    assert shop.cart.set_quantity(12345, -1) is None


def test_remove_and_clear(shop, products):
    a, b = products
    line = shop.cart.add(a.id, 1)
    shop.cart.add(b.id, 1)
    assert shop.cart.remove(line.id) is True
    assert shop.cart.remove(line.id) is False
    shop.cart.clear()
    assert shop.cart.list().count == 0


def test_empty_cart_totals_are_zero(shop):
    summary = shop.cart.list()
    assert (summary.subtotal, summary.shipping, summary.tax, summary.total, summary.count) == (0, 0, 0, 0, 0)


def test_cart_prices_follow_catalog_until_order(shop, products):
    a, _ = products
    shop.cart.add(a.id, 1)
    shop.catalog.update(a.id, ProductData(
        title=a.title, price=Decimal("59.99"), images=a.images, category=a.category,
    ))
    assert shop.cart.list().subtotal == 59.99


def test_totals_round_half_up():
    totals = compute_totals([(Decimal("0.0625"), 1)])
    assert totals.subtotal == Decimal("0.06")
    totals = compute_totals([(Decimal("109.98"), 1)])
    assert totals.tax == Decimal("8.80")
    totals = compute_totals([(Decimal("0.5625"), 1)], tax_rate=Decimal("0"))
    assert totals.subtotal == Decimal("0.56")
    assert compute_totals([(Decimal("1.005"), 1)]).subtotal == Decimal("1.01")


def test_checkout_scenario_freezes_totals_and_empties_cart(shop, products):
    a, b = products
    shop.cart.add(a.id, 2, color="Pink", size="M")
    shop.cart.add(b.id, 1)

    summary = shop.cart.list()
    assert (summary.subtotal, summary.shipping, summary.tax, summary.total) == (109.98, 9.99, 8.80, 128.77)
    assert summary.count == 3

    order = shop.orders.place_order(payment_method=PaymentMethod.CASH_ON_DELIVERY, **CUSTOMER)

    assert order.subtotal == Decimal("109.98")
    assert order.shipping == Decimal("9.99")
    assert order.tax == Decimal("8.80")
    assert order.total == Decimal("128.77")
    assert order.order_number.startswith("DRS-")
    assert len(order.order_number) == len("DRS-") + 6
    assert [(i.product_id, i.quantity, i.price) for i in order.items] == [
        (a.id, 2, Decimal("49.99")),
        (b.id, 1, Decimal("10.00")),
    ]
    assert order.items[0].image == "https://example.com/a-1.jpg"
    assert order.items[0].color == "Pink"
    assert shop.cart.list().count == 0


def test_placed_order_ignores_later_price_changes(shop, products):
    a, b = products
    shop.cart.add(a.id, 2)
    shop.cart.add(b.id, 1)
    order = shop.orders.place_order(payment_method="bankTransfer", **CUSTOMER)

    shop.catalog.update(a.id, ProductData(
        title="Renamed", price=Decimal("99.99"), images=a.images, category=a.category,
    ))

    stored = shop.orders.get_by_order_number(order.order_number)
    assert stored.total == Decimal("128.77")
    assert stored.items[0].title == "Floral Summer Dress"
    assert stored.items[0].price == Decimal("49.99")


def test_empty_cart_checkout_creates_no_order(shop, repository):
    with pytest.raises(EmptyCartError):
        shop.orders.place_order(payment_method="cashOnDelivery", **CUSTOMER)
    assert repository.count("orders") == 0


def test_unknown_order_number(shop):
    with pytest.raises(NotFoundError):
        shop.orders.get_by_order_number("DRS-NOPE00")


@pytest.mark.parametrize("failure", [{"fail_insert": ["orders"]}, {"fail_clear": ["cart_items"]}])
def test_failed_checkout_keeps_cart_and_writes_no_order(settings, failure):
    repository = FailingRepository(**failure)
    shop = ShopApp(settings=settings, repository=repository).initialize(seed_products=False)
    product = shop.catalog.create(ProductData(
        title="Linen Midi Dress", price=Decimal("69.99"), images=["x.jpg"], category="dresses",
    ))
    shop.cart.add(product.id, 1)

    with pytest.raises(StorageError):
        shop.orders.place_order(payment_method="cashOnDelivery", **CUSTOMER)

    assert repository.count("orders") == 0
    assert shop.cart.list().count == 1


@pytest.mark.parametrize("step", ["_stage", "_replace"])
def test_failed_order_write_keeps_cart_on_disk(settings, tmp_path, monkeypatch, step):
    data_dir = tmp_path / "data"
    shop = ShopApp(settings=settings, repository=JsonFileRepository(data_dir)).initialize(seed_products=False)
    product = shop.catalog.create(ProductData(
        title="Linen Midi Dress", price=Decimal("69.99"), images=["x.jpg"], category="dresses",
    ))
    shop.cart.add(product.id, 2)

    original = getattr(JsonFileRepository, step)

    def fail_on_orders(self, *args):
        if any(getattr(arg, "name", None) == "orders.json" for arg in args):
            raise StorageError("disk full")
        return original(self, *args)

    monkeypatch.setattr(JsonFileRepository, step, fail_on_orders)
    with pytest.raises(StorageError):
        shop.orders.place_order(payment_method="cashOnDelivery", **CUSTOMER)
    monkeypatch.undo()

    fresh = JsonFileRepository(data_dir)
    assert fresh.count("orders") == 0
    assert fresh.count("cart_items") == 1
    assert fresh.all("cart_items")[0]["quantity"] == 2
    assert [p.name for p in data_dir.iterdir() if p.suffix != ".json"] == []


def test_whatsapp_orders_notify_and_survive_notifier_failure(settings, repository):
    notifier = RecordingNotifier(fail=True)
    shop = ShopApp(settings=settings, repository=repository, notifier=notifier).initialize(seed_products=False)
    product = shop.catalog.create(ProductData(
        title="Flowy Beach Dress", price=Decimal("52.99"), images=["x.jpg"], category="dresses",
    ))
    shop.cart.add(product.id, 1)

    order = shop.orders.place_order(payment_method="whatsapp", **CUSTOMER)

    assert notifier.calls == [(CUSTOMER["phone_number"], order.order_number)]
    assert shop.orders.get_by_order_number(order.order_number).total == order.total


def test_non_whatsapp_orders_do_not_notify(settings, repository):
    notifier = RecordingNotifier()
    shop = ShopApp(settings=settings, repository=repository, notifier=notifier).initialize(seed_products=False)
    product = shop.catalog.create(ProductData(
        title="Flowy Beach Dress", price=Decimal("52.99"), images=["x.jpg"], category="dresses",
    ))
    shop.cart.add(product.id, 1)
    shop.orders.place_order(payment_method="cashOnDelivery", **CUSTOMER)
    assert notifier.calls == []


def test_order_number_collision_is_regenerated(shop, products, monkeypatch):
    numbers = iter(["DRS-AAAAAA", "DRS-AAAAAA", "DRS-BBBBBB"])
    monkeypatch.setattr(order_composer, "generate_order_number", lambda prefix: next(numbers))

    shop.cart.add(products[0].id, 1)
    first = shop.orders.place_order(payment_method="cashOnDelivery", **CUSTOMER)
    shop.cart.add(products[0].id, 1)
    second = shop.orders.place_order(payment_method="cashOnDelivery", **CUSTOMER)

    assert (first.order_number, second.order_number) == ("DRS-AAAAAA", "DRS-BBBBBB")


def test_order_number_collisions_give_up_with_conflict(shop, products, monkeypatch):
    monkeypatch.setattr(order_composer, "generate_order_number", lambda prefix: "DRS-SAMESS")
    shop.cart.add(products[0].id, 1)
    shop.orders.place_order(payment_method="cashOnDelivery", **CUSTOMER)

    shop.cart.add(products[0].id, 1)
    with pytest.raises(ConflictError):
        shop.orders.place_order(payment_method="cashOnDelivery", **CUSTOMER)
    assert shop.cart.list().count == 1
