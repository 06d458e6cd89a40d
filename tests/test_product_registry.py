from __future__ import annotations

import pytest

from traceledger.domain_errors import InvalidInput, Unauthorized
from traceledger.services.roles import Role
from traceledger.use_cases.product_registry import (
    get_all_product_ids,
    get_product,
    get_product_count,
    list_existing_ids,
    list_products,
    register_product_use_case,
)
from traceledger.use_cases.role_manager import grant_role_use_case


def test_manufacturer_registers_first_product_with_id_one(db, accounts) -> None:
    grant_role_use_case(db=db, role=Role.MANUFACTURER, identity=accounts.manufacturer, caller=accounts.admin)

    product_id = register_product_use_case(
        db=db,
        name="Organic Apple",
        category="Fruit",
        caller=accounts.manufacturer,
    )

    assert product_id == 1
    product = get_product(db, 1)
    assert product.exists is True
    assert product.name == "Organic Apple"
    assert product.category == "Fruit"
    assert product.manufacturer == accounts.manufacturer
    assert product.registered_at is not None


def test_outsider_cannot_register_and_count_is_unchanged(seeded_db, accounts) -> None:
    register_product_use_case(db=seeded_db, name="Organic Apple", category="Fruit", caller=accounts.manufacturer)

    with pytest.raises(Unauthorized) as exc:
        register_product_use_case(db=seeded_db, name="Fake", category="Test", caller=accounts.outsider)

    assert exc.value.http_status == 403
    assert get_product_count(seeded_db) == 1


def test_distributor_cannot_register(seeded_db, accounts) -> None:
    with pytest.raises(Unauthorized):
        register_product_use_case(db=seeded_db, name="Milk", category="Dairy", caller=accounts.distributor)
    assert get_product_count(seeded_db) == 0


def test_admin_may_register(db, accounts) -> None:
    product_id = register_product_use_case(db=db, name="Honey", category="Condiment", caller=accounts.admin)
    assert get_product(db, product_id).manufacturer == accounts.admin


@pytest.mark.parametrize(
    ("name", "category", "field"),
    [
        ("", "Fruit", "name"),
        ("   ", "Fruit", "name"),
        ("Apple", "", "category"),
    ],
)
def test_blank_fields_are_rejected(seeded_db, accounts, name, category, field) -> None:
    with pytest.raises(InvalidInput, match=f"{field} must not be empty") as exc:
        register_product_use_case(db=seeded_db, name=name, category=category, caller=accounts.manufacturer)

    assert exc.value.http_status == 422
    assert exc.value.details == {"field": field}
    assert get_product_count(seeded_db) == 0


def test_role_check_precedes_input_validation(seeded_db, accounts) -> None:
    with pytest.raises(Unauthorized):
        register_product_use_case(db=seeded_db, name="", category="", caller=accounts.outsider)


def test_unknown_product_reports_exists_false(db) -> None:
    product = get_product(db, 999)

    assert product.exists is False
    assert product.id == 999
    assert product.name == ""
    assert product.manufacturer is None


def test_ids_are_dense_and_listed_in_order(seeded_db, accounts) -> None:
    names = ["Fresh Milk", "Wild Salmon", "Organic Vegetables", "Natural Honey", "Rice"]
    ids = [
        register_product_use_case(db=seeded_db, name=name, category="Food", caller=accounts.manufacturer)
        for name in names
    ]

    assert ids == [1, 2, 3, 4, 5]
    assert get_product_count(seeded_db) == 5
    assert list_existing_ids(seeded_db) == [1, 2, 3, 4, 5]
    assert get_all_product_ids(seeded_db) == list_existing_ids(seeded_db)
    assert [product.name for product in list_products(seeded_db, offset=1, limit=2)] == ["Wild Salmon", "Organic Vegetables"]


def test_names_are_stripped(seeded_db, accounts) -> None:
    product_id = register_product_use_case(db=seeded_db, name="  Tea  ", category=" Drinks ", caller=accounts.manufacturer)

    product = get_product(seeded_db, product_id)
    assert product.name == "Tea"
    assert product.category == "Drinks"
