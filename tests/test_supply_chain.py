from __future__ import annotations

import logging

import pytest

from traceledger.domain_errors import InvalidInput, NotFound, Unauthorized
from traceledger.services.stages import Stage
from traceledger.use_cases.product_registry import register_product_use_case
from traceledger.use_cases.supply_chain import (
    add_step_use_case,
    current_stage,
    get_step_count,
    get_steps,
    get_total_step_count,
)


@pytest.fixture()
def product_id(seeded_db, accounts) -> int:
    return register_product_use_case(db=seeded_db, name="Organic Apple", category="Fruit", caller=accounts.manufacturer)


def test_steps_are_returned_in_insertion_order(seeded_db, accounts, product_id) -> None:
    add_step_use_case(db=seeded_db, product_id=product_id, stage=Stage.MANUFACTURED, location="Factory", caller=accounts.manufacturer)
    add_step_use_case(db=seeded_db, product_id=product_id, stage="InTransit", location="Warehouse", caller=accounts.distributor)

    steps = get_steps(seeded_db, product_id)

    assert [(step.stage, step.location, step.actor) for step in steps] == [
        (Stage.MANUFACTURED, "Factory", accounts.manufacturer),
        (Stage.IN_TRANSIT, "Warehouse", accounts.distributor),
    ]
    assert [step.position for step in steps] == [0, 1]
    assert get_step_count(seeded_db, product_id) == 2


def test_full_lifecycle_by_each_actor(seeded_db, accounts, product_id) -> None:
    add_step_use_case(db=seeded_db, product_id=product_id, stage=0, location="Chengdu plant", caller=accounts.manufacturer)
    add_step_use_case(db=seeded_db, product_id=product_id, stage=1, location="Chongqing hub", caller=accounts.distributor)
    add_step_use_case(db=seeded_db, product_id=product_id, stage=2, location="Kunming depot", caller=accounts.distributor)
    add_step_use_case(db=seeded_db, product_id=product_id, stage=3, location="Xi'an store", caller=accounts.retailer)

    assert get_step_count(seeded_db, product_id) == 4
    assert current_stage(seeded_db, product_id) is Stage.SOLD


def test_inspector_cannot_add_steps(seeded_db, accounts, product_id) -> None:
    with pytest.raises(Unauthorized, match="addStep"):
        add_step_use_case(db=seeded_db, product_id=product_id, stage=0, location="Lab", caller=accounts.inspector)
    assert get_step_count(seeded_db, product_id) == 0


def test_unknown_product_is_not_found_and_nothing_is_written(seeded_db, accounts, product_id) -> None:
    with pytest.raises(NotFound) as exc:
        add_step_use_case(db=seeded_db, product_id=999, stage=0, location="Factory", caller=accounts.manufacturer)

    assert exc.value.http_status == 404
    assert exc.value.code == "PRODUCT_NOT_FOUND"
    assert get_total_step_count(seeded_db) == 0


@pytest.mark.parametrize("stage", [7, -1, "Shipped", True])
def test_unknown_stage_is_invalid_input(seeded_db, accounts, product_id, stage) -> None:
    with pytest.raises(InvalidInput, match="Unknown stage"):
        add_step_use_case(db=seeded_db, product_id=product_id, stage=stage, location="Factory", caller=accounts.manufacturer)


def test_blank_location_is_invalid_input(seeded_db, accounts, product_id) -> None:
    with pytest.raises(InvalidInput, match="location"):
        add_step_use_case(db=seeded_db, product_id=product_id, stage=0, location=" ", caller=accounts.manufacturer)


def test_backwards_stage_is_accepted_with_warning_by_default(seeded_db, accounts, product_id, caplog) -> None:
    add_step_use_case(db=seeded_db, product_id=product_id, stage=Stage.DELIVERED, location="Depot", caller=accounts.distributor)

    with caplog.at_level(logging.WARNING, logger="traceledger.use_cases.supply_chain"):
        add_step_use_case(db=seeded_db, product_id=product_id, stage=Stage.MANUFACTURED, location="Factory", caller=accounts.manufacturer)

    assert get_step_count(seeded_db, product_id) == 2
    assert "moves backwards" in caplog.text


def test_backwards_stage_is_rejected_when_order_is_enforced(seeded_db, accounts, product_id) -> None:
    add_step_use_case(db=seeded_db, product_id=product_id, stage=Stage.DELIVERED, location="Depot", caller=accounts.distributor)

    with pytest.raises(InvalidInput, match="cannot follow"):
        add_step_use_case(
            db=seeded_db,
            product_id=product_id,
            stage=Stage.IN_TRANSIT,
            location="Truck",
            caller=accounts.distributor,
            enforce_stage_order=True,
        )
    assert get_step_count(seeded_db, product_id) == 1


def test_repeated_stage_is_allowed_when_order_is_enforced(seeded_db, accounts, product_id) -> None:
    for location in ("Truck A", "Truck B"):
        add_step_use_case(
            db=seeded_db,
            product_id=product_id,
            stage=Stage.IN_TRANSIT,
            location=location,
            caller=accounts.distributor,
            enforce_stage_order=True,
        )
    assert [step.location for step in get_steps(seeded_db, product_id)] == ["Truck A", "Truck B"]


def test_steps_are_scoped_per_product(seeded_db, accounts, product_id) -> None:
    other_id = register_product_use_case(db=seeded_db, name="Milk", category="Dairy", caller=accounts.manufacturer)
    add_step_use_case(db=seeded_db, product_id=product_id, stage=0, location="Factory", caller=accounts.manufacturer)
    add_step_use_case(db=seeded_db, product_id=other_id, stage=0, location="Dairy farm", caller=accounts.manufacturer)

    assert [step.location for step in get_steps(seeded_db, other_id)] == ["Dairy farm"]
    assert get_total_step_count(seeded_db) == 2
    assert current_stage(seeded_db, 999) is None
