from __future__ import annotations

from types import SimpleNamespace

import pytest

from traceledger.config import settings
from traceledger.ledger import Ledger
from traceledger.services.roles import Role
from traceledger.use_cases.role_manager import grant_role_use_case


@pytest.fixture()
def accounts():
    admin, manufacturer, distributor, retailer, inspector, outsider = settings.account_list[:6]
    return SimpleNamespace(
        admin=admin,
        manufacturer=manufacturer,
        distributor=distributor,
        retailer=retailer,
        inspector=inspector,
        outsider=outsider,
    )


@pytest.fixture()
def ledger(accounts):
    instance = Ledger("sqlite://")
    instance.bootstrap(accounts.admin)
    yield instance
    instance.dispose()


@pytest.fixture()
def db(ledger):
    with ledger.session() as session:
        yield session


@pytest.fixture()
def seeded_db(db, accounts):
    """Ledger session with the demo role layout applied."""
    for role, identity in (
        (Role.MANUFACTURER, accounts.manufacturer),
        (Role.DISTRIBUTOR, accounts.distributor),
        (Role.RETAILER, accounts.retailer),
        (Role.QUALITY_INSPECTOR, accounts.inspector),
    ):
        grant_role_use_case(db=db, role=role, identity=identity, caller=accounts.admin)
    return db
