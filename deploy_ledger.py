#!/usr/bin/env python3
"""Deploy the ledger: create schema, bootstrap admin, grant demo roles, write descriptors."""
from __future__ import annotations

from traceledger.config import settings
from traceledger.deployment import build_contract_manifest, build_deployment_info, write_json
from traceledger.ledger import Ledger
from traceledger.services.roles import Role
from traceledger.use_cases.role_manager import grant_role_use_case

# Account index -> role, mirroring the demo signer layout (account 0 is the deployer).
DEMO_ROLES: tuple[tuple[int, Role], ...] = (
    (1, Role.MANUFACTURER),
    (2, Role.DISTRIBUTOR),
    (3, Role.RETAILER),
    (4, Role.QUALITY_INSPECTOR),
)


def deploy() -> int:
    accounts = settings.account_list
    deployer = settings.DEPLOYER.strip().lower()

    print("🚀 Deploying supply-chain ledger...")
    print(f"   Deployer: {deployer}")
    print(f"   Store:    {settings.DATABASE_URL}")

    ledger = Ledger(settings.DATABASE_URL)
    try:
        ledger.bootstrap(deployer)

        if len(accounts) >= 5:
            print("\n👥 Granting demo roles...")
            with ledger.session() as db:
                for index, role in DEMO_ROLES:
                    changed = grant_role_use_case(db=db, role=role, identity=accounts[index], caller=deployer)
                    marker = "granted" if changed else "already held"
                    print(f"   {role.value} -> {accounts[index]} ({marker})")
        else:
            print("\n⚠️  Fewer than 5 accounts configured, skipping demo roles")
    finally:
        ledger.dispose()

    info = build_deployment_info(settings, deployer=deployer)
    write_json(settings.DEPLOYMENT_INFO_PATH, info.model_dump())
    write_json(settings.CONTRACTS_MANIFEST_PATH, build_contract_manifest(info))

    print("\n" + "=" * 80)
    print("✅ Deployment complete")
    print(f"   Network:  {info.network}")
    print(f"   Chain ID: {info.chainId}")
    for name, address in info.contracts.model_dump().items():
        print(f"   {name}: {address}")
    print("=" * 80)
    return 0


if __name__ == "__main__":
    raise SystemExit(deploy())
