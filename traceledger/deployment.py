"""Deployment descriptor and component manifest for ledger clients."""
from __future__ import annotations

import hashlib
import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from .config import Settings
from .schemas import ContractAddresses, DeploymentInfo

logger = logging.getLogger(__name__)

COMPONENTS: tuple[str, ...] = ("RoleManager", "ProductRegistry", "SupplyChain", "QualityControl")

# (operation, stateMutability) exposed by each component.
COMPONENT_OPERATIONS: dict[str, tuple[tuple[str, str], ...]] = {
    "RoleManager": (
        ("hasRole", "view"),
        ("rolesOf", "view"),
        ("getUserCount", "view"),
        ("grantRole", "nonpayable"),
        ("revokeRole", "nonpayable"),
    ),
    "ProductRegistry": (
        ("registerProduct", "nonpayable"),
        ("getProduct", "view"),
        ("getProductCount", "view"),
        ("getAllProductIds", "view"),
    ),
    "SupplyChain": (
        ("addStep", "nonpayable"),
        ("getSteps", "view"),
        ("getStepCount", "view"),
    ),
    "QualityControl": (
        ("addReport", "nonpayable"),
        ("getReports", "view"),
        ("totalReports", "view"),
        ("passedReports", "view"),
        ("getPassRate", "view"),
    ),
}


def component_address(*, network: str, chain_id: int, deployer: str, component: str) -> str:
    """Deterministic 20-byte hex address for a component of this ledger."""
    seed = f"{network}:{chain_id}:{deployer.lower()}:{component}".encode("utf-8")
    return "0x" + hashlib.sha256(seed).hexdigest()[:40]


def build_deployment_info(settings: Settings, *, deployer: str | None = None, at: datetime | None = None) -> DeploymentInfo:
    owner = (deployer or settings.DEPLOYER).strip().lower()
    addresses = {
        name: component_address(
            network=settings.NETWORK_NAME,
            chain_id=settings.CHAIN_ID,
            deployer=owner,
            component=name,
        )
        for name in COMPONENTS
    }
    return DeploymentInfo(
        network=settings.NETWORK_NAME,
        chainId=settings.CHAIN_ID,
        deployer=owner,
        timestamp=(at or datetime.now(timezone.utc)).isoformat(),
        contracts=ContractAddresses(**addresses),
    )


def build_contract_manifest(info: DeploymentInfo) -> dict[str, dict[str, Any]]:
    """Per component ``{address, abi}``; the abi lists operation names and mutability."""
    addresses = info.contracts.model_dump()
    return {
        name: {
            "address": addresses[name],
            "abi": [
                {"name": operation, "type": "function", "stateMutability": mutability}
                for operation, mutability in COMPONENT_OPERATIONS[name]
            ],
        }
        for name in COMPONENTS
    }


def write_json(path: str | Path, payload: Any) -> Path:
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
    logger.info("Wrote %s", target)
    return target
