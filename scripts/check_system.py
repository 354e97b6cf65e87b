"""
System Check Script
Verifies configuration, artifact, network and deployer account before deploying
"""

import os
import sys
import asyncio
from web3 import AsyncWeb3
from loguru import logger

from blockchain.artifacts import ArtifactStore
from deployer.config import DeployConfig
from deployer.wallet_manager import WalletManager
from utils.rpc_manager import RPCManager

# Below this the deployer gets a warning, not a failure
MIN_BALANCE_ETH = 0.01


def check_configuration():
    """Load and validate the deployment configuration"""
    logger.info("Checking configuration...")

    config = DeployConfig.from_env()

    logger.success(f"  ✓ Network: {config.network_name} ({len(config.rpc_urls)} RPC endpoints)")
    logger.info(f"  Contract: {config.contract_name}")
    logger.info(f"  Artifacts: {config.artifacts_dir}")

    if config.private_key:
        logger.info("  Account: DEPLOYER_PRIVATE_KEY")
    else:
        logger.info("  Account: first node-managed account")

    return config


def check_artifact(config: DeployConfig) -> bool:
    """Check the contract artifact is compiled and deployable"""
    logger.info("Checking contract artifact...")

    artifact = ArtifactStore(config.artifacts_dir).get_artifact(config.contract_name)
    artifact.ensure_deployable()

    logger.success(f"  ✓ {artifact.fully_qualified_name} ({len(artifact.bytecode) // 2 - 1} bytes)")

    if artifact.needs_linking:
        libraries = [
            f"{source}:{name}"
            for source, names in artifact.link_references.items()
            for name in names
        ]
        logger.info(f"  Needs libraries: {', '.join(libraries)}")

    return True


async def check_network(config: DeployConfig) -> bool:
    """Check RPC connectivity, chain id and deployer balance"""
    logger.info("Checking RPC connection...")

    rpc_manager = RPCManager(
        config.rpc_urls,
        chain_id=config.chain_id,
        poa=config.poa,
        network_name=config.network_name
    )
    try:
        w3 = await rpc_manager.get_web3()
        block = await w3.eth.block_number

        logger.success(f"  ✓ Connected (chain {rpc_manager.chain_id}, block {block})")

        logger.info("Checking deployer balance...")

        wallet = await WalletManager.create(w3, config.private_key)
        balance = AsyncWeb3.from_wei(await wallet.get_balance(), 'ether')
    finally:
        await rpc_manager.close()

    logger.info(f"  {wallet.address}: {balance:.4f} ETH")

    if balance < MIN_BALANCE_ETH:
        logger.warning(f"  ⚠ Deployer balance low (recommended at least {MIN_BALANCE_ETH} ETH)")
    else:
        logger.success("  ✓ Deployer balance sufficient")

    return True


def main():
    """Run all system checks"""
    logger.remove()
    logger.add(sys.stderr, format="<level>{message}</level>", level=os.getenv("LOG_LEVEL", "INFO"))

    logger.info("=" * 70)
    logger.info("LoanStreamChain Deployment Check")
    logger.info("=" * 70)

    try:
        config = check_configuration()
    except Exception as e:
        logger.error(f"  ✗ Configuration: {e}")
        return 1

    checks = [
        ("Contract Artifact", lambda: check_artifact(config)),
        ("Network and Account", lambda: asyncio.run(check_network(config)))
    ]

    results = [("Configuration", True)]

    for name, check_func in checks:
        logger.info("")
        try:
            results.append((name, check_func()))
        except Exception as e:
            logger.error(f"  ✗ {name}: {e}")
            results.append((name, False))

    # Summary
    logger.info("")
    logger.info("=" * 70)

    passed = sum(1 for _, result in results if result)

    for name, result in results:
        status = "✓ PASS" if result else "✗ FAIL"
        logger.info(f"  {status}: {name}")

    logger.info(f"Total: {passed}/{len(results)} checks passed")

    if passed == len(results):
        logger.success("✅ Ready to deploy: python main.py")
        return 0

    logger.error("❌ Not ready - fix issues above")
    return 1


if __name__ == "__main__":
    sys.exit(main())
