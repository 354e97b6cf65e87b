"""
Deployment Configuration
Network and deployment settings from config/networks.json and the environment
"""

import os
import json
from typing import Dict, List, Optional
from loguru import logger
from dotenv import load_dotenv, find_dotenv

DEFAULT_CONFIG_PATH = 'config/networks.json'

DEFAULT_NETWORKS = {
    'default_network': 'localhost',
    'networks': {
        'localhost': {
            'rpc_url_env': 'LOCALHOST_RPC_URL',
            'default_rpc_url': 'http://127.0.0.1:8545',
            'chain_id': 31337,
            'poa': False,
            'confirmations': 1,
            'timeout_seconds': 60
        }
    },
    'deployment': {}
}

DEFAULT_DEPLOYMENT = {
    'contract_name': 'LoanStreamChain',
    'artifacts_dir': 'artifacts',
    'gas_multiplier': 1.2,
    'poll_latency_seconds': 1.0,
    'deployments_dir': 'deployments',
    'save_deployments': False,
    'update_env_file': False
}

TRUE_VALUES = ('1', 'true', 'yes', 'on')
FALSE_VALUES = ('0', 'false', 'no', 'off', '')


class ConfigurationError(Exception):
    """Missing or invalid deployment setting"""


def _env_float(name: str, default):
    value = os.getenv(name)
    if value is None or value == '':
        return default
    try:
        return float(value)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got '{value}'")


def _env_int(name: str, default):
    value = os.getenv(name)
    if value is None or value == '':
        return default
    try:
        return int(value)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got '{value}'")


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    if value.lower() in TRUE_VALUES:
        return True
    if value.lower() in FALSE_VALUES:
        return False
    raise ConfigurationError(f"{name} must be true or false, got '{value}'")


class DeployConfig:
    """
    Resolved settings for one deployment run
    """

    def __init__(self, network_name: str, network: Dict, deployment: Dict):
        """
        Initialize DeployConfig

        Args:
            network_name: Selected network
            network: That network's section of networks.json
            deployment: Deployment section of networks.json
        """
        self.network_name = network_name

        # Network
        self.rpc_urls = self._resolve_rpc_urls(network)
        self.chain_id: Optional[int] = network.get('chain_id')
        self.poa = bool(network.get('poa', False))
        self.confirmations = _env_int('DEPLOY_CONFIRMATIONS', network.get('confirmations', 1))
        self.timeout_seconds = _env_float('DEPLOY_TIMEOUT', network.get('timeout_seconds', 120))

        # Account (None = first account managed by the node)
        self.private_key: Optional[str] = os.getenv('DEPLOYER_PRIVATE_KEY') or None

        # Contract
        self.contract_name = os.getenv('DEPLOY_CONTRACT') or deployment['contract_name']
        self.artifacts_dir = os.getenv('ARTIFACTS_DIR') or deployment['artifacts_dir']
        self.libraries: Dict[str, str] = deployment.get('libraries', {})

        # Gas
        self.gas_multiplier = _env_float('GAS_MULTIPLIER', deployment['gas_multiplier'])
        self.gas_limit = _env_int('DEPLOY_GAS_LIMIT', deployment.get('gas_limit'))
        self.max_gas_price_gwei = _env_float('MAX_GAS_PRICE_GWEI', network.get('max_gas_price_gwei'))
        self.priority_fee_gwei = _env_float('PRIORITY_FEE_GWEI', network.get('priority_fee_gwei'))
        self.poll_latency = float(deployment['poll_latency_seconds'])

        # Records
        self.deployments_dir = deployment['deployments_dir']
        self.save_deployments = _env_bool('SAVE_DEPLOYMENTS', deployment['save_deployments'])
        self.update_env_file = _env_bool('UPDATE_ENV_FILE', deployment['update_env_file'])

        self._validate()

    @staticmethod
    def _resolve_rpc_urls(network: Dict) -> List[str]:
        urls = []

        primary = os.getenv(network['rpc_url_env']) if network.get('rpc_url_env') else None
        urls.append(primary or network.get('default_rpc_url'))

        for env_name in network.get('fallback_rpc_url_envs', []):
            urls.append(os.getenv(env_name))

        return [url for url in urls if url]

    def _validate(self):
        if not self.rpc_urls:
            raise ConfigurationError(f"No RPC URL configured for network '{self.network_name}'")
        if self.confirmations < 1:
            raise ConfigurationError("DEPLOY_CONFIRMATIONS must be at least 1")
        if self.timeout_seconds <= 0:
            raise ConfigurationError("DEPLOY_TIMEOUT must be positive")
        if self.gas_multiplier < 1:
            raise ConfigurationError("GAS_MULTIPLIER must be at least 1.0")
        if self.gas_limit is not None and self.gas_limit < 21000:
            raise ConfigurationError("DEPLOY_GAS_LIMIT must be at least 21000")

    @classmethod
    def from_env(cls, config_path: Optional[str] = None) -> 'DeployConfig':
        """
        Load .env and networks.json, then resolve the selected network

        Args:
            config_path: networks.json path (default: $DEPLOY_CONFIG or config/networks.json)

        Returns:
            DeployConfig
        """
        # .env of the directory the deployment is run from
        load_dotenv(find_dotenv(usecwd=True))

        config_path = config_path or os.getenv('DEPLOY_CONFIG', DEFAULT_CONFIG_PATH)
        config = cls._load_file(config_path)

        networks = config.get('networks', {})
        network_name = os.getenv('DEPLOY_NETWORK') or config.get('default_network', 'localhost')

        if network_name not in networks:
            raise ConfigurationError(
                f"Unknown network '{network_name}' (available: {', '.join(sorted(networks))})"
            )

        deployment = dict(DEFAULT_DEPLOYMENT)
        deployment.update(config.get('deployment', {}))

        logger.debug(f"Deploy config loaded from {config_path}, network {network_name}")
        return cls(network_name, networks[network_name], deployment)

    @staticmethod
    def _load_file(config_path: str) -> Dict:
        if not os.path.exists(config_path):
            logger.debug(f"{config_path} not found, using built-in localhost network")
            return DEFAULT_NETWORKS

        try:
            with open(config_path, 'r') as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Cannot read {config_path}: {e}") from e
