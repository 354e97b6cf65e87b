"""
Shared fixtures: an in-memory stand-in for AsyncWeb3 and Hardhat artifacts
"""

import json
import pytest
from loguru import logger

from blockchain.artifacts import ContractArtifact

# Hardhat's first default account and the address of its first deployment
DEPLOYER_ADDRESS = '0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266'
DEPLOYER_KEY = '0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80'
DEPLOYED_ADDRESS = '0x5FbDB2315678afecb367f032d93F642f64180aa3'
TX_HASH = b'\xab' * 32

LOAN_STREAM_ABI = [
    {
        "inputs": [],
        "stateMutability": "nonpayable",
        "type": "constructor"
    },
    {
        "inputs": [],
        "name": "owner",
        "outputs": [{"name": "", "type": "address"}],
        "stateMutability": "view",
        "type": "function"
    }
]
LOAN_STREAM_BYTECODE = '0x6080604052348015600f57600080fd5b50603f80601d6000396000f3fe'


class FakeConstructor:
    def __init__(self, contract_class, args):
        self.contract_class = contract_class
        self.args = args

    async def estimate_gas(self, transaction):
        eth = self.contract_class.eth
        eth.calls.append('estimate_gas')
        if eth.estimate_error:
            raise eth.estimate_error
        return eth.gas_estimate

    async def build_transaction(self, transaction):
        tx = dict(transaction)
        tx['data'] = self.contract_class.bytecode
        return tx


class FakeContractClass:
    def __init__(self, eth, abi, bytecode):
        self.eth = eth
        self.abi = abi
        self.bytecode = bytecode

    def constructor(self, *args):
        return FakeConstructor(self, args)


class FakeEth:
    """
    Records every network-facing call in self.calls
    """

    def __init__(self):
        self.calls = []

        self.chain_id_value = 31337
        self.gas_price_value = 2 * 10**9
        self.max_priority_fee_value = 10**9
        self.accounts_value = [DEPLOYER_ADDRESS]
        self.block_numbers = [1]
        self.latest_block = {'number': 1, 'baseFeePerGas': 10**9}
        self.balance = 10**21
        self.nonce = 0
        self.gas_estimate = 100000
        self.estimate_error = None

        self.receipt = {
            'status': 1,
            'contractAddress': DEPLOYED_ADDRESS,
            'blockNumber': 1,
            'gasUsed': 95000,
            'transactionHash': TX_HASH
        }
        self.receipt_error = None
        self.send_error = None

        self.sent_raw = []
        self.sent_transactions = []
        self.contract_class = None

    async def _value(self, name, value):
        self.calls.append(name)
        return value

    @property
    def chain_id(self):
        return self._value('chain_id', self.chain_id_value)

    @property
    def gas_price(self):
        return self._value('gas_price', self.gas_price_value)

    @property
    def max_priority_fee(self):
        return self._value('max_priority_fee', self.max_priority_fee_value)

    @property
    def accounts(self):
        return self._value('accounts', self.accounts_value)

    @property
    def block_number(self):
        if len(self.block_numbers) > 1:
            return self._value('block_number', self.block_numbers.pop(0))
        return self._value('block_number', self.block_numbers[0])

    def contract(self, abi=None, bytecode=None):
        self.contract_class = FakeContractClass(self, abi, bytecode)
        return self.contract_class

    async def get_block(self, block_identifier):
        self.calls.append('get_block')
        return self.latest_block

    async def get_balance(self, address):
        self.calls.append('get_balance')
        return self.balance

    async def get_transaction_count(self, address, block_identifier='latest'):
        self.calls.append('get_transaction_count')
        return self.nonce

    async def send_raw_transaction(self, raw_transaction):
        self.calls.append('send_raw_transaction')
        if self.send_error:
            raise self.send_error
        self.sent_raw.append(raw_transaction)
        return TX_HASH

    async def send_transaction(self, transaction):
        self.calls.append('send_transaction')
        if self.send_error:
            raise self.send_error
        self.sent_transactions.append(transaction)
        return TX_HASH

    async def wait_for_transaction_receipt(self, transaction_hash, timeout=120, poll_latency=0.1):
        self.calls.append('wait_for_transaction_receipt')
        if self.receipt_error:
            raise self.receipt_error
        return self.receipt


class FakeProvider:
    def __init__(self):
        self.disconnected = False

    async def disconnect(self):
        self.disconnected = True


class FakeAsyncWeb3:
    def __init__(self, connected=True):
        self.eth = FakeEth()
        self.provider = FakeProvider()
        self.connected = connected

    async def is_connected(self):
        return self.connected


@pytest.fixture(autouse=True)
def reset_logger():
    """Drop sinks added by a test so they don't outlive captured streams"""
    yield
    logger.remove()


@pytest.fixture
def fake_w3():
    return FakeAsyncWeb3()


@pytest.fixture
def artifact():
    return ContractArtifact(
        contract_name='LoanStreamChain',
        source_name='contracts/LoanStreamChain.sol',
        abi=LOAN_STREAM_ABI,
        bytecode=LOAN_STREAM_BYTECODE
    )


def write_artifact(root, source_name, contract_name, bytecode=LOAN_STREAM_BYTECODE, **extra):
    """Write a Hardhat-layout artifact and return its path"""
    directory = root / source_name
    directory.mkdir(parents=True, exist_ok=True)

    data = {
        "_format": "hh-sol-artifact-1",
        "contractName": contract_name,
        "sourceName": source_name,
        "abi": LOAN_STREAM_ABI,
        "bytecode": bytecode,
        "deployedBytecode": bytecode,
        "linkReferences": {},
        "deployedLinkReferences": {}
    }
    data.update(extra)

    path = directory / f"{contract_name}.json"
    path.write_text(json.dumps(data))
    (directory / f"{contract_name}.dbg.json").write_text(
        json.dumps({"_format": "hh-sol-dbg-1", "buildInfo": "../../build-info/x.json"})
    )
    return path


@pytest.fixture
def artifacts_dir(tmp_path):
    root = tmp_path / 'artifacts'
    write_artifact(root, 'contracts/LoanStreamChain.sol', 'LoanStreamChain')
    (root / 'build-info').mkdir()
    (root / 'build-info' / 'LoanStreamChain.json').write_text('{"input": {}}')
    return root
