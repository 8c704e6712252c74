import json
from types import SimpleNamespace

import pytest

from deployment.config import DeploymentConfig
from deployment.constants import NFT_MARKETPLACE

# Common constants
SEPOLIA_CHAIN_ID = 11155111
LOCAL_CHAIN_ID = 1337
DEPLOYER_ADDRESS = "0x" + "d" * 40
MARKETPLACE_ADDRESS = "0x5FbDB2315678afecb367f032d93F642f64180aa3"

MARKETPLACE_ABI = [
    {
        "type": "function",
        "name": "listItem",
        "stateMutability": "nonpayable",
        "inputs": [
            {"name": "nftAddress", "type": "address"},
            {"name": "tokenId", "type": "uint256"},
            {"name": "price", "type": "uint256"},
        ],
        "outputs": [],
    },
    {
        "type": "event",
        "name": "ItemListed",
        "anonymous": False,
        "inputs": [
            {"name": "seller", "type": "address", "indexed": True},
            {"name": "nftAddress", "type": "address", "indexed": True},
        ],
    },
]


def make_params(**overrides):
    params = {
        "deployment": {"name": "nftmarketplace"},
        "networks": {"local": {"block_confirmations": 0}, "sepolia": {"block_confirmations": 6}},
        "contracts": [NFT_MARKETPLACE],
    }
    params.update(overrides)
    return params


def write_json(filepath, data):
    with open(filepath, "w") as file:
        json.dump(data, file)


def read_json(filepath):
    with open(filepath, "r") as file:
        return json.load(file)


# Fakes of the ape objects touched during a deployment
class FakeAbiEntry:
    def __init__(self, data):
        self._data = data

    def model_dump(self, **kwargs):
        return dict(self._data)


class FakeContainer:
    def __init__(self, name=NFT_MARKETPLACE, abi=None):
        abi = MARKETPLACE_ABI if abi is None else abi
        self.contract_type = SimpleNamespace(name=name, abi=[FakeAbiEntry(e) for e in abi])


class FakeAccount:
    def __init__(self, address=DEPLOYER_ADDRESS, deploy_address=MARKETPLACE_ADDRESS):
        self.address = address
        self.deploy_address = deploy_address
        self.deployments = []
        self.autosign = False

    def set_autosign(self, enabled):
        self.autosign = enabled

    def deploy(self, container, *args, **kwargs):
        self.deployments.append((container, args, kwargs))
        receipt = SimpleNamespace(
            txn_hash="0x" + "1" * 64,
            block_number=len(self.deployments),
            transaction=SimpleNamespace(sender=self.address),
        )
        return SimpleNamespace(
            address=self.deploy_address,
            contract_type=container.contract_type,
            receipt=receipt,
        )


class FailingAccount(FakeAccount):
    def deploy(self, container, *args, **kwargs):
        raise RuntimeError("insufficient funds for gas")


class FakeExplorer:
    def __init__(self):
        self.published = []

    def publish_contract(self, address):
        self.published.append(address)


# Fixtures
@pytest.fixture
def frontend_dir(tmp_path):
    constants_dir = tmp_path / "nextjs-nft-marketplace" / "constants"
    constants_dir.mkdir(parents=True)
    return constants_dir


@pytest.fixture
def artifacts_dir(tmp_path):
    return tmp_path / "artifacts"


@pytest.fixture
def make_config(frontend_dir, artifacts_dir):
    def _make_config(network_name="sepolia", chain_id=SEPOLIA_CHAIN_ID, environ=None, **params):
        params = make_params(**params)
        params.setdefault("frontend", {"dir": str(frontend_dir)})
        params.setdefault("artifacts", {"dir": str(artifacts_dir)})
        return DeploymentConfig.from_params(
            params=params,
            network_name=network_name,
            chain_id=chain_id,
            environ=environ or {},
        )

    return _make_config


@pytest.fixture
def deployer_account():
    return FakeAccount()


@pytest.fixture
def explorer():
    return FakeExplorer()


@pytest.fixture
def marketplace_container():
    return FakeContainer()
