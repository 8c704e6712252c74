from collections import OrderedDict, defaultdict
from pathlib import Path
from typing import Dict, List, NamedTuple, Optional

from ape.contracts import ContractInstance
from eth_typing import ABI, ChecksumAddress
from eth_utils import to_checksum_address

from deployment.utils import _load_json, write_json_atomic

ChainId = int
ContractName = str


class DeploymentRecord(NamedTuple):
    """Represents a single deployed contract, as tracked for one chain."""

    chain_id: ChainId
    name: ContractName
    address: ChecksumAddress
    abi: ABI
    tx_hash: Optional[str] = None
    block_number: Optional[int] = None
    deployer: Optional[str] = None


def _get_abi(contract_instance: ContractInstance) -> ABI:
    """Returns the ABI of a contract instance as plain JSON-serializable dicts."""
    contract_abi = list()
    for entry in contract_instance.contract_type.abi:
        contract_abi.append(entry.model_dump(mode="json", by_alias=True))
    return contract_abi


def record_from_instance(
    contract_instance: ContractInstance, chain_id: ChainId
) -> DeploymentRecord:
    receipt = contract_instance.receipt
    record = DeploymentRecord(
        chain_id=chain_id,
        name=contract_instance.contract_type.name,
        address=to_checksum_address(contract_instance.address),
        abi=_get_abi(contract_instance),
        tx_hash=receipt.txn_hash,
        block_number=receipt.block_number,
        deployer=receipt.transaction.sender,
    )
    return record


def read_registry(filepath: Path) -> List[DeploymentRecord]:
    data = _load_json(filepath)
    records = list()
    for chain_id, entries in data.items():
        for contract_name, artifacts in entries.items():
            record = DeploymentRecord(
                chain_id=int(chain_id),
                name=contract_name,
                address=artifacts["address"],
                abi=artifacts["abi"],
                tx_hash=artifacts.get("tx_hash"),
                block_number=artifacts.get("block_number"),
                deployer=artifacts.get("deployer"),
            )
            records.append(record)
    return records


def write_registry(records: List[DeploymentRecord], filepath: Path) -> Path:
    """
    Writes deployment records to a registry file.

    Records already present in the file are kept, except those for the same
    chain id and contract name, which are replaced by the new records.
    """
    if not records:
        print("No deployments to record.")
        return filepath

    merged = OrderedDict()
    if filepath.exists():
        print(f"Updating existing registry at {filepath}.")
        for record in read_registry(filepath):
            merged[(record.chain_id, record.name)] = record
    else:
        print(f"Creating new registry at {filepath}.")
    for record in records:
        merged[(record.chain_id, record.name)] = record

    # Sort registry entries to enforce common order
    entries = sorted(merged.values(), key=lambda r: (str(r.chain_id), r.name))

    data = defaultdict(dict)
    for entry in entries:
        entry_abi = list(entry.abi)
        entry_abi.sort(key=lambda d: (d["type"], d.get("name", "")))

        data[str(entry.chain_id)][entry.name] = {
            "address": entry.address,
            "abi": entry_abi,
            "tx_hash": entry.tx_hash,
            "block_number": entry.block_number,
            "deployer": entry.deployer,
        }

    filepath.parent.mkdir(parents=True, exist_ok=True)
    return write_json_atomic(data, filepath)


class DeploymentStore:
    """
    Run-scoped store of deployments, looked up by contract name.

    Deployments registered during the current run take precedence;
    otherwise the registry file is consulted for the store's chain id.
    """

    class NotFound(LookupError):
        """Raised when no deployment is known for a contract name"""

    def __init__(self, chain_id: ChainId, registry_filepath: Optional[Path] = None):
        self.chain_id = chain_id
        self.registry_filepath = registry_filepath
        self._records: Dict[ContractName, DeploymentRecord] = OrderedDict()

    def register(self, record: DeploymentRecord) -> None:
        if record.chain_id != self.chain_id:
            raise ValueError(
                f"Cannot register {record.name} for chain {record.chain_id} "
                f"in a store for chain {self.chain_id}."
            )
        self._records[record.name] = record

    def records(self) -> List[DeploymentRecord]:
        """Returns the deployments registered during this run."""
        return list(self._records.values())

    def get(self, name: ContractName) -> DeploymentRecord:
        record = self._records.get(name)
        if record:
            return record

        if self.registry_filepath and self.registry_filepath.exists():
            for record in read_registry(self.registry_filepath):
                if record.chain_id == self.chain_id and record.name == name:
                    return record

        raise self.NotFound(f"No deployment of '{name}' found for chain {self.chain_id}.")
