"""
Publishes connection metadata of deployed contracts to a front-end project.

Two artifacts are maintained in the front-end's constants directory:

* a network mapping, ``{"<chainId>": ["<address>", ...]}``, which only ever grows
* the contract ABI, overwritten on every sync
"""

from pathlib import Path
from typing import Dict, List

from eth_typing import ABI

from deployment.config import FrontendConfig
from deployment.registry import ChainId, DeploymentRecord
from deployment.utils import _commit_staged, _discard_staged, _load_json, _stage_json

NetworkMapping = Dict[str, List[str]]


def add_contract_address(mapping: NetworkMapping, chain_id: ChainId, address: str) -> bool:
    """
    Adds an address to the list of the given chain id.
    Returns True if the mapping changed.
    """
    key = str(chain_id)
    if key not in mapping:
        mapping[key] = [address]
        return True
    if address in mapping[key]:
        return False
    mapping[key].append(address)
    return True


def read_network_mapping(filepath: Path) -> NetworkMapping:
    mapping = _load_json(filepath)
    if not isinstance(mapping, dict):
        raise FrontendSyncer.Invalid(f"Network mapping at {filepath} is not a JSON object.")
    for chain_id, addresses in mapping.items():
        if not isinstance(addresses, list):
            raise FrontendSyncer.Invalid(
                f"Network mapping at {filepath} has a non-list entry for chain {chain_id}."
            )
    return mapping


class FrontendSyncer:
    """Writes contract addresses and ABIs into a front-end project."""

    class Invalid(ValueError):
        """Raised when an existing front-end file is malformed"""

    def __init__(self, config: FrontendConfig, chain_id: ChainId):
        self.config = config
        self.chain_id = chain_id

    def _updated_mapping(self, record: DeploymentRecord):
        mapping = read_network_mapping(self.config.network_mapping_filepath)
        changed = add_contract_address(mapping, chain_id=self.chain_id, address=record.address)
        return mapping, changed

    def update_contract_addresses(self, record: DeploymentRecord) -> bool:
        """Registers the deployed address; the mapping is only rewritten when it changed."""
        mapping, changed = self._updated_mapping(record)
        if changed:
            self._write({self.config.network_mapping_filepath: mapping})
        return changed

    def update_abi(self, record: DeploymentRecord) -> ABI:
        self._write({self.config.abi_filepath: record.abi})
        return record.abi

    def sync(self, record: DeploymentRecord) -> List[Path]:
        """
        Updates both front-end artifacts together.

        Both files are prepared before either is replaced, so a malformed
        mapping leaves the ABI untouched as well. Returns the written filepaths.
        """
        mapping, changed = self._updated_mapping(record)
        pending = dict()
        if changed:
            pending[self.config.network_mapping_filepath] = mapping
        else:
            print(f"{record.address} already registered for chain {self.chain_id}.")
        pending[self.config.abi_filepath] = record.abi

        self._write(pending)
        for filepath in pending:
            print(f"(i) Front end file written to {filepath}")
        return list(pending)

    @staticmethod
    def _write(contents: Dict[Path, object]) -> None:
        staged = dict()
        try:
            for filepath, data in contents.items():
                staged[filepath] = _stage_json(data, filepath)
        except Exception:
            _discard_staged(staged)
            raise
        _commit_staged(staged)
