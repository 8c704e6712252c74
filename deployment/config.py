import os
import typing
from collections import OrderedDict
from pathlib import Path
from typing import Any, Dict, List, Mapping, NamedTuple, Optional

from ape import networks

from deployment.constants import (
    ARTIFACTS_DIR,
    DEFAULT_BLOCK_CONFIRMATIONS,
    ETHERSCAN_API_KEY_ENVVAR,
    FRONT_END_ABI_FILENAME,
    FRONT_END_CONSTANTS_DIR,
    FRONT_END_NETWORK_MAPPING_FILENAME,
    UPDATE_FRONT_END_ENVVAR,
)
from deployment.networks import is_development_network
from deployment.utils import _load_yaml

CONTRACT_CONSTRUCTOR_PARAMETER_KEY = "constructor"


def _get_section(params: typing.Dict, key: str, context: str = "params file") -> typing.Dict:
    """Returns an optional mapping section of the params, empty when absent."""
    section = params.get(key)
    if section is None:
        return dict()
    if not isinstance(section, dict):
        raise DeploymentConfig.Invalid(f"'{key}' in {context} must be a mapping.")
    return section


class FrontendConfig(NamedTuple):
    """Locations of the front-end project files written by the syncer."""

    constants_dir: Path
    network_mapping_filename: str = FRONT_END_NETWORK_MAPPING_FILENAME
    abi_filename: str = FRONT_END_ABI_FILENAME

    @property
    def network_mapping_filepath(self) -> Path:
        return self.constants_dir / self.network_mapping_filename

    @property
    def abi_filepath(self) -> Path:
        return self.constants_dir / self.abi_filename

    @classmethod
    def from_params(cls, params: Dict) -> "FrontendConfig":
        return cls(
            constants_dir=Path(params.get("dir", FRONT_END_CONSTANTS_DIR)),
            network_mapping_filename=params.get(
                "network_mapping", FRONT_END_NETWORK_MAPPING_FILENAME
            ),
            abi_filename=params.get("abi", FRONT_END_ABI_FILENAME),
        )


def _get_constructor_args(config: typing.Dict) -> typing.Dict[str, List[Any]]:
    contracts = config.get("contracts")
    if not contracts:
        raise DeploymentConfig.Invalid("Params file missing 'contracts' field.")
    if not isinstance(contracts, list):
        raise DeploymentConfig.Invalid("'contracts' in params file must be a list.")

    constructor_args = OrderedDict()
    for contract_info in contracts:
        if isinstance(contract_info, str):
            constructor_args[contract_info] = list()
        elif isinstance(contract_info, dict) and len(contract_info) == 1:
            contract_name = list(contract_info.keys())[0]  # only one entry
            contract_data = _get_section(contract_info, contract_name)
            parameters = contract_data.get(CONTRACT_CONSTRUCTOR_PARAMETER_KEY) or dict()
            if not isinstance(parameters, dict):
                raise DeploymentConfig.Invalid(
                    f"Malformed constructor parameters for {contract_name}."
                )
            constructor_args[contract_name] = list(parameters.values())
        else:
            raise DeploymentConfig.Invalid("Malformed contracts entry in params file.")

    return constructor_args


def _get_block_confirmations(config: typing.Dict, network_name: str) -> int:
    networks_params = _get_section(config, "networks")
    network_params = _get_section(networks_params, network_name, context="networks")
    block_confirmations = network_params.get("block_confirmations")
    # an explicit 0 is honoured; only a missing value falls back to the default
    if block_confirmations is None:
        return DEFAULT_BLOCK_CONFIRMATIONS

    if isinstance(block_confirmations, bool) or not isinstance(block_confirmations, int):
        raise DeploymentConfig.Invalid(
            f"block_confirmations for {network_name} must be an integer, "
            f"got {block_confirmations!r}."
        )
    if block_confirmations < 0:
        raise DeploymentConfig.Invalid(
            f"block_confirmations for {network_name} cannot be negative."
        )
    return block_confirmations


class DeploymentConfig(NamedTuple):
    """
    Everything the deployment steps need to know about the target environment,
    resolved once from the params file, the connected network and the
    process environment.
    """

    name: str
    network_name: str
    chain_id: int
    block_confirmations: int
    etherscan_api_key: Optional[str]
    update_front_end: bool
    contracts: typing.Dict[str, List[Any]]
    frontend: FrontendConfig
    artifacts_dir: Path = ARTIFACTS_DIR

    class Invalid(ValueError):
        """Raised when the deployment params are invalid"""

    @classmethod
    def from_params(
        cls,
        params: typing.Dict,
        network_name: str,
        chain_id: int,
        environ: Optional[Mapping[str, str]] = None,
    ) -> "DeploymentConfig":
        environ = os.environ if environ is None else environ
        if not params:
            raise cls.Invalid("Params file is empty.")
        if not isinstance(params, dict):
            raise cls.Invalid("Params file must contain a mapping.")

        deployment = _get_section(params, "deployment")
        name = deployment.get("name")
        if not name:
            raise cls.Invalid("deployment name is not set in params file.")

        artifacts = _get_section(params, "artifacts")
        return cls(
            name=name,
            network_name=network_name,
            chain_id=int(chain_id),
            block_confirmations=_get_block_confirmations(params, network_name),
            etherscan_api_key=environ.get(ETHERSCAN_API_KEY_ENVVAR) or None,
            update_front_end=bool(environ.get(UPDATE_FRONT_END_ENVVAR)),
            contracts=_get_constructor_args(params),
            frontend=FrontendConfig.from_params(_get_section(params, "frontend")),
            artifacts_dir=Path(artifacts.get("dir", ARTIFACTS_DIR)),
        )

    @classmethod
    def from_yaml(
        cls, filepath: Path, environ: Optional[Mapping[str, str]] = None
    ) -> "DeploymentConfig":
        """Loads the params file and binds it to ape's connected network."""
        network = networks.provider.network
        return cls.from_params(
            params=_load_yaml(filepath),
            network_name=network.name,
            chain_id=networks.provider.chain_id,
            environ=environ,
        )

    @property
    def is_development(self) -> bool:
        return is_development_network(self.network_name)

    @property
    def should_verify(self) -> bool:
        """Verification runs on live networks with an explorer API key configured."""
        return not self.is_development and bool(self.etherscan_api_key)

    @property
    def artifact_filepath(self) -> Path:
        return self.artifacts_dir / f"{self.name}.json"

    def constructor_args(self, contract_name: str) -> List[Any]:
        try:
            return list(self.contracts[contract_name])
        except KeyError:
            raise self.Invalid(f"Contract '{contract_name}' not found in params file.")

    def print_info(self) -> None:
        print(
            f"Deployment: {self.name}",
            f"Network: {self.network_name}",
            f"Chain ID: {self.chain_id}",
            f"Block confirmations: {self.block_confirmations}",
            f"Verify: {self.should_verify}",
            f"Update front end: {self.update_front_end}",
            f"Registry: {self.artifact_filepath}",
            sep="\n",
        )
