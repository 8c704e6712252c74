import typing
from pathlib import Path
from typing import Any, List, Optional

from ape.api import AccountAPI, ExplorerAPI
from ape.cli.choices import select_account
from ape.contracts.base import ContractContainer

from deployment.config import DeploymentConfig
from deployment.confirm import _confirm_deployment, _continue
from deployment.registry import (
    DeploymentRecord,
    DeploymentStore,
    record_from_instance,
    write_registry,
)
from deployment.utils import get_explorer


class MarketplaceDeployer:
    """
    Represents an ape account plus the deployment config of a target network,
    plus annotated deployment, verification and registry publication.
    """

    def __init__(
        self,
        config: DeploymentConfig,
        account: typing.Optional[AccountAPI] = None,
        autosign: bool = False,
        store: typing.Optional[DeploymentStore] = None,
        explorer: typing.Optional[ExplorerAPI] = None,
    ):
        self.config = config
        self.store = store or DeploymentStore(
            chain_id=config.chain_id, registry_filepath=config.artifact_filepath
        )
        self._explorer = explorer

        if account is None:
            self._account = select_account()
        else:
            self._account = account
        if autosign:
            print("WARNING: Autosign is enabled. Transactions will be signed automatically.")
            self._account.set_autosign(autosign)
        self._autosign = autosign

        # local networks are disposable, no need to ask
        self._interactive = not autosign and not config.is_development

        self._print_deployment_info()
        if self._interactive:
            _continue()

    def deploy(self, container: ContractContainer, args: List[Any]) -> DeploymentRecord:
        """
        Deploys a contract and waits for the configured number of confirmations.
        Any failure of the underlying deployment is propagated.
        """
        contract_name = container.contract_type.name
        if self._interactive:
            _confirm_deployment(contract_name, args)

        print(
            f'deploying "{contract_name}" from {self._account.address} '
            f"(waiting {self.config.block_confirmations} confirmations)"
        )
        instance = self._account.deploy(
            container,
            *args,
            publish=False,
            required_confirmations=self.config.block_confirmations,
        )
        record = record_from_instance(instance, chain_id=self.config.chain_id)
        print(
            f'deployed "{contract_name}" at {record.address} '
            f"(tx: {record.tx_hash}, block: {record.block_number})"
        )
        self.store.register(record)
        return record

    def verify(self, record: DeploymentRecord, args: List[Any]) -> None:
        """
        Publishes the contract source to the block explorer.
        The explorer recovers the constructor arguments from the creation transaction.
        """
        explorer = self._explorer or get_explorer()
        print(f"(i) Verifying {record.name} at {record.address}...")
        if args:
            pretty_args = "\n\t".join(str(arg) for arg in args)
            print(f"Constructor arguments:\n\t{pretty_args}")
        explorer.publish_contract(record.address)

    def finalize(self) -> Optional[Path]:
        """Publishes this run's deployments to the registry (live networks only)."""
        if self.config.is_development:
            return None
        filepath = write_registry(
            records=self.store.records(), filepath=self.config.artifact_filepath
        )
        print(f"(i) Registry written to {filepath}!")
        return filepath

    def _print_deployment_info(self):
        print(f"Account: {self._account.address}")
        self.config.print_info()
