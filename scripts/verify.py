#!/usr/bin/python3

import click
from ape.cli import ConnectedProviderCommand, network_option

from deployment.config import DeploymentConfig
from deployment.constants import ETHERSCAN_API_KEY_ENVVAR, NFT_MARKETPLACE
from deployment.options import params_option
from deployment.registry import DeploymentStore
from deployment.utils import check_etherscan_plugin, get_explorer


@click.command(cls=ConnectedProviderCommand)
@network_option(required=True)
@params_option
@click.option(
    "--contract-name",
    "-c",
    help="Contract to verify",
    type=click.STRING,
    default=NFT_MARKETPLACE,
    show_default=True,
)
def cli(network, params_filepath, contract_name):
    """Verify a deployed contract recorded in the deployment registry."""
    config = DeploymentConfig.from_yaml(filepath=params_filepath)
    if config.is_development:
        raise click.ClickException(f"Cannot verify contracts on development network {network}.")
    check_etherscan_plugin(ETHERSCAN_API_KEY_ENVVAR)

    store = DeploymentStore(chain_id=config.chain_id, registry_filepath=config.artifact_filepath)
    record = store.get(contract_name)

    print(f"(i) Verifying {record.name} at {record.address}...")
    get_explorer().publish_contract(record.address)


if __name__ == "__main__":
    cli()
