#!/usr/bin/python3

import click
from ape import accounts
from ape.cli import ConnectedProviderCommand, network_option

from deployment.config import DeploymentConfig
from deployment.deployer import MarketplaceDeployer
from deployment.options import autosign_option, params_option, tags_option
from deployment.registry import DeploymentStore
from deployment.steps import DeploymentContext, run_steps, select_steps, steps_require_account


@click.command(cls=ConnectedProviderCommand)
@network_option(required=True)
@click.option(
    "--account",
    "-a",
    "account_alias",
    help="Alias of the deployer account; prompted for when omitted and a step deploys.",
    type=click.STRING,
    required=False,
)
@tags_option
@params_option
@autosign_option
def cli(network, account_alias, tags, params_filepath, auto):
    """
    Deploy the NFT marketplace and optionally publish it to the front end.

    ape run deploy --network ethereum:sepolia --account deployer --tags all
    """
    config = DeploymentConfig.from_yaml(filepath=params_filepath)
    store = DeploymentStore(chain_id=config.chain_id, registry_filepath=config.artifact_filepath)
    steps = select_steps(tags)

    deployer = None
    if steps_require_account(steps):
        account = accounts.load(account_alias) if account_alias else None
        deployer = MarketplaceDeployer(config=config, account=account, autosign=auto, store=store)

    context = DeploymentContext(config=config, store=store, deployer=deployer)
    click.secho(f"Running {', '.join(step.name for step in steps)} on {network}", fg="green")
    run_steps(steps, context)

    if deployer:
        deployer.finalize()


if __name__ == "__main__":
    cli()
