#!/usr/bin/python3

import click
from ape.cli import ConnectedProviderCommand, network_option

from deployment.config import DeploymentConfig
from deployment.constants import TAG_FRONTEND, UPDATE_FRONT_END_ENVVAR
from deployment.options import params_option
from deployment.registry import DeploymentStore
from deployment.steps import DeploymentContext, run_steps, select_steps


@click.command(cls=ConnectedProviderCommand, name="update-front-end")
@network_option(required=True)
@params_option
def cli(network, params_filepath):
    """Publish a previously deployed marketplace to the front end."""
    config = DeploymentConfig.from_yaml(filepath=params_filepath)
    if not config.update_front_end:
        click.secho(f"{UPDATE_FRONT_END_ENVVAR} is not set; nothing to do.", fg="yellow")
        return

    store = DeploymentStore(chain_id=config.chain_id, registry_filepath=config.artifact_filepath)
    context = DeploymentContext(config=config, store=store)
    run_steps(select_steps([TAG_FRONTEND]), context)


if __name__ == "__main__":
    cli()
