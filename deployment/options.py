from pathlib import Path

import click

from deployment.constants import NFT_MARKETPLACE_PARAMS_FILEPATH, SUPPORTED_TAGS, TAG_ALL

tags_option = click.option(
    "--tags",
    "-t",
    help="Only run the deployment steps carrying these tags.",
    type=click.Choice(SUPPORTED_TAGS),
    multiple=True,
    default=[TAG_ALL],
    show_default=True,
)

params_option = click.option(
    "--params",
    "-p",
    "params_filepath",
    help="Deployment params YAML file.",
    type=click.Path(dir_okay=False, exists=True, path_type=Path),
    default=NFT_MARKETPLACE_PARAMS_FILEPATH,
    show_default=True,
)

autosign_option = click.option(
    "--auto",
    help="Automatically sign transactions.",
    is_flag=True,
)
