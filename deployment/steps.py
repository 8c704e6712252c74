import typing
from typing import Callable, Iterable, List, NamedTuple, Optional

from ape.contracts.base import ContractContainer

from deployment.config import DeploymentConfig
from deployment.constants import (
    NFT_MARKETPLACE,
    SUPPORTED_TAGS,
    TAG_ALL,
    TAG_FRONTEND,
    TAG_NFT_MARKETPLACE,
)
from deployment.deployer import MarketplaceDeployer
from deployment.frontend import FrontendSyncer
from deployment.registry import DeploymentStore
from deployment.utils import get_contract_container

SEPARATOR = "-" * 52
SHORT_SEPARATOR = "-" * 19


class DeploymentContext:
    """State shared by the steps of a single deployment run."""

    def __init__(
        self,
        config: DeploymentConfig,
        store: DeploymentStore,
        deployer: Optional[MarketplaceDeployer] = None,
        containers: Optional[typing.Dict[str, ContractContainer]] = None,
    ):
        self.config = config
        self.store = store
        self.deployer = deployer
        self.containers = containers or dict()

    def get_container(self, contract_name: str) -> ContractContainer:
        if contract_name in self.containers:
            return self.containers[contract_name]
        return get_contract_container(contract_name)

    def get_deployer(self) -> MarketplaceDeployer:
        if self.deployer is None:
            raise ValueError("This step requires a deployer account.")
        return self.deployer


class DeployStep(NamedTuple):
    name: str
    tags: List[str]
    run: Callable[[DeploymentContext], None]
    requires_account: bool = False


def deploy_nft_marketplace(context: DeploymentContext) -> None:
    deployer = context.get_deployer()

    print(SEPARATOR)
    args = context.config.constructor_args(NFT_MARKETPLACE)
    record = deployer.deploy(context.get_container(NFT_MARKETPLACE), args)

    if context.config.should_verify:
        print("Verifying...")
        deployer.verify(record, args)

    print(SHORT_SEPARATOR)


def update_front_end(context: DeploymentContext) -> None:
    if not context.config.update_front_end:
        return

    print("Updating front end...")
    record = context.store.get(NFT_MARKETPLACE)
    syncer = FrontendSyncer(config=context.config.frontend, chain_id=context.config.chain_id)
    syncer.sync(record)


STEPS = [
    DeployStep(
        name="01-deploy-nft-marketplace",
        tags=[TAG_ALL, TAG_NFT_MARKETPLACE],
        run=deploy_nft_marketplace,
        requires_account=True,
    ),
    DeployStep(
        name="99-update-front-end",
        tags=[TAG_ALL, TAG_FRONTEND],
        run=update_front_end,
    ),
]


def select_steps(tags: Iterable[str], steps: Optional[List[DeployStep]] = None) -> List[DeployStep]:
    """Returns the steps carrying any of the given tags, in execution order."""
    tags = set(tags)
    unknown_tags = tags - set(SUPPORTED_TAGS)
    if unknown_tags:
        raise ValueError(f"Unknown tags: {', '.join(sorted(unknown_tags))}")

    steps = STEPS if steps is None else steps
    return [step for step in sorted(steps, key=lambda s: s.name) if tags & set(step.tags)]


def run_steps(steps: List[DeployStep], context: DeploymentContext) -> None:
    for step in steps:
        step.run(context)


def steps_require_account(steps: List[DeployStep]) -> bool:
    return any(step.requires_account for step in steps)
