import pytest

from deployment.constants import (
    DEVELOPMENT_NETWORKS,
    ETHERSCAN_API_KEY_ENVVAR,
    NFT_MARKETPLACE,
    TAG_ALL,
    TAG_FRONTEND,
    TAG_NFT_MARKETPLACE,
    UPDATE_FRONT_END_ENVVAR,
)
from deployment.deployer import MarketplaceDeployer
from deployment.registry import DeploymentStore
from deployment.steps import DeploymentContext, run_steps, select_steps, steps_require_account
from tests.conftest import MARKETPLACE_ADDRESS, read_json, write_json

API_KEY = "ABCDEFGHIJKLMNOPQRSTUVWXYZ12345678"


def _context(config, account=None, explorer=None, container=None):
    store = DeploymentStore(chain_id=config.chain_id, registry_filepath=config.artifact_filepath)
    deployer = None
    if account:
        deployer = MarketplaceDeployer(
            config=config, account=account, autosign=True, store=store, explorer=explorer
        )
    containers = {NFT_MARKETPLACE: container} if container else None
    return DeploymentContext(config=config, store=store, deployer=deployer, containers=containers)


def test_select_steps():
    assert [s.name for s in select_steps([TAG_ALL])] == [
        "01-deploy-nft-marketplace",
        "99-update-front-end",
    ]
    assert [s.name for s in select_steps([TAG_NFT_MARKETPLACE])] == ["01-deploy-nft-marketplace"]
    assert [s.name for s in select_steps([TAG_FRONTEND])] == ["99-update-front-end"]
    assert [s.name for s in select_steps([TAG_FRONTEND, TAG_NFT_MARKETPLACE])] == [
        "01-deploy-nft-marketplace",
        "99-update-front-end",
    ]
    assert select_steps([]) == []

    with pytest.raises(ValueError, match="Unknown tags"):
        select_steps(["mocks"])


@pytest.mark.parametrize("network_name", DEVELOPMENT_NETWORKS)
def test_development_deployments_are_never_verified(
    make_config, network_name, deployer_account, explorer, marketplace_container
):
    config = make_config(network_name=network_name, environ={ETHERSCAN_API_KEY_ENVVAR: API_KEY})
    context = _context(config, deployer_account, explorer, marketplace_container)
    run_steps(select_steps([TAG_NFT_MARKETPLACE]), context)

    assert len(deployer_account.deployments) == 1
    assert explorer.published == []


@pytest.mark.parametrize("api_key, verified", [(API_KEY, True), ("", False), (None, False)])
def test_live_deployments_are_verified_with_api_key(
    make_config, api_key, verified, deployer_account, explorer, marketplace_container
):
    environ = {} if api_key is None else {ETHERSCAN_API_KEY_ENVVAR: api_key}
    config = make_config(network_name="sepolia", environ=environ)
    context = _context(config, deployer_account, explorer, marketplace_container)
    run_steps(select_steps([TAG_NFT_MARKETPLACE]), context)

    assert explorer.published == ([MARKETPLACE_ADDRESS] if verified else [])


def test_deploy_step_logs_framed_progress(
    capsys, make_config, deployer_account, marketplace_container, explorer
):
    config = make_config(environ={ETHERSCAN_API_KEY_ENVVAR: API_KEY})
    context = _context(config, deployer_account, explorer, marketplace_container)
    capsys.readouterr()

    run_steps(select_steps([TAG_NFT_MARKETPLACE]), context)

    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "-" * 52
    assert "Verifying..." in lines
    assert lines[-1] == "-" * 19


def test_deploy_step_requires_deployer(make_config):
    context = _context(make_config())
    with pytest.raises(ValueError, match="deployer"):
        run_steps(select_steps([TAG_NFT_MARKETPLACE]), context)


def test_deploy_and_update_front_end(
    frontend_dir, make_config, deployer_account, marketplace_container
):
    config = make_config(network_name="goerli", chain_id=5, environ={UPDATE_FRONT_END_ENVVAR: "1"})
    write_json(config.frontend.network_mapping_filepath, {})

    context = _context(config, deployer_account, container=marketplace_container)
    run_steps(select_steps([TAG_ALL]), context)
    assert read_json(config.frontend.network_mapping_filepath) == {"5": [MARKETPLACE_ADDRESS]}

    # redeploying to the same address leaves the mapping unchanged
    context = _context(config, deployer_account, container=marketplace_container)
    run_steps(select_steps([TAG_ALL]), context)
    assert read_json(config.frontend.network_mapping_filepath) == {"5": [MARKETPLACE_ADDRESS]}

    abi = read_json(config.frontend.abi_filepath)
    assert {entry["name"] for entry in abi} == {"listItem", "ItemListed"}


def test_front_end_flag_unset_writes_nothing(
    frontend_dir, artifacts_dir, make_config, deployer_account, marketplace_container
):
    config = make_config(network_name="local", chain_id=1337, environ={})
    mapping_filepath = config.frontend.network_mapping_filepath
    write_json(mapping_filepath, {})
    before = {p: (p.stat().st_mtime_ns, p.read_bytes()) for p in frontend_dir.iterdir()}

    context = _context(config, deployer_account, container=marketplace_container)
    run_steps(select_steps([TAG_ALL]), context)
    context.deployer.finalize()

    after = {p: (p.stat().st_mtime_ns, p.read_bytes()) for p in frontend_dir.iterdir()}
    assert after == before
    assert not artifacts_dir.exists()


def test_front_end_only_run_uses_registry(
    make_config, deployer_account, marketplace_container
):
    environ = {UPDATE_FRONT_END_ENVVAR: "true"}
    config = make_config(environ=environ)

    # first run deploys and records the deployment
    context = _context(config, deployer_account, container=marketplace_container)
    run_steps(select_steps([TAG_NFT_MARKETPLACE]), context)
    context.deployer.finalize()

    # a later run only publishes to the front end
    write_json(config.frontend.network_mapping_filepath, {"1": ["0x111"]})
    run_steps(select_steps([TAG_FRONTEND]), _context(config))

    assert read_json(config.frontend.network_mapping_filepath) == {
        "1": ["0x111"],
        str(config.chain_id): [MARKETPLACE_ADDRESS],
    }


def test_front_end_without_deployment(make_config):
    config = make_config(environ={UPDATE_FRONT_END_ENVVAR: "1"})
    write_json(config.frontend.network_mapping_filepath, {})
    with pytest.raises(DeploymentStore.NotFound):
        run_steps(select_steps([TAG_FRONTEND]), _context(config))


def test_only_deploying_steps_require_an_account():
    assert steps_require_account(select_steps([TAG_ALL]))
    assert steps_require_account(select_steps([TAG_NFT_MARKETPLACE]))
    assert not steps_require_account(select_steps([TAG_FRONTEND]))
