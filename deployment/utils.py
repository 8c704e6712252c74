import json
import os
from pathlib import Path
from typing import Any, Dict

import yaml
from ape import networks, project
from ape.api import ExplorerAPI
from ape.contracts import ContractContainer

STANDARD_JSON_FORMAT = {"indent": 4, "separators": (",", ": ")}


def _load_yaml(filepath: Path) -> dict:
    """Loads a YAML file."""
    with open(filepath, "r") as file:
        return yaml.safe_load(file)


def _load_json(filepath: Path) -> Any:
    """Loads a JSON file."""
    with open(filepath, "r") as file:
        return json.load(file)


def _staging_filepath(filepath: Path) -> Path:
    return filepath.with_name(f".{filepath.name}.staged")


def _stage_json(data: Any, filepath: Path) -> Path:
    """
    Writes data next to filepath without touching filepath itself.
    The staged file is moved into place by _commit_staged.
    """
    staged_filepath = _staging_filepath(filepath)
    with open(staged_filepath, "w") as file:
        json.dump(data, file, **STANDARD_JSON_FORMAT)
    return staged_filepath


def _commit_staged(staged: Dict[Path, Path]) -> None:
    """
    Atomically replaces each target filepath with its staged file.
    Staged files left over after a failed replace are removed.
    """
    try:
        for filepath, staged_filepath in staged.items():
            os.replace(staged_filepath, filepath)
    finally:
        _discard_staged(staged)


def _discard_staged(staged: Dict[Path, Path]) -> None:
    for staged_filepath in staged.values():
        if staged_filepath.exists():
            staged_filepath.unlink()


def write_json_atomic(data: Any, filepath: Path) -> Path:
    """Writes a single JSON file via stage-then-rename."""
    staged = {filepath: _stage_json(data, filepath)}
    _commit_staged(staged)
    return filepath


def _get_dependency_contract_container(contract: str) -> ContractContainer:
    for dependency_name, dependency_versions in project.dependencies.items():
        if len(dependency_versions) > 1:
            raise ValueError(f"Ambiguous {dependency_name} dependency for {contract}")
        try:
            dependency_api = list(dependency_versions.values())[0]
            contract_container = getattr(dependency_api, contract)
            return contract_container
        except AttributeError:
            continue
    raise ValueError(f"No contract found with name '{contract}'.")


def get_contract_container(contract: str) -> ContractContainer:
    try:
        contract_container = getattr(project, contract)
    except AttributeError:
        # not in root project; check dependencies
        contract_container = _get_dependency_contract_container(contract)

    return contract_container


def get_explorer() -> ExplorerAPI:
    """
    Returns the block explorer of the connected network.
    Requires an explorer plugin such as ape-etherscan.
    """
    explorer = networks.provider.network.explorer
    if explorer is None:
        raise ValueError(
            f"No block explorer configured for network '{networks.provider.network.name}'. "
            "Please install the ape-etherscan plugin."
        )
    return explorer


def check_etherscan_plugin(api_key_envvar: str) -> None:
    """
    Checks that the ape-etherscan plugin is installed and that
    the API key environment variable is set.
    """
    try:
        import ape_etherscan  # noqa: F401
    except ImportError:
        raise ImportError("Please install the ape-etherscan plugin to verify contracts.")
    if not os.environ.get(api_key_envvar):
        raise ValueError(f"{api_key_envvar} is not set.")
