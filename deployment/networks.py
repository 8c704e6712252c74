from deployment.constants import DEVELOPMENT_NETWORKS


def is_development_network(network_name: str) -> bool:
    """Returns True if the named network is a local/development network."""
    return network_name in DEVELOPMENT_NETWORKS
