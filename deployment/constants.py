from pathlib import Path

import deployment

#
# Filesystem
#

DEPLOYMENT_DIR = Path(deployment.__file__).parent
PROJECT_ROOT = DEPLOYMENT_DIR.parent
CONSTRUCTOR_PARAMS_DIR = DEPLOYMENT_DIR / "constructor_params"
ARTIFACTS_DIR = DEPLOYMENT_DIR / "artifacts"

NFT_MARKETPLACE_PARAMS_FILEPATH = CONSTRUCTOR_PARAMS_DIR / "nftmarketplace.yml"

#
# Networks
#

DEVELOPMENT_NETWORKS = ["local", "hardhat", "localhost"]

DEFAULT_BLOCK_CONFIRMATIONS = 3

#
# Environment
#

ETHERSCAN_API_KEY_ENVVAR = "ETHERSCAN_API_KEY"
UPDATE_FRONT_END_ENVVAR = "UPDATE_FRONT_END"

#
# Contracts
#

NFT_MARKETPLACE = "NFTMarketPlace"

#
# Steps
#

TAG_ALL = "all"
TAG_NFT_MARKETPLACE = "nftmarketplace"
TAG_FRONTEND = "frontend"

SUPPORTED_TAGS = [TAG_ALL, TAG_NFT_MARKETPLACE, TAG_FRONTEND]

#
# Front end
#

FRONT_END_CONSTANTS_DIR = Path("../nextjs-nft-marketplace/constants")
FRONT_END_NETWORK_MAPPING_FILENAME = "networkMapping.json"
FRONT_END_ABI_FILENAME = "NftMarketplace.json"
