"""
Contracts - ABI fragments and address registry for the Vana contracts we touch
Role: Maps a contract name (TeePoolProxy, DataLiquidityPoolProxy) to address + ABI
"""

from typing import Any, Dict, List, NamedTuple

from shared.config.settings import Settings
from shared.errors import ConfigurationError

TEE_POOL_ABI: List[Dict[str, Any]] = [
    {
        "type": "function",
        "name": "requestContributionProof",
        "stateMutability": "payable",
        "inputs": [{"name": "fileId", "type": "uint256"}],
        "outputs": [],
    },
    {
        "type": "function",
        "name": "fileJobIds",
        "stateMutability": "view",
        "inputs": [{"name": "fileId", "type": "uint256"}],
        "outputs": [{"name": "", "type": "uint256[]"}],
    },
    {
        "type": "function",
        "name": "jobs",
        "stateMutability": "view",
        "inputs": [{"name": "jobId", "type": "uint256"}],
        "outputs": [
            {
                "name": "",
                "type": "tuple",
                "internalType": "struct ITeePool.Job",
                "components": [
                    {"name": "fileId", "type": "uint256"},
                    {"name": "bidAmount", "type": "uint256"},
                    {"name": "status", "type": "uint8"},
                    {"name": "addedTimestamp", "type": "uint256"},
                    {"name": "ownerAddress", "type": "address"},
                    {"name": "teeAddress", "type": "address"},
                ],
            }
        ],
    },
    {
        "type": "function",
        "name": "tees",
        "stateMutability": "view",
        "inputs": [{"name": "teeAddress", "type": "address"}],
        "outputs": [
            {
                "name": "",
                "type": "tuple",
                "internalType": "struct ITeePool.TeeInfo",
                "components": [
                    {"name": "teeAddress", "type": "address"},
                    {"name": "url", "type": "string"},
                    {"name": "status", "type": "uint8"},
                    {"name": "amount", "type": "uint256"},
                    {"name": "withdrawnAmount", "type": "uint256"},
                    {"name": "jobsCount", "type": "uint256"},
                    {"name": "publicKey", "type": "string"},
                ],
            }
        ],
    },
]

DATA_LIQUIDITY_POOL_ABI: List[Dict[str, Any]] = [
    {
        "type": "function",
        "name": "publicKey",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "string"}],
    },
]

TEE_POOL = "TeePoolProxy"
DATA_LIQUIDITY_POOL = "DataLiquidityPoolProxy"

# contract name -> (settings field holding its address, abi)
_REGISTRY = {
    TEE_POOL: ("TEE_POOL_ADDRESS", TEE_POOL_ABI),
    DATA_LIQUIDITY_POOL: ("DATA_LIQUIDITY_POOL_ADDRESS", DATA_LIQUIDITY_POOL_ABI),
}


class ContractRef(NamedTuple):
    name: str
    address: str
    abi: List[Dict[str, Any]]


def resolve_contract(name: str, settings: Settings) -> ContractRef:
    """Resolve a deployed contract by name"""
    try:
        address_field, abi = _REGISTRY[name]
    except KeyError:
        raise ConfigurationError(f"Unknown contract: {name}") from None

    address = getattr(settings, address_field)
    if not address:
        raise ConfigurationError(f"{address_field} must be set to use {name}")
    return ContractRef(name=name, address=address, abi=abi)
