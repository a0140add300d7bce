from unittest.mock import Mock

import pytest

from chain.client import ChainClient
from shared.config.settings import Settings
from shared.schemas.proof_schema import EncryptionParameters, TransactionReceipt

TEE_POOL_ADDRESS = "0x3c92fd91639b41f13338ce62f19131e7d19eaa0d"
DLP_ADDRESS = "0x0161dfbf70a912668dd1b4365b43c1348e8bd3ab"
TEE_ADDRESS = "0xf084ca24b4e29aa843898e0b12c465fafd089965"
WALLET = "0x1111111111111111111111111111111111111111"
TX_HASH = "0x" + "ab" * 32


@pytest.fixture
def settings():
    return Settings(
        RPC_URL="http://localhost:8545",
        PRIVATE_KEY="",
        TEE_POOL_ADDRESS=TEE_POOL_ADDRESS,
        DATA_LIQUIDITY_POOL_ADDRESS=DLP_ADDRESS,
        USER_EMAIL="user@example.com",
        CONFIRMATIONS=1,
    )


@pytest.fixture
def encryption_params():
    return EncryptionParameters(iv_hex="00" * 16, ephemeral_key_hex="11" * 32)


def make_chain(job_ids=(7,), tee_public_key="tee-pub", dlp_public_key="dlp-pub", address=WALLET):
    """ChainClient double answering the TeePool/DLP reads the workflow makes."""
    chain = Mock(spec=ChainClient)
    chain.address = address
    chain.write_contract.return_value = TX_HASH
    chain.wait_for_transaction_receipt.return_value = TransactionReceipt(
        transaction_hash=TX_HASH, block_number=100
    )

    def read_contract(ref, function_name, *args):
        if function_name == "fileJobIds":
            return list(job_ids)
        if function_name == "jobs":
            return {"fileId": 42, "status": 1, "teeAddress": TEE_ADDRESS}
        if function_name == "tees":
            return {"teeAddress": TEE_ADDRESS, "url": "https://tee.example", "publicKey": tee_public_key}
        if function_name == "publicKey":
            return dlp_public_key
        raise AssertionError(f"unexpected read {function_name}")

    chain.read_contract.side_effect = read_contract
    return chain


@pytest.fixture
def chain():
    return make_chain()
