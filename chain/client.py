# chain/client.py
# EVM contract reader/writer for the Vana TeePool and DLP contracts (web3.py 7.x).
#
# Reads are plain eth_call; writes are built, signed locally with PRIVATE_KEY and
# sent raw, so no unlocked node account is needed.
#
# Usage (example):
#   export RPC_URL="https://rpc.moksha.vana.org"
#   export PRIVATE_KEY="0x..."
#   export TEE_POOL_ADDRESS="0x..."
#   python -c 'from chain.client import ChainClient; from shared.config.settings import load_settings; print(ChainClient.from_settings(load_settings()).address)'
#
import logging
import threading
import time
from typing import Any, Dict, Optional

from web3 import Web3
from web3.exceptions import TimeExhausted, Web3Exception

from chain.contracts import ContractRef
from shared.config.settings import Settings
from shared.errors import TransactionError, UnauthenticatedError
from shared.schemas.proof_schema import TransactionReceipt

logger = logging.getLogger(__name__)


def _plain(value: Any) -> Any:
    """Turn decoded struct tuples into dicts, recursively."""
    if hasattr(value, "_asdict"):
        return {k: _plain(v) for k, v in value._asdict().items()}
    if isinstance(value, list):
        return [_plain(v) for v in value]
    if isinstance(value, tuple):
        return tuple(_plain(v) for v in value)
    return value


class ChainClient:
    """
    Thin web3 wrapper exposing the three operations the proof workflow needs:
    read a contract, write a contract, wait for a receipt.
    """

    def __init__(
        self,
        rpc_url: str,
        private_key: Optional[str] = None,
        chain_id: Optional[int] = None,
        receipt_timeout_s: float = 120.0,
        poll_latency_s: float = 2.0,
        w3: Optional[Web3] = None,
    ):
        self.w3 = w3 or Web3(Web3.HTTPProvider(rpc_url))
        self.chain_id = chain_id
        self.receipt_timeout_s = receipt_timeout_s
        self.poll_latency_s = poll_latency_s
        self.account = self.w3.eth.account.from_key(private_key) if private_key else None
        # one nonce per in-flight submission from this wallet
        self._send_lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: Settings) -> "ChainClient":
        return cls(
            rpc_url=settings.RPC_URL,
            private_key=settings.PRIVATE_KEY or None,
            chain_id=settings.CHAIN_ID,
            receipt_timeout_s=settings.RECEIPT_TIMEOUT_S,
            poll_latency_s=settings.RECEIPT_POLL_S,
        )

    @property
    def address(self) -> Optional[str]:
        """Wallet address used as caller identity, None if no key is configured"""
        return self.account.address if self.account else None

    def _contract(self, ref: ContractRef):
        return self.w3.eth.contract(
            address=Web3.to_checksum_address(ref.address),
            abi=ref.abi,
            decode_tuples=True,
        )

    def read_contract(self, ref: ContractRef, function_name: str, *args: Any) -> Any:
        fn = getattr(self._contract(ref).functions, function_name)
        return _plain(fn(*args).call())

    def write_contract(self, ref: ContractRef, function_name: str, *args: Any, value: int = 0) -> str:
        """Sign and send a state-changing call. Returns the 0x-prefixed tx hash."""
        if self.account is None:
            raise UnauthenticatedError("Wallet not connected")

        sender = self.account.address
        fn = getattr(self._contract(ref).functions, function_name)
        try:
            with self._send_lock:
                tx = fn(*args).build_transaction({
                    "from": sender,
                    "value": value,
                    "nonce": self.w3.eth.get_transaction_count(sender, "pending"),
                    "chainId": self.chain_id or self.w3.eth.chain_id,
                })
                signed = self.account.sign_transaction(tx)
                tx_hash = self.w3.eth.send_raw_transaction(signed.raw_transaction)
        except Web3Exception as exc:
            raise TransactionError(f"{ref.name}.{function_name} submission failed: {exc}") from exc

        tx_hash_hex = Web3.to_hex(tx_hash)
        logger.info(f"Submitted {ref.name}.{function_name} from {sender}: {tx_hash_hex}")
        return tx_hash_hex

    def wait_for_transaction_receipt(self, tx_hash: str, confirmations: int = 1) -> TransactionReceipt:
        """
        Block until tx_hash is mined and has `confirmations` blocks on top
        (the inclusion block counts as the first).
        """
        try:
            receipt: Dict[str, Any] = self.w3.eth.wait_for_transaction_receipt(
                tx_hash, timeout=self.receipt_timeout_s, poll_latency=self.poll_latency_s
            )
        except TimeExhausted as exc:
            raise TransactionError(f"Transaction {tx_hash} was not mined in time", tx_hash=tx_hash) from exc

        if receipt.get("status", 1) == 0:
            raise TransactionError(f"Transaction {tx_hash} reverted", tx_hash=tx_hash)

        block_number = int(receipt["blockNumber"])
        deadline = time.monotonic() + self.receipt_timeout_s
        while self.w3.eth.block_number - block_number + 1 < confirmations:
            if time.monotonic() > deadline:
                raise TransactionError(
                    f"Transaction {tx_hash} did not reach {confirmations} confirmations", tx_hash=tx_hash
                )
            time.sleep(self.poll_latency_s)

        return TransactionReceipt(
            transaction_hash=Web3.to_hex(receipt["transactionHash"]),
            block_number=block_number,
            status=int(receipt.get("status", 1)),
            confirmations=confirmations,
        )
