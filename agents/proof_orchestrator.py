"""
Proof Orchestrator - Requests a contribution proof from a TEE for a registered file
Role: Drives the on-chain request, job/TEE resolution and the RunProof call

Flow for one file:
    requestContributionProof tx -> receipt -> fileJobIds (latest wins)
    -> jobs(jobId).teeAddress -> tees(teeAddress) -> POST {tee.url}/RunProof
"""

import logging
import threading
import time
from typing import Any, Callable, Dict, List, Mapping, Optional

from chain.client import ChainClient
from chain.contracts import DATA_LIQUIDITY_POOL, TEE_POOL, resolve_contract
from shared.config.settings import Settings
from shared.errors import (
    ChainReadError,
    JobNotFoundError,
    NoJobsFoundError,
    ProofRequestError,
    TeeNotFoundError,
    UnauthenticatedError,
)
from shared.schemas.proof_schema import (
    EncryptionParameters,
    EnvVars,
    PermissionEntry,
    ProofJob,
    ProofRequestPayload,
    ProofResult,
    TeeDetails,
)
from shared.utils.crypto_utils import get_encryption_parameters
from tee.executor_client import run_proof

logger = logging.getLogger(__name__)

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"
GENERIC_ERROR = "Failed to process TEE proof"


def get_dlp_public_key(chain: ChainClient, settings: Settings) -> str:
    """Public key of the data liquidity pool; read errors propagate as-is."""
    dlp = resolve_contract(DATA_LIQUIDITY_POOL, settings)
    return chain.read_contract(dlp, "publicKey")


def _as_mapping(record: Any) -> Optional[Dict[str, Any]]:
    if record is None:
        return None
    if isinstance(record, Mapping):
        return dict(record)
    if hasattr(record, "_asdict"):
        return record._asdict()
    return None


class ProofRequestOrchestrator:
    """
    Runs the contribution proof workflow for one file at a time.

    `is_processing` and `error` mirror what a UI would show while a request is
    in flight; they are informational and do not serialise concurrent calls.
    """

    def __init__(
        self,
        chain: ChainClient,
        settings: Settings,
        encryption_parameters: Callable[[], EncryptionParameters] = get_encryption_parameters,
        clock: Callable[[], float] = time.time,
    ):
        self.chain = chain
        self.settings = settings
        self.encryption_parameters = encryption_parameters
        self.clock = clock
        self.error: Optional[str] = None
        self._in_flight = 0
        self._lock = threading.Lock()

    @property
    def is_processing(self) -> bool:
        return self._in_flight > 0

    def status(self) -> Dict[str, Any]:
        return {"processing": self.is_processing, "error": self.error}

    @property
    def tee_pool(self):
        return resolve_contract(TEE_POOL, self.settings)

    def get_file_job_ids(self, file_id: int) -> List[int]:
        try:
            job_ids = self.chain.read_contract(self.tee_pool, "fileJobIds", file_id)
        except Exception as exc:
            logger.error(f"Error getting file job IDs: {exc}")
            raise ChainReadError("Failed to get job IDs for file") from exc
        return [int(job_id) for job_id in job_ids]

    def get_tee_details(self, job_id: int) -> TeeDetails:
        tee_pool = self.tee_pool
        try:
            job = _as_mapping(self.chain.read_contract(tee_pool, "jobs", job_id))
        except Exception as exc:
            logger.error(f"Error getting job {job_id}: {exc}")
            raise ChainReadError("Failed to get TEE details for job") from exc

        tee_address = (job or {}).get("teeAddress")
        if not tee_address or tee_address == ZERO_ADDRESS:
            raise JobNotFoundError("Job not found or missing TEE address")
        proof_job = ProofJob(
            job_id=job_id,
            tee_address=tee_address,
            file_id=job.get("fileId"),
            status=job.get("status"),
        )

        try:
            tee_info = _as_mapping(self.chain.read_contract(tee_pool, "tees", proof_job.tee_address))
        except Exception as exc:
            logger.error(f"Error getting TEE {proof_job.tee_address}: {exc}")
            raise ChainReadError("Failed to get TEE details for job") from exc

        if not tee_info or not tee_info.get("url"):
            raise TeeNotFoundError("TEE information not found")

        return TeeDetails(
            tee_url=tee_info["url"],
            tee_public_key=tee_info.get("publicKey") or "",
            tee_address=proof_job.tee_address,
        )

    def build_payload(
        self, job_id: int, file_id: int, encryption_key: str, tee: TeeDetails
    ) -> ProofRequestPayload:
        params = self.encryption_parameters()
        nonce = str(int(self.clock() * 1000))
        dlp_address = resolve_contract(DATA_LIQUIDITY_POOL, self.settings).address

        key_field = {}
        if tee.tee_public_key:
            # TODO: ECIES-encrypt encryption_key with tee.tee_public_key before sending
            key_field["encrypted_encryption_key"] = encryption_key
        else:
            key_field["encryption_key"] = encryption_key

        return ProofRequestPayload(
            job_id=job_id,
            file_id=file_id,
            nonce=nonce,
            proof_url=self.settings.PROOF_URL,
            encryption_seed=encryption_key,
            env_vars=EnvVars(USER_EMAIL=self.settings.USER_EMAIL),
            validate_permissions=[
                PermissionEntry(
                    address=dlp_address,
                    public_key=get_dlp_public_key(self.chain, self.settings),
                    iv=params.iv_hex,
                    ephemeral_key=params.ephemeral_key_hex,
                )
            ],
            **key_field,
        )

    def request_contribution_proof(self, file_id: int, encryption_key: str) -> ProofResult:
        """
        Ask the TEE pool for a contribution proof of `file_id` and deliver the
        request to the assigned TEE.

        The on-chain request stays committed if a later step fails; callers
        re-drive the whole workflow to retry.
        """
        with self._lock:
            self._in_flight += 1
        self.error = None

        try:
            if not self.chain.address:
                raise UnauthenticatedError("Wallet not connected")

            tx_hash = self.chain.write_contract(self.tee_pool, "requestContributionProof", file_id)
            receipt = self.chain.wait_for_transaction_receipt(
                tx_hash, confirmations=self.settings.CONFIRMATIONS
            )
            logger.info(f"Contribution proof request confirmed: {receipt.transaction_hash} (block {receipt.block_number})")

            job_ids = self.get_file_job_ids(file_id)
            if not job_ids:
                raise NoJobsFoundError("No jobs found for file")
            latest_job_id = job_ids[-1]

            tee = self.get_tee_details(latest_job_id)
            logger.info(f"Job {latest_job_id} assigned to TEE {tee.tee_address} at {tee.tee_url}")

            payload = self.build_payload(latest_job_id, file_id, encryption_key, tee)
            proof_data = run_proof(tee.tee_url, payload.to_request_body(), timeout=self.settings.REQUEST_TIMEOUT_S)

            return ProofResult(
                file_id=file_id,
                job_id=latest_job_id,
                proof_data=proof_data,
                tx_hash=receipt.transaction_hash,
            )
        except ProofRequestError as exc:
            logger.error(f"Error in proof process: {exc}")
            self.error = str(exc) or GENERIC_ERROR
            raise
        except Exception as exc:
            logger.exception("Error in proof process")
            self.error = str(exc) or GENERIC_ERROR
            raise
        finally:
            with self._lock:
                self._in_flight -= 1


def build_orchestrator(settings: Settings) -> ProofRequestOrchestrator:
    return ProofRequestOrchestrator(ChainClient.from_settings(settings), settings)
