"""
Proof Schema - Data structures for the contribution proof workflow
Defines Pydantic models for chain records, the TEE request payload and results
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, model_validator


class ProofJob(BaseModel):
    """TeePool job record; one file can have several"""
    job_id: int
    tee_address: str
    file_id: Optional[int] = None
    status: Optional[int] = None


class TeeDetails(BaseModel):
    """Executor (TEE) endpoint resolved from a job's tee address"""
    tee_url: str
    tee_public_key: str = ""
    tee_address: Optional[str] = None


class EncryptionParameters(BaseModel):
    iv_hex: str
    ephemeral_key_hex: str


class PermissionEntry(BaseModel):
    """DLP permission the TEE validates before running the proof"""
    address: str
    public_key: str
    iv: str
    ephemeral_key: str


class EnvVars(BaseModel):
    USER_EMAIL: str


class ProofRequestPayload(BaseModel):
    """Body of POST {tee_url}/RunProof"""
    job_id: int
    file_id: int
    nonce: str
    proof_url: str
    encryption_seed: str
    env_vars: EnvVars
    validate_permissions: List[PermissionEntry]
    encrypted_encryption_key: Optional[str] = None
    encryption_key: Optional[str] = None

    @model_validator(mode="after")
    def _one_encryption_key(self) -> "ProofRequestPayload":
        if (self.encrypted_encryption_key is None) == (self.encryption_key is None):
            raise ValueError("exactly one of encrypted_encryption_key or encryption_key must be set")
        return self

    def to_request_body(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


class TransactionReceipt(BaseModel):
    """Confirmed transaction, reduced to what the workflow reports"""
    transaction_hash: str
    block_number: int
    status: int = 1
    confirmations: int = 1


class ProofResult(BaseModel):
    """Outcome of one successful proof request"""
    file_id: int
    job_id: int
    proof_data: Any = Field(description="TEE response body, returned verbatim")
    tx_hash: str
