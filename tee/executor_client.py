"""
Executor Client - HTTP interface to a TEE proof executor
Role: Sends a proof request to {tee_url}/RunProof and returns the executor's JSON answer

The executor is resolved on-chain (TeePool.tees) by the orchestrator; this
module only owns the HTTP exchange.
"""

import json
import logging
from typing import Any, Dict

import requests

from shared.errors import RemoteServiceError

logger = logging.getLogger(__name__)

RUN_PROOF_PATH = "/RunProof"


def _error_body(resp: requests.Response) -> Any:
    try:
        return resp.json()
    except ValueError:
        return resp.text


def run_proof(tee_url: str, payload: Dict[str, Any], timeout: float = 300.0) -> Any:
    """
    POST the proof request to the executor.

    Returns the parsed JSON body of any 2xx response unmodified.
    Raises RemoteServiceError on non-2xx status or transport failure; the
    error message embeds the executor's response body as compact JSON.
    """
    target = f"{tee_url.rstrip('/')}{RUN_PROOF_PATH}"
    logger.info(f"Sending proof request for job {payload.get('job_id')} to {target}")

    try:
        resp = requests.post(
            target,
            json=payload,
            headers={"Content-Type": "application/json"},
            timeout=timeout,
        )
    except requests.RequestException as exc:
        raise RemoteServiceError(f"TEE request failed: {exc}") from exc

    if not 200 <= resp.status_code < 300:
        error_data = _error_body(resp)
        raise RemoteServiceError(
            f"TEE request failed: {json.dumps(error_data, separators=(',', ':'))}",
            status_code=resp.status_code,
            body=error_data,
        )

    try:
        return resp.json()
    except ValueError as exc:
        raise RemoteServiceError(
            "TEE returned a non-JSON success body", status_code=resp.status_code, body=resp.text
        ) from exc
