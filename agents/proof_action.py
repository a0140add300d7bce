# proof_action.py
import json
import logging
from typing import Any, Dict, Optional, Tuple

from agents.proof_orchestrator import ProofRequestOrchestrator, build_orchestrator
from shared.config.settings import load_settings


def validate_input(input_payload: Any) -> Tuple[int, str]:
    """Check the submitted JSON and return (file_id, encryption_key)."""
    if not isinstance(input_payload, dict):
        raise ValueError("input must be a JSON object")

    file_id = input_payload.get("file_id")
    if isinstance(file_id, bool) or not isinstance(file_id, int) or file_id < 0:
        raise ValueError("'file_id' must be a non-negative integer")

    encryption_key = input_payload.get("encryption_key")
    if not isinstance(encryption_key, str) or not encryption_key.strip():
        raise ValueError("'encryption_key' is required")

    return file_id, encryption_key


def agent_submit(
    input_payload: Dict[str, Any], orchestrator: Optional[ProofRequestOrchestrator] = None
) -> Dict[str, Any]:
    file_id, encryption_key = validate_input(input_payload)

    if orchestrator is None:
        orchestrator = build_orchestrator(load_settings())

    result = orchestrator.request_contribution_proof(file_id, encryption_key)
    return result.model_dump()


if __name__ == "__main__":
    import sys

    from shared.config.logging_config import setup_logging

    log = logging.getLogger("proof_action")

    # exit 2: bad input, exit 1: configuration or workflow failure
    try:
        payload = json.loads(sys.stdin.read() or "{}")
        validate_input(payload)
    except ValueError as exc:
        print(f"Invalid input: {exc}", file=sys.stderr)
        sys.exit(2)

    try:
        settings = load_settings()
    except ValueError as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        sys.exit(1)
    setup_logging(settings.LOG_LEVEL)

    try:
        res = agent_submit(payload, orchestrator=build_orchestrator(settings))
    except Exception as exc:
        log.error(f"Proof request failed: {exc}")
        sys.exit(1)
    print(json.dumps(res, indent=2))
