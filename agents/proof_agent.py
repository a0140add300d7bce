import asyncio
import json
import uuid
from datetime import datetime, timezone
from typing import Optional

from uagents import Context, Model, Protocol
from uagents_core.contrib.protocols.chat import (
    ChatMessage as CPChatMessage,
    ChatAcknowledgement as CPChatAcknowledgement,
    TextContent as CPTextContent,
    EndSessionContent as CPEndSessionContent,
    StartSessionContent as CPStartSessionContent,
    chat_protocol_spec,
)

from agents.proof_action import validate_input
from agents.proof_orchestrator import GENERIC_ERROR, build_orchestrator
from shared.agent_bootstrap import build_agent, run_agent, start_sidecars
from shared.config.settings import load_settings
from shared.errors import ProofRequestError
from shared.schemas.proof_schema import ProofResult

USAGE = (
    'Send {"file_id": <id>, "encryption_key": "<key>"} to request a TEE contribution proof '
    "for a file registered on the data liquidity pool."
)


class ContributionProofRequest(Model):
    file_id: int
    encryption_key: str


class ContributionProofResponse(Model):
    success: bool
    file_id: int
    job_id: Optional[int] = None
    tx_hash: Optional[str] = None
    proof_data: str = ""  # TEE response as JSON text
    error: Optional[str] = None


settings = load_settings()
orchestrator = build_orchestrator(settings)


async def run_workflow(ctx: Context, file_id: int, encryption_key: str) -> ContributionProofResponse:
    """Run the blocking workflow in an executor thread and shape the outcome as a response"""
    # chain + HTTP calls block; keep them off the event loop
    loop = asyncio.get_event_loop()
    try:
        result: ProofResult = await loop.run_in_executor(
            None,
            lambda: orchestrator.request_contribution_proof(file_id, encryption_key),
        )
    except ProofRequestError as exc:
        ctx.logger.error(f"Proof request for file {file_id} failed: {exc}")
        return ContributionProofResponse(success=False, file_id=file_id, error=str(exc))
    except Exception as exc:
        ctx.logger.error(f"Unexpected failure for file {file_id}: {exc!r}")
        return ContributionProofResponse(success=False, file_id=file_id, error=str(exc) or GENERIC_ERROR)

    ctx.logger.info(f"Proof for file {result.file_id} (job {result.job_id}) returned, tx {result.tx_hash}")
    return ContributionProofResponse(
        success=True,
        file_id=result.file_id,
        job_id=result.job_id,
        tx_hash=result.tx_hash,
        proof_data=json.dumps(result.proof_data),
    )


def _chat_text(text: str) -> CPChatMessage:
    return CPChatMessage(
        timestamp=datetime.now(timezone.utc),
        msg_id=uuid.uuid4(),
        content=[CPTextContent(type="text", text=text)],
    )


chat_proto = Protocol(spec=chat_protocol_spec)


@chat_proto.on_message(CPChatMessage)
async def handle_chat_protocol_message(ctx: Context, sender: str, msg: CPChatMessage):
    """Chat front end: a JSON proof request in the text runs the workflow"""
    ctx.logger.info(f"Received chat protocol message from {sender}")

    await ctx.send(sender, CPChatAcknowledgement(
        timestamp=datetime.now(timezone.utc),
        acknowledged_msg_id=msg.msg_id,
    ))

    text_parts = []
    for item in (msg.content or []):
        if isinstance(item, CPStartSessionContent):
            ctx.logger.info(f"Session started with {sender}")
        elif isinstance(item, CPTextContent):
            text_parts.append(item.text)
        elif isinstance(item, CPEndSessionContent):
            ctx.logger.info(f"Session ended with {sender}")

    raw_text = " ".join(text_parts).strip()
    if not raw_text:
        await ctx.send(sender, _chat_text(USAGE))
        return

    try:
        file_id, encryption_key = validate_input(json.loads(raw_text))
    except ValueError as exc:
        ctx.logger.info(f"Chat message from {sender} is not a proof request: {exc}")
        await ctx.send(sender, _chat_text(USAGE))
        return

    await ctx.send(sender, _chat_text(f"Requesting contribution proof for file {file_id}..."))
    response = await run_workflow(ctx, file_id, encryption_key)

    if response.success:
        reply = (
            f"Proof for file {response.file_id} (job {response.job_id}), tx {response.tx_hash}: "
            f"{response.proof_data}"
        )
    else:
        reply = f"Proof request for file {response.file_id} failed: {response.error}"
    await ctx.send(sender, _chat_text(reply))


@chat_proto.on_message(CPChatAcknowledgement)
async def handle_chat_protocol_ack(ctx: Context, sender: str, msg: CPChatAcknowledgement):
    ctx.logger.info(f"Received chat protocol acknowledgement from {sender} for message: {msg.acknowledged_msg_id}")


agent = build_agent("ProofAgent", settings, chat_proto=chat_proto)


@agent.on_event("startup")
async def startup(ctx: Context):
    ctx.logger.info(f"ProofAgent started, address: {agent.address}")
    ctx.logger.info(f"RPC Endpoint: {settings.RPC_URL}")

    if orchestrator.chain.address:
        ctx.logger.info(f"Wallet: {orchestrator.chain.address}")
    else:
        ctx.logger.error("PRIVATE_KEY not set - proof requests will be rejected")


@agent.on_message(model=ContributionProofRequest, replies=ContributionProofResponse)
async def handle_proof_request(ctx: Context, sender: str, msg: ContributionProofRequest):
    """Run the proof workflow for msg.file_id and reply with the TEE result"""
    ctx.logger.info(f"Received proof request for file {msg.file_id} from {sender}")
    await ctx.send(sender, await run_workflow(ctx, msg.file_id, msg.encryption_key))


if __name__ == "__main__":
    start_sidecars(settings, status_provider=orchestrator.status)
    run_agent(agent)
