import os

from uagents_core.utils.registration import (
    register_chat_agent,
    RegistrationRequestCredentials,
)

from shared.config.settings import load_settings

settings = load_settings()

api_key = os.environ.get("AGENTVERSE_API_KEY")
if not api_key:
    raise SystemExit("AGENTVERSE_API_KEY must be set to register the agent")
if not settings.PUBLIC_BASE_URL:
    raise SystemExit("PUBLIC_BASE_URL must be set (e.g. http://<ALB-DNS>/proof)")

register_chat_agent(
    "Proof",
    f"{settings.PUBLIC_BASE_URL.rstrip('/')}/",
    active=True,
    credentials=RegistrationRequestCredentials(
        agentverse_api_key=api_key,
        agent_seed_phrase=settings.AGENT_SEED,
    ),
)
