# shared/agent_bootstrap.py
from typing import Optional

from uagents import Agent, Protocol

from .config.settings import Settings
from .http_proxy import StatusProvider, start_health_proxy


def build_agent(name: str, settings: Settings, chat_proto: Optional[Protocol] = None) -> Agent:
    """
    Construct an Agent listening on UAGENTS_PORT with the given chat protocol included.
    The advertised endpoint is <PUBLIC_BASE_URL>/submit when set
    (e.g. http://<ALB>/proof), else the local uAgents server.
    """
    if settings.PUBLIC_BASE_URL:
        endpoint = f"{settings.PUBLIC_BASE_URL.rstrip('/')}/submit"
    else:
        endpoint = f"http://127.0.0.1:{settings.UAGENTS_PORT}/submit"

    agent = Agent(
        name=name,
        seed=settings.AGENT_SEED,
        port=settings.UAGENTS_PORT,
        endpoint=[endpoint],
    )

    # Include Chat protocol so Agentverse/ASI:One can chat to the agent;
    # include() rejects a chat_protocol_spec protocol without its handlers
    if chat_proto is not None:
        agent.include(chat_proto, publish_manifest=True)

    return agent


def start_sidecars(settings: Settings, status_provider: Optional[StatusProvider] = None):
    """Start the health/status/proxy sidecar on PORT."""
    return start_health_proxy(
        port=settings.PORT,
        service_base=settings.SERVICE_BASE,
        uagents_url=f"http://127.0.0.1:{settings.UAGENTS_PORT}",
        status_provider=status_provider,
    )


def run_agent(agent: Agent):
    agent.run()
