from __future__ import annotations
import logging
import requests

log = logging.getLogger(__name__)

UNKNOWN_AGENT = "Unknown"


class AgentNameCache:
    """Freshdesk agent id -> display name, for one run.

    Misses go to ``client.get_agent``. Failed lookups are **not** cached so a
    later ticket for the same agent gets another try.
    """

    def __init__(self, client):
        self.client = client
        self.names: dict[str, str] = {}
        self.lookups = 0

    def resolve(self, agent_id) -> str:
        if not agent_id:
            return ""
        key = str(agent_id)
        if key in self.names:
            return self.names[key]

        self.lookups += 1
        try:
            agent = self.client.get_agent(agent_id) or {}
        except requests.RequestException as e:
            log.warning("Could not fetch agent name for ID %s (%s)", agent_id, e)
            return UNKNOWN_AGENT
        name = (agent.get("contact") or {}).get("name") or UNKNOWN_AGENT
        self.names[key] = name
        return name
