"""Player agent (Spielerberater) information from an external profile."""

from datetime import datetime

from pydantic import BaseModel


class AgentInfo(BaseModel):
    """Agent found on a player's profile page."""

    name: str
    source_url: str
    fetched_at: datetime | None = None
