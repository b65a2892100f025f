"""Meeting-room provisioning for learning sessions."""

import secrets
from typing import Protocol

from skilltrade.config import settings


class MeetingLinkProvisioner(Protocol):
    def provision(self, title: str) -> str:
        ...


class JitsiLinkProvisioner:
    """Jitsi rooms need no API call: any unguessable room name is a room."""

    def __init__(self, base_url: str, room_prefix: str):
        self.base_url = base_url.rstrip("/")
        self.room_prefix = room_prefix

    def provision(self, title: str) -> str:
        return f"{self.base_url}/{self.room_prefix}-{secrets.token_urlsafe(9)}"


default_provisioner = JitsiLinkProvisioner(
    settings.MEETING_BASE_URL,
    settings.MEETING_ROOM_PREFIX,
)
