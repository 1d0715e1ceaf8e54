"""Resolve maintainer handles to Slack mentions."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
import re

from .schema import MaintainerModel

__all__ = [
    "DEFAULT_WORKSPACES",
    "ContactResolver",
    "format_mention",
    "parse_mention",
]

# Searched in order; the first workspace holding an id wins.
DEFAULT_WORKSPACES: tuple[str, ...] = ("kata-containers", "cloud-native")

_MENTION_RE = re.compile(r"^<@(?P<contact>[^<>\s]+)>$")


def format_mention(contact_id: str) -> str:
    return f"<@{contact_id}>"


def parse_mention(text: str) -> str | None:
    """Return the contact id of a ``<@ID>`` mention, or ``None`` for plain text."""

    match = _MENTION_RE.match(text.strip())
    if match is None:
        return None
    return match.group("contact")


class ContactResolver:
    """Maps maintainer handles (``@alice``) to display contacts.

    The directory is treated as read-only for the lifetime of the resolver.
    """

    def __init__(
        self,
        directory: Mapping[str, MaintainerModel] | None = None,
        *,
        workspaces: Sequence[str] = DEFAULT_WORKSPACES,
    ) -> None:
        self._directory: Mapping[str, MaintainerModel] = dict(directory or {})
        self._workspaces = tuple(workspaces)

    def mention(self, handle: str) -> str:
        maintainer = self._directory.get(handle)
        if maintainer is None:
            return handle
        for workspace in self._workspaces:
            contact_id = maintainer.slack.get(workspace)
            if contact_id:
                return format_mention(contact_id)
        return maintainer.name or handle

    def resolve(self, handles: Iterable[str] | None) -> str:
        if not handles:
            return ""
        return " ".join(self.mention(handle) for handle in handles)
