from __future__ import annotations

import pytest

from ci_dashboard.contacts import ContactResolver, format_mention, parse_mention
from ci_dashboard.schema import MaintainerModel


@pytest.fixture
def resolver() -> ContactResolver:
    directory = {
        "@alice": MaintainerModel(name="Alice", slack={"kata-containers": "U123"}),
        "@carol": MaintainerModel(name="Carol", slack={"cloud-native": "U999"}),
        "@frank": MaintainerModel(
            name="Frank", slack={"cloud-native": "U555", "kata-containers": "U444"}
        ),
        "@grace": MaintainerModel(name="Grace", slack={"kata-containers": "", "cloud-native": "U777"}),
        "@dave": MaintainerModel(name="Dave"),
        "@erin": MaintainerModel(),
    }
    return ContactResolver(directory)


def test_known_maintainer_resolves_to_mention(resolver: ContactResolver) -> None:
    mention = resolver.mention("@alice")

    assert mention == "<@U123>"
    assert parse_mention(mention) == "U123"


def test_unknown_maintainer_is_returned_verbatim(resolver: ContactResolver) -> None:
    assert resolver.mention("@bob") == "@bob"
    assert parse_mention(resolver.mention("@bob")) is None


def test_primary_workspace_wins_over_fallback(resolver: ContactResolver) -> None:
    assert resolver.mention("@frank") == "<@U444>"
    assert resolver.mention("@carol") == "<@U999>"
    assert resolver.mention("@grace") == "<@U777>"


def test_falls_back_to_name_then_handle(resolver: ContactResolver) -> None:
    assert resolver.mention("@dave") == "Dave"
    assert resolver.mention("@erin") == "@erin"


def test_resolve_preserves_order(resolver: ContactResolver) -> None:
    assert resolver.resolve(["@bob", "@alice", "@dave"]) == "@bob <@U123> Dave"


@pytest.mark.parametrize("handles", [[], None])
def test_resolve_empty_handles(resolver: ContactResolver, handles: list[str] | None) -> None:
    assert resolver.resolve(handles) == ""


def test_custom_workspace_priority() -> None:
    directory = {"@frank": MaintainerModel(slack={"cloud-native": "U555", "kata-containers": "U444"})}
    resolver = ContactResolver(directory, workspaces=("cloud-native",))

    assert resolver.mention("@frank") == "<@U555>"


def test_mention_notation_round_trips() -> None:
    assert parse_mention(format_mention("UABC42")) == "UABC42"
    assert parse_mention("plain text") is None
