"""Match extracted assignee names against a team roster."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class TeamMember:
    """A person tasks can be assigned to."""

    id: str
    full_name: str
    email: str | None = None
    username: str | None = None


def match_member(assignee: str | None, members: list[TeamMember]) -> TeamMember | None:
    """Find the team member an extracted *assignee* string refers to.

    Tries, case-insensitively: exact email, exact username, exact full name,
    then a first name shared by exactly one member, then a substring of
    exactly one member's full name or username.  Ambiguous names match nobody.
    """
    if not assignee or not assignee.strip() or not members:
        return None
    needle = assignee.strip().lower()

    for attr in ("email", "username", "full_name"):
        for member in members:
            value = getattr(member, attr)
            if value and value.lower() == needle:
                return member

    first_names = [m for m in members if m.full_name.split(" ")[0].lower() == needle]
    if len(first_names) == 1:
        return first_names[0]

    partial = [
        m
        for m in members
        if needle in m.full_name.lower() or (m.username and needle in m.username.lower())
    ]
    if len(partial) == 1:
        return partial[0]
    return None
