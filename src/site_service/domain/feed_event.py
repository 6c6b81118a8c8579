"""GitHub organization activity events and their HTML descriptions."""
from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from datetime import datetime
from html import escape
from typing import Any

from site_service.domain.value_objects.enums import LinkRole

GITHUB_URL = "https://github.com"


@dataclass(frozen=True, slots=True)
class FeedEvent:
    id: str
    type: str
    actor: dict[str, Any]
    repo: dict[str, Any]
    created_at: str
    payload: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_api(cls, raw: dict[str, Any]) -> FeedEvent:
        """Keep only the fields the feed renders.

        Raises KeyError / TypeError when the record is not an event.
        """
        actor = raw["actor"]
        repo = raw["repo"]
        return cls(
            id=str(raw["id"]),
            type=str(raw["type"]),
            actor={
                "login": actor.get("login", ""),
                "display_login": actor.get("display_login") or actor.get("login", ""),
                "avatar_url": actor.get("avatar_url", ""),
            },
            repo={"name": repo["name"]},
            created_at=str(raw["created_at"]),
            payload=raw.get("payload") or {},
        )

    @classmethod
    def from_member(cls, member: str) -> FeedEvent:
        """Read a stored member, canonical or a full API event."""
        return cls.from_api(json.loads(member))

    def to_member(self) -> str:
        """Canonical serialization; equal events always produce equal members."""
        return json.dumps(asdict(self), sort_keys=True, separators=(",", ":"))

    @property
    def score(self) -> int:
        return int(self.id)

    @property
    def created(self) -> datetime:
        return datetime.fromisoformat(self.created_at.replace("Z", "+00:00"))


def generate_url(role: LinkRole | str, event: FeedEvent) -> str:
    if role == LinkRole.ACTOR:
        return f"{GITHUB_URL}/{event.actor['login']}"
    if role == LinkRole.REPO:
        return f"{GITHUB_URL}/{event.repo['name']}"
    raise ValueError(f"Unknown link role: {role}")


def _link(href: str, text: str) -> str:
    return (
        f'<a href="{escape(href)}" target="_blank" rel="noopener noreferrer">'
        f"{escape(text)}</a>"
    )


def _branch(ref: str) -> str:
    return ref.removeprefix("refs/heads/")


def _describe(event: FeedEvent) -> str:
    payload = event.payload
    kind = event.type

    if kind == "CommitCommentEvent":
        comment = payload.get("comment", {})
        commit = str(comment.get("commit_id", ""))[:7]
        return f"commented on commit {_link(comment.get('html_url', ''), commit)} in"

    if kind == "CreateEvent":
        if payload.get("ref_type") == "repository":
            return "created the repository"
        return (
            f"created {escape(str(payload.get('ref_type', '')))} "
            f"<code>{escape(str(payload.get('ref', '')))}</code> at"
        )

    if kind == "DeleteEvent":
        return (
            f"deleted {escape(str(payload.get('ref_type', '')))} "
            f"<code>{escape(str(payload.get('ref', '')))}</code> at"
        )

    if kind == "IssueCommentEvent":
        issue = payload.get("issue", {})
        noun = "pull request" if "pull_request" in issue else "issue"
        url = payload.get("comment", {}).get("html_url", "")
        return f"commented on {noun} {_link(url, issue.get('title', ''))} in"

    if kind == "IssuesEvent":
        issue = payload.get("issue", {})
        verb = escape(str(payload.get("action", "updated")))
        return f"{verb} issue {_link(issue.get('html_url', ''), issue.get('title', ''))} on"

    if kind == "MemberEvent":
        member = payload.get("member", {})
        verb = escape(str(payload.get("action", "added")))
        return f"{verb} {escape(member.get('login', ''))} as a collaborator to"

    if kind == "PullRequestEvent":
        pull = payload.get("pull_request", {})
        verb = payload.get("action", "updated")
        if verb == "closed" and pull.get("merged"):
            verb = "merged"
        return f"{escape(str(verb))} pull request {_link(pull.get('html_url', ''), pull.get('title', ''))} on"

    if kind in ("PullRequestReviewEvent", "PullRequestReviewCommentEvent"):
        pull = payload.get("pull_request", {})
        return f"reviewed pull request {_link(pull.get('html_url', ''), pull.get('title', ''))} on"

    if kind == "PushEvent":
        branch = _branch(str(payload.get("ref", "")))
        branch_url = f"{generate_url(LinkRole.REPO, event)}/tree/{branch}"
        return (
            f'pushed to <a href="{escape(branch_url)}" target="_blank" rel="noopener noreferrer">'
            f"<code>{escape(branch)}</code></a> at"
        )

    if kind == "ReleaseEvent":
        release = payload.get("release", {})
        return f"published release {_link(release.get('html_url', ''), release.get('tag_name', ''))} for"

    return _SIMPLE_ACTIONS.get(kind, "did something on")


_SIMPLE_ACTIONS: dict[str, str] = {
    "ForkEvent": "forked",
    "GollumEvent": "updated the wiki of",
    "PublicEvent": "made public",
    "WatchEvent": "starred",
}


def generate_event(event: FeedEvent) -> str:
    """Describe what the actor did; the repo link is appended by the caller."""
    actor = _link(generate_url(LinkRole.ACTOR, event), event.actor["display_login"])
    return f"<strong>{actor}</strong> {_describe(event)}"
