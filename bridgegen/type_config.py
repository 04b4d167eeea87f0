"""Registry of the types and functions a user asked to generate or block."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class TypeConfig:
    """Allowlist, blocklist and POD requests gathered from directives.

    Entries are plain strings because they may name functions as well as types.
    """

    pod_requests: list[str] = field(default_factory=list)
    allowlist: list[str] = field(default_factory=list)
    blocklist: list[str] = field(default_factory=list)

    def note_pod_request(self, name: str) -> None:
        self.pod_requests.append(name)

    def add_to_allowlist(self, item: str) -> None:
        self.allowlist.append(item)

    def add_to_blocklist(self, item: str) -> None:
        self.blocklist.append(item)

    def is_on_allowlist(self, cpp_name: str) -> bool:
        """Whether the user asked for this item to be generated."""
        return cpp_name in self.allowlist

    def is_on_blocklist(self, cpp_name: str) -> bool:
        return cpp_name in self.blocklist

    def allowlist_is_empty(self) -> bool:
        return not self.allowlist