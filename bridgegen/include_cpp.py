"""An include_cpp block: its parsed configuration and the Rust it expands to."""

from __future__ import annotations

from dataclasses import dataclass

from bridgegen.config import IncludeCppConfig, parse_config
from bridgegen.file_locations import FileLocationStrategy


@dataclass
class IncludeCpp:
    """A parsed include_cpp block."""

    config: IncludeCppConfig

    @classmethod
    def parse(cls, text: str) -> IncludeCpp:
        """Parse the body of an include_cpp block; raises DirectiveError."""
        return cls(parse_config(text))

    def rs_filename(self) -> str:
        """The name of the generated Rust file, derived from the configuration."""
        return f"{self.config.fingerprint()}.rs"

    def generate_rs(self, strategy: FileLocationStrategy | None = None) -> str:
        """Rust text that pulls in the generated bindings ("" when parse-only)."""
        if self.config.parse_only:
            return ""
        if strategy is None:
            strategy = FileLocationStrategy.from_env()
        return strategy.make_include(self.rs_filename())


def include_cpp_impl(text: str) -> str:
    """Expand an include_cpp block body to the Rust that replaces it."""
    return IncludeCpp.parse(text).generate_rs()