"""Where generated files are written, and how generated Rust is found again."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

BUILD_DIR_NAME = "autocxx-build-dir"
RS_DIR_NAME = "rs"
INCLUDE_DIR_NAME = "include"
CXX_DIR_NAME = "cxx"
AUTOCXX_RS = "AUTOCXX_RS"
AUTOCXX_RS_FILE = "AUTOCXX_RS_FILE"
OUT_DIR = "OUT_DIR"


class LocationError(RuntimeError):
    """Raised when a strategy is asked for something it cannot provide."""


class LocationKind(Enum):
    CUSTOM = "custom"
    FROM_AUTOCXX_RS_FILE = "from_autocxx_rs_file"
    FROM_AUTOCXX_RS = "from_autocxx_rs"
    FROM_OUT_DIR = "from_out_dir"
    UNKNOWN_MAYBE_FROM_OUTDIR = "unknown_maybe_from_outdir"


def _rust_string(text: str) -> str:
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


@dataclass(frozen=True)
class FileLocationStrategy:
    """How generated files are located.

    Directories are usually derived from the build's output directory, but may
    be overridden by a custom location or by environment variables passed from
    the code generation phase to the include phase.
    """

    kind: LocationKind
    path: Path | None = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> FileLocationStrategy:
        """Choose a strategy from the environment variables that are set."""
        env = os.environ if environ is None else environ
        if AUTOCXX_RS_FILE in env:
            return cls(LocationKind.FROM_AUTOCXX_RS_FILE, Path(env[AUTOCXX_RS_FILE]))
        if AUTOCXX_RS in env:
            return cls(LocationKind.FROM_AUTOCXX_RS, Path(env[AUTOCXX_RS]))
        if OUT_DIR in env:
            return cls(LocationKind.FROM_OUT_DIR, Path(env[OUT_DIR]))
        return cls(LocationKind.UNKNOWN_MAYBE_FROM_OUTDIR)

    @classmethod
    def custom(cls, gen_dir: str | os.PathLike[str]) -> FileLocationStrategy:
        return cls(LocationKind.CUSTOM, Path(gen_dir))

    def make_include(self, fname: str) -> str:
        """Rust source text that includes the generated file ``fname``."""
        if self.kind is LocationKind.FROM_AUTOCXX_RS:
            return f"include!({_rust_string(str(self.path / fname))});"
        if self.kind is LocationKind.CUSTOM:
            raise LocationError("a custom location cannot be used to include generated code")
        if self.kind is LocationKind.FROM_AUTOCXX_RS_FILE:
            return f"include!({_rust_string(str(self.path))});"
        relative = f"/{BUILD_DIR_NAME}/{RS_DIR_NAME}/{fname}"
        return f'include!(concat!(env!("{OUT_DIR}"), {_rust_string(relative)}));'

    def _gen_dir(self, suffix: str) -> Path:
        if self.kind in (LocationKind.CUSTOM, LocationKind.FROM_AUTOCXX_RS):
            root = self.path
        elif self.kind is LocationKind.FROM_OUT_DIR:
            root = self.path / BUILD_DIR_NAME
        elif self.kind is LocationKind.UNKNOWN_MAYBE_FROM_OUTDIR:
            raise LocationError(f"Could not determine {OUT_DIR} or {AUTOCXX_RS} dir")
        else:
            raise LocationError(
                f"It's invalid to set {AUTOCXX_RS_FILE} during the codegen phase."
            )
        return root / suffix

    def rs_dir(self) -> Path:
        """Directory for generated Rust files."""
        return self._gen_dir(RS_DIR_NAME)

    def include_dir(self) -> Path:
        """Directory for generated C++ headers."""
        return self._gen_dir(INCLUDE_DIR_NAME)

    def cxx_dir(self) -> Path:
        """Directory for generated C++ implementation files."""
        return self._gen_dir(CXX_DIR_NAME)

    def cargo_env_lines(self) -> list[str]:
        """Build-script lines that pass the Rust output location to later phases."""
        if self.kind is not LocationKind.CUSTOM:
            return []
        return [f"cargo:rustc-env={AUTOCXX_RS}={self.rs_dir()}"]