"""Wrappers for C integer types whose width depends on the platform.

Each wrapper holds one integer, keeps it within the range of the C type it
stands for, and carries the name under which that type is known to the
bridge. Wrappers of different C types never compare equal, even when they
hold the same number.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import ClassVar

from bridgegen.config import DirectiveError

DOCS_MARKER = "__docs"

DIRECTIVES = frozenset(
    {"include", "generate", "generate_pod", "exclude_utilities", "block", "safety"}
)

USAGE = """usage:  include_cpp! {
                   #include "path/to/header.h"
                   generate!(...)
                   generate_pod!(...)
               }
"""


def _bits(code: str) -> int:
    return struct.calcsize(code) * 8


@dataclass(frozen=True)
class CType:
    """A C integer value, checked against the range of its C type."""

    value: int

    bits: ClassVar[int] = 0
    signed: ClassVar[bool] = False
    cxx_name: ClassVar[str] = ""
    description: ClassVar[str] = ""

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise TypeError(f"{type(self).__name__} needs an int, not {type(self.value).__name__}")
        low, high = self.limits()
        if not low <= self.value <= high:
            raise OverflowError(
                f"{self.value} is out of range for {self.cxx_name} ({low}..{high})"
            )

    @classmethod
    def limits(cls) -> tuple[int, int]:
        """The smallest and largest value the C type can hold."""
        if cls.signed:
            half = 1 << (cls.bits - 1)
            return -half, half - 1
        return 0, (1 << cls.bits) - 1

    def __int__(self) -> int:
        return self.value

    def __index__(self) -> int:
        return self.value


@dataclass(frozen=True)
class CULong(CType):
    bits: ClassVar[int] = _bits("L")
    signed: ClassVar[bool] = False
    cxx_name: ClassVar[str] = "c_ulong"
    description: ClassVar[str] = "Newtype wrapper for an unsigned long"


@dataclass(frozen=True)
class CLong(CType):
    bits: ClassVar[int] = _bits("l")
    signed: ClassVar[bool] = True
    cxx_name: ClassVar[str] = "c_long"
    description: ClassVar[str] = "Newtype wrapper for a long"


@dataclass(frozen=True)
class CUShort(CType):
    bits: ClassVar[int] = _bits("H")
    signed: ClassVar[bool] = False
    cxx_name: ClassVar[str] = "c_ushort"
    description: ClassVar[str] = "Newtype wrapper for an unsigned short"


@dataclass(frozen=True)
class CShort(CType):
    bits: ClassVar[int] = _bits("h")
    signed: ClassVar[bool] = True
    cxx_name: ClassVar[str] = "c_short"
    description: ClassVar[str] = "Newtype wrapper for an short"


@dataclass(frozen=True)
class CUInt(CType):
    bits: ClassVar[int] = _bits("I")
    signed: ClassVar[bool] = False
    cxx_name: ClassVar[str] = "c_uint"
    description: ClassVar[str] = "Newtype wrapper for an unsigned int"


@dataclass(frozen=True)
class CInt(CType):
    bits: ClassVar[int] = _bits("i")
    signed: ClassVar[bool] = True
    cxx_name: ClassVar[str] = "c_int"
    description: ClassVar[str] = "Newtype wrapper for an int"


@dataclass(frozen=True)
class CUChar(CType):
    bits: ClassVar[int] = _bits("B")
    signed: ClassVar[bool] = False
    cxx_name: ClassVar[str] = "c_uchar"
    description: ClassVar[str] = "Newtype wrapper for an unsigned char"


def directive_usage(name: str, args: str = "") -> None:
    """Check a directive used on its own, outside an include_cpp block.

    Only the documentation marker is accepted there; anything else raises
    DirectiveError carrying the usage text.
    """
    if name not in DIRECTIVES:
        raise DirectiveError(f"unknown directive: {name}")
    if args.strip() == DOCS_MARKER:
        return None
    raise DirectiveError(USAGE)