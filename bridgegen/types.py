"""Namespaces and qualified type names for C++ entities."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass

_SEPARATOR = "::"
_ROOT = "root"
_CVOID = "std::os::raw::c_void"

# Rust primitive names whose C++ spelling differs from a plain qualified name.
_KNOWN_CPP_NAMES = {
    "i8": "int8_t",
    "i16": "int16_t",
    "i32": "int32_t",
    "i64": "int64_t",
    "u8": "uint8_t",
    "u16": "uint16_t",
    "u32": "uint32_t",
    "u64": "uint64_t",
}


@dataclass(frozen=True, order=True)
class Namespace:
    """An immutable C++ namespace, stored as its list of segments."""

    segments: tuple[str, ...] = ()

    def push(self, segment: str) -> Namespace:
        """Return a new namespace nested one level deeper."""
        return Namespace((*self.segments, segment))

    @classmethod
    def from_user_input(cls, text: str) -> Namespace:
        """Build a namespace from text such as ``A::B``."""
        return cls(tuple(text.split(_SEPARATOR)))

    def depth(self) -> int:
        return len(self.segments)

    def display_suffix(self) -> str:
        """A human-readable suffix naming this namespace, or "" for the root."""
        if not self.segments:
            return ""
        return f" (in namespace {self})"

    def __iter__(self) -> Iterator[str]:
        return iter(self.segments)

    def __len__(self) -> int:
        return len(self.segments)

    def __str__(self) -> str:
        return _SEPARATOR.join(self.segments)


@dataclass(frozen=True, order=True)
class TypeName:
    """A type (or function) name together with its namespace.

    Namespaces are stored without any leading ``root`` segment, so a name
    outside every C++ namespace has an empty namespace.
    """

    namespace: Namespace
    name: str

    @classmethod
    def from_segments(cls, segments: Iterable[str]) -> TypeName:
        """Treat the last segment as the name and the rest as the namespace."""
        parts = list(segments)
        if not parts:
            raise ValueError("a type name needs at least one segment")
        return cls(Namespace(tuple(parts[:-1])), parts[-1])

    @classmethod
    def from_user_input(cls, text: str) -> TypeName:
        """Build from text such as ``A::B::Bob``."""
        return cls.from_segments(text.split(_SEPARATOR))

    @classmethod
    def from_type_path(cls, path: str | Iterable[str]) -> TypeName:
        """Build from a type path; a leading ``root`` segment is dropped."""
        parts = path.split(_SEPARATOR) if isinstance(path, str) else list(path)
        if parts and parts[0] == _ROOT:
            parts = parts[1:]
        return cls.from_segments(parts)

    def final_ident(self) -> str:
        """The bare name without namespace qualification."""
        return self.name

    def has_namespace(self) -> bool:
        return bool(self.namespace)

    def _known_cpp_name(self) -> str | None:
        if self.namespace:
            return None
        return _KNOWN_CPP_NAMES.get(self.name)

    def to_cpp_name(self) -> str:
        """The fully qualified C++ spelling of this name."""
        known = self._known_cpp_name()
        return known if known is not None else str(self)

    def to_type_path(self) -> str:
        """The path under which the type appears in generated bindings."""
        if self._known_cpp_name() is not None:
            return self.name
        return _SEPARATOR.join((_ROOT, *self.namespace, self.name))

    def is_cvoid(self) -> bool:
        return self.to_cpp_name() == _CVOID

    def __str__(self) -> str:
        return _SEPARATOR.join((*self.namespace, self.name))