"""Parse include_cpp! directive blocks, lay out generated binding files, and reduce failing cases with creduce."""

__version__ = "0.1.0"
__all__ = [
    "config",
    "ctypes_wrappers",
    "file_locations",
    "include_cpp",
    "outputs",
    "reduce",
    "type_config",
    "types",
]