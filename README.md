# bridgegen

Helpers for working with `include_cpp!` binding blocks. The package parses
the directives in a block and decides where generated files belong. It
writes output files and wraps `creduce` to shrink a failing C++ case.

## Modules

- `bridgegen.config` parses directive text.
  - `parse_config(text)` reads the body of a block and returns an
    `IncludeCppConfig`.
  - `parse_safety(text)` reads the inside of a `safety!(...)` directive.
  - `tokenize(text)` splits text into identifier, string and punctuation
    tokens.
  - Malformed input raises `DirectiveError`. The exception carries the
    message and, where known, the character offset.
- `bridgegen.type_config.TypeConfig` holds the allowlist, the blocklist and
  the POD requests.
- `bridgegen.types` has `Namespace` and `TypeName`, which model C++
  qualified names. `TypeName.from_user_input("u64").to_cpp_name()` returns
  `"uint64_t"`. `TypeName.from_type_path("root::A::Bob")` drops the leading
  `root` segment.
- `bridgegen.file_locations.FileLocationStrategy` decides where generated
  files go.
  - `FileLocationStrategy.from_env()` picks a strategy from the environment:
    `AUTOCXX_RS_FILE`, then `AUTOCXX_RS`, then `OUT_DIR`.
    `FileLocationStrategy.custom(path)` uses a directory you give it.
  - `rs_dir()`, `include_dir()` and `cxx_dir()` return the output
    directories.
  - `make_include(fname)` returns the `include!(...)` line that refers to a
    generated Rust file.
  - `cargo_env_lines()` returns the `cargo:rustc-env=...` line for a custom
    location.
  - `LocationError` is raised when a strategy cannot answer the request.
- `bridgegen.include_cpp`:
  - `IncludeCpp.parse(text)` parses a block.
  - `rs_filename()` derives a stable file name from a digest of the
    configuration.
  - `generate_rs()` returns the include line, or `""` for `parse_only` blocks.
  - `include_cpp_impl(text)` does both steps at once.
- `bridgegen.outputs`:
  - `write_if_changed(directory, filename, content)` leaves a file untouched,
    timestamp included, when its content already matches. It returns whether
    it wrote the file.
  - `write_placeholders(outdir, counter, desired_number, extension)` pads the
    output with blank `gen<N>.<extension>` files up to `desired_number`. It
    raises `TooManySectionsError` when `counter` is already higher than that.
- `bridgegen.ctypes_wrappers` provides range-checked wrappers for C integer
  types: `CInt`, `CUInt`, `CLong`, `CULong`, `CShort`, `CUShort` and
  `CUChar`.
  - Each wrapper checks its value against the platform's width for the type.
    An out-of-range value raises `OverflowError`, and a value that is not an
    `int` raises `TypeError`.
  - `directive_usage(name, args)` rejects a directive used outside a block
    and gives the usage text.

## Parsing a block

```python
from bridgegen.config import parse_config, UnsafePolicy

cfg = parse_config('''
    #include "input.h"
    generate!("do_math")
    generate_pod!("Point")
    block!("Unwanted")
    safety!(unsafe)
''')
assert cfg.unsafe_policy is UnsafePolicy.ALL_FUNCTIONS_SAFE
assert cfg.type_config.is_on_allowlist("do_math")
assert cfg.type_config.is_on_allowlist("make_string")  # added unless exclude_utilities
assert cfg.type_config.pod_requests == ["Point"]
```

The parser accepts these directives:

- `#include "..."`
- `generate!("...")`
- `generate_pod!("...")`
- `block!("...")`
- `safety!(unsafe)`, `safety!(unsafe_ffi)` or `safety!()`
- `exclude_utilities!` and `parse_only!`, written without parentheses

## Reducing a failing case

`bridgegen-reduce` shrinks a C++ header that triggers a binding-generation
problem. It works in these steps:

1. It concatenates the headers and preprocesses them with `clang++ -E`.
2. It writes a Rust input file that holds your directives.
3. It writes a shell script as the interestingness test. The script runs the
   generator and searches its output for the problem text.
4. It runs `creduce` on the preprocessed header.

```
bridgegen-reduce -I my-inc-dir -h my-header.h -d 'generate!("MyClass")' -p "the error text" -k -- --n 64
```

Options:

- `-I/--inc` and `-D/--define` are passed to the preprocessor.
- `-h/--header` names a header. It is required and can be repeated. Because
  `-h` is taken, help is available only as `--help`.
- `-d/--directive` adds a line inside the block. It can be repeated.
- `-p/--problem` is the text to search for. It is required.
- `--creduce` is the path to `creduce`. The default is `/usr/bin/creduce`.
- `--compiler` is the preprocessor to run. The default is `clang++`.
- `--gen` is the binding generator that the interestingness test runs. The
  default is `autocxx-gen`, looked for next to the running program.
- `-o/--output` writes the minimised header to a file instead of printing
  it.
- `-k/--keep-dir` keeps the temporary directory.
- Anything after `--` is passed to `creduce` unchanged.

## What this package does not do

The package does not read C++ headers and does not generate binding code. It
provides no generator command. `bridgegen-reduce` needs an external binding
generator (see `--gen`), an external preprocessor and `creduce`. Either give
their paths or make sure they are installed where the defaults expect them.

## Running the tests

```
pip install .[test]
pytest
```