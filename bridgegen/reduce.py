"""Minimise a failing binding-generation case with creduce.

The headers are concatenated and preprocessed into one file. A small shell
script that reruns the generator and looks for the problem text serves as
the interestingness test, and creduce then shrinks the preprocessed header
while the problem still shows up.
"""

from __future__ import annotations

import argparse
import os
import shutil
import subprocess
import sys
import tempfile
from collections.abc import Iterable, Sequence
from pathlib import Path

DEFAULT_CREDUCE = "/usr/bin/creduce"
DEFAULT_COMPILER = "clang++"
GEN_TOOL = "autocxx-gen"

LISTING_NAME = "listing.h"
CONCAT_NAME = "concat.h"
RS_NAME = "input.rs"
TEST_SCRIPT_NAME = "test.sh"

_DESCRIPTION = """\
Command line utility to minimize bug cases in binding generation.

This is a wrapper for creduce.

Example command-line:
reduce -I my-inc-dir -h my-header -d 'generate!("MyClass")' -k -- --n 64 --remove-pass pass_line_markers
"""


def _announce_progress(msg: str) -> None:
    print(f"=== {msg} ===")


def _default_gen_path() -> Path:
    return Path(sys.argv[0]).resolve().parent / GEN_TOOL


def build_parser() -> argparse.ArgumentParser:
    """The command-line parser; arguments after ``--`` go to creduce."""
    parser = argparse.ArgumentParser(
        prog="reduce",
        description=_DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        add_help=False,
    )
    parser.add_argument("--help", action="help", help="show this help message and exit")
    parser.add_argument(
        "-I", "--inc", action="append", default=[], metavar="INCLUDE DIRS", help="include path"
    )
    parser.add_argument(
        "-D", "--define", action="append", default=[], metavar="DEFINE", help="macro definition"
    )
    parser.add_argument(
        "-h",
        "--header",
        action="append",
        required=True,
        metavar="HEADER",
        help="header file name",
    )
    parser.add_argument(
        "-d",
        "--directive",
        action="append",
        default=[],
        metavar="DIRECTIVE",
        help="directives to put within include_cpp!",
    )
    parser.add_argument(
        "-p", "--problem", required=True, metavar="PROBLEM", help="problem string we're looking for"
    )
    parser.add_argument(
        "--creduce", default=DEFAULT_CREDUCE, metavar="PATH", help="creduce binary location"
    )
    parser.add_argument(
        "--compiler", default=DEFAULT_COMPILER, metavar="PATH", help="C++ preprocessor to run"
    )
    parser.add_argument(
        "--gen",
        default=str(_default_gen_path()),
        metavar="PATH",
        help="binding generator run by the interestingness test",
    )
    parser.add_argument(
        "-o", "--output", metavar="OUTPUT", help="where to write minimized output"
    )
    parser.add_argument(
        "-k",
        "--keep-dir",
        dest="keep",
        action="store_true",
        help="keep the temporary directory for debugging purposes",
    )
    return parser


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    argv = list(argv)
    if "--" in argv:
        split = argv.index("--")
        own, extra = argv[:split], argv[split + 1 :]
    else:
        own, extra = argv, []
    args = build_parser().parse_args(own)
    args.creduce_args = extra
    return args


def create_concatenated_header(headers: Iterable[str], listing_path: str | os.PathLike[str]) -> None:
    """Write a header that includes each of ``headers`` in turn."""
    _announce_progress("Creating preprocessed header")
    text = "".join(f'#include "{header}"\n' for header in headers)
    Path(listing_path).write_text(text, encoding="utf-8")


def create_rs_file(rs_path: str | os.PathLike[str], directives: Iterable[str]) -> None:
    """Write a Rust file holding one include_cpp block with ``directives``."""
    _announce_progress("Creating Rust input file")
    body = "".join(directives)
    Path(rs_path).write_text(
        f"use autocxx::include_cpp;\ninclude_cpp! (\n{body});\n", encoding="utf-8"
    )


def create_interestingness_test(
    test_path: str | os.PathLike[str],
    problem: str,
    rs_file: str | os.PathLike[str],
    gen_path: str | os.PathLike[str],
) -> str:
    """Write the executable shell script creduce uses; returns its text."""
    _announce_progress("Creating interestingness test")
    # The header is referred to relative to the working directory, because
    # creduce runs the script elsewhere on a copy of it.
    content = (
        "#!/bin/sh\n"
        "\n"
        "DIR=$(pwd)\n"
        f"{os.fspath(gen_path)} -o $DIR -I $DIR {os.fspath(rs_file)} --gen-rs-complete 2>&1"
        f' | grep "{problem}"  >/dev/null 2>&1\n'
    )
    print(f"Interestingness test:\n{content}")
    path = Path(test_path)
    path.write_text(content, encoding="utf-8")
    path.chmod(0o700)
    return content


def preprocess(
    listing_path: str | os.PathLike[str],
    output_path: str | os.PathLike[str],
    includes: Iterable[str | os.PathLike[str]],
    defines: Iterable[str],
    compiler: str = DEFAULT_COMPILER,
) -> None:
    """Run the preprocessor over ``listing_path`` and save its output."""
    _announce_progress("Preprocessing")
    cmd = [compiler, "-E"]
    cmd.extend(f"-I{os.fspath(inc)}" for inc in includes)
    cmd.extend(f"-D{define}" for define in defines)
    cmd.append(os.fspath(listing_path))
    result = subprocess.run(cmd, stdout=subprocess.PIPE, check=False)
    text = result.stdout.decode("utf-8")
    Path(output_path).write_text(
        "".join(f"{line}\n" for line in text.splitlines()), encoding="utf-8"
    )


def run_creduce(
    creduce: str,
    test_path: str | os.PathLike[str],
    concat_path: str | os.PathLike[str],
    extra_args: Iterable[str] = (),
) -> int:
    """Run creduce on ``concat_path``; returns its exit status."""
    _announce_progress("creduce")
    cmd = [creduce, os.fspath(test_path), os.fspath(concat_path), *extra_args]
    return subprocess.run(cmd, check=False).returncode


def _print_minimized_case(concat_path: Path) -> None:
    _announce_progress("Completed. Minimized test case:")
    print(concat_path.read_text(encoding="utf-8"))


def _do_run(args: argparse.Namespace, tmp_dir: Path) -> None:
    listing_path = tmp_dir / LISTING_NAME
    create_concatenated_header(args.header, listing_path)
    concat_path = tmp_dir / CONCAT_NAME
    preprocess(listing_path, concat_path, args.inc, args.define, args.compiler)
    rs_path = tmp_dir / RS_NAME
    directives = [f'#include "{CONCAT_NAME}"\n', *(f"{d}\n" for d in args.directive)]
    create_rs_file(rs_path, directives)
    test_path = tmp_dir / TEST_SCRIPT_NAME
    create_interestingness_test(test_path, args.problem, rs_path, args.gen)
    run_creduce(args.creduce, test_path, concat_path, getattr(args, "creduce_args", []))
    if args.output is None:
        _print_minimized_case(concat_path)
    else:
        shutil.copyfile(concat_path, args.output)


def run(args: argparse.Namespace) -> None:
    """Reduce the case described by ``args`` inside a temporary directory."""
    tmp_dir = Path(tempfile.mkdtemp())
    try:
        _do_run(args, tmp_dir)
    finally:
        if args.keep:
            print(f"Keeping temp dir created at: {tmp_dir}")
        else:
            shutil.rmtree(tmp_dir, ignore_errors=True)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(sys.argv[1:] if argv is None else argv)
    run(args)
    return 0


if __name__ == "__main__":
    sys.exit(main())