import pytest

from bridgegen.config import DirectiveError
from bridgegen.file_locations import FileLocationStrategy
from bridgegen.include_cpp import IncludeCpp, include_cpp_impl


def test_basic():
    include = IncludeCpp.parse("")
    assert include.config.type_config.allowlist == ["make_string"]
    assert include.config.inclusions == []


def test_rs_filename_is_stable():
    text = '#include "input.h" generate!("do_math") safety!(unsafe)'
    first = IncludeCpp.parse(text).rs_filename()
    second = IncludeCpp.parse(text).rs_filename()
    assert first == second
    assert first.endswith(".rs")
    assert first[:-3].isdigit()


def test_rs_filename_depends_on_config():
    a = IncludeCpp.parse('generate!("a")').rs_filename()
    b = IncludeCpp.parse('generate!("b")').rs_filename()
    assert a != b


def test_parse_only_generates_nothing():
    include = IncludeCpp.parse('parse_only #include "input.h" generate!("do_math")')
    assert include.generate_rs(FileLocationStrategy.from_env({})) == ""


def test_generate_rs_uses_strategy():
    include = IncludeCpp.parse('#include "input.h" generate!("do_math")')
    text = include.generate_rs(FileLocationStrategy.from_env({}))
    assert include.rs_filename() in text
    assert text.startswith("include!(concat!(")


def test_generate_rs_with_rs_file():
    include = IncludeCpp.parse('generate!("x")')
    strategy = FileLocationStrategy.from_env({"AUTOCXX_RS_FILE": "gen0.include.rs"})
    assert include.generate_rs(strategy) == 'include!("gen0.include.rs");'


def test_include_cpp_impl_parse_only():
    assert include_cpp_impl('parse_only generate!("x")') == ""


def test_include_cpp_impl_rejects_bad_directive():
    with pytest.raises(DirectiveError):
        include_cpp_impl('nonsense!("x")')