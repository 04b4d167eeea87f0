import pytest

from bridgegen.config import (
    CppInclusion,
    DirectiveError,
    IncludeCppConfig,
    UnsafePolicy,
    parse_config,
    parse_safety,
    tokenize,
)


def kinds_and_values(text):
    return [(tok.kind, tok.value) for tok in tokenize(text)]


def test_safety_unsafe():
    assert parse_safety("unsafe") == UnsafePolicy.ALL_FUNCTIONS_SAFE


def test_safety_unsafe_ffi():
    assert parse_safety("unsafe_ffi") == UnsafePolicy.ALL_FUNCTIONS_SAFE


def test_safety_safe():
    assert parse_safety("") == UnsafePolicy.ALL_FUNCTIONS_UNSAFE


def test_safety_wrong_ident():
    with pytest.raises(DirectiveError, match="expected unsafe_ffi"):
        parse_safety("safe")


def test_safety_trailing_tokens():
    with pytest.raises(DirectiveError, match="unexpected tokens within safety directive"):
        parse_safety("unsafe_ffi extra")


def test_safety_non_ident_tokens():
    with pytest.raises(DirectiveError, match="unexpected tokens within safety directive"):
        parse_safety('"unsafe"')


def test_tokenize_directives():
    assert kinds_and_values('#include "input.h" generate!("do_math")') == [
        ("punct", "#"),
        ("ident", "include"),
        ("string", "input.h"),
        ("ident", "generate"),
        ("punct", "!"),
        ("punct", "("),
        ("string", "do_math"),
        ("punct", ")"),
    ]


def test_tokenize_skips_comments():
    text = 'generate!("a") // trailing\n/* block */ safety!(unsafe)'
    values = [tok.value for tok in tokenize(text)]
    assert values == ["generate", "!", "(", "a", ")", "safety", "!", "(", "unsafe", ")"]


def test_tokenize_escapes():
    assert tokenize(r'"a\"b\\c\n"')[0].value == 'a"b\\c\n'


def test_tokenize_offsets():
    tokens = tokenize("  abc def")
    assert [tok.offset for tok in tokens] == [2, 6]


def test_tokenize_unterminated_string():
    with pytest.raises(DirectiveError):
        tokenize('generate!("oops)')


def test_tokenize_unterminated_comment():
    with pytest.raises(DirectiveError):
        tokenize("/* never closed")


def test_basic_empty_config():
    config = parse_config("")
    assert config.inclusions == []
    assert config.unsafe_policy == UnsafePolicy.ALL_FUNCTIONS_UNSAFE
    assert not config.parse_only
    assert config.type_config.allowlist == ["make_string"]


def test_full_config():
    config = parse_config(
        """
        #include "input.h"
        #include "other.h"
        generate!("do_math")
        generate_pod!("Bob")
        block!("StringPiece")
        safety!(unsafe_ffi)
        """
    )
    assert config.inclusions == [CppInclusion("input.h"), CppInclusion("other.h")]
    assert config.unsafe_policy == UnsafePolicy.ALL_FUNCTIONS_SAFE
    assert config.type_config.allowlist == ["do_math", "Bob", "make_string"]
    assert config.type_config.pod_requests == ["Bob"]
    assert config.type_config.is_on_blocklist("StringPiece")


def test_exclude_utilities_skips_make_string():
    config = parse_config('generate!("x") exclude_utilities!')
    assert config.exclude_utilities
    assert config.type_config.allowlist == ["x"]


def test_parse_only():
    config = parse_config('parse_only #include "input.h" generate!("do_math") safety!(unsafe)')
    assert config.parse_only
    assert config.unsafe_policy == UnsafePolicy.ALL_FUNCTIONS_SAFE


def test_bang_is_optional():
    config = parse_config('generate("A::B::Bob")')
    assert config.type_config.is_on_allowlist("A::B::Bob")


def test_hash_must_be_include():
    with pytest.raises(DirectiveError, match="expected include"):
        parse_config('#define "FOO"')


def test_unknown_directive():
    with pytest.raises(DirectiveError, match="expected generate, generate_pod"):
        parse_config('allow!("x")')


def test_generate_needs_parentheses():
    with pytest.raises(DirectiveError, match="expected parentheses"):
        parse_config("generate!")


def test_generate_needs_string():
    with pytest.raises(DirectiveError, match="expected string literal"):
        parse_config("generate!(do_math)")


def test_generate_rejects_extra_arguments():
    with pytest.raises(DirectiveError, match="unexpected token"):
        parse_config('generate!("a" "b")')


def test_unclosed_parentheses():
    with pytest.raises(DirectiveError, match="unclosed delimiter"):
        parse_config('generate!("a"')


def test_bad_safety_in_config():
    with pytest.raises(DirectiveError, match="expected unsafe_ffi"):
        parse_config("safety!(maybe)")


def test_error_reports_offset():
    with pytest.raises(DirectiveError) as info:
        parse_config('generate!("a") bogus')
    assert info.value.offset == 15


def test_fingerprint_is_stable_and_discriminating():
    text = '#include "input.h" generate!("do_math")'
    first = parse_config(text).fingerprint()
    assert first == parse_config(text).fingerprint()
    assert first != parse_config('#include "input.h" generate!("do_maths")').fingerprint()
    assert 0 <= first < 2**64


def test_fingerprint_depends_on_policy():
    plain = IncludeCppConfig()
    safe = IncludeCppConfig(unsafe_policy=UnsafePolicy.ALL_FUNCTIONS_SAFE)
    assert plain.fingerprint() != safe.fingerprint()