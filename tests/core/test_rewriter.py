"""Tests for sed-style substitutions."""

import pytest

from core.rules.rewriter import Substitution, SubstitutionSyntaxError, rewrite_args, rewrite_command


class TestSubstitutionParse:
    def test_basic(self):
        sub = Substitution.parse("s/foo/bar/")
        assert sub.pattern.pattern == "foo"
        assert sub.replacement == "bar"
        assert sub.global_ is False

    def test_global_flag(self):
        assert Substitution.parse("s/a/b/g").global_ is True

    def test_alternate_delimiter(self):
        sub = Substitution.parse("s|/usr/bin|/opt/bin|")
        assert sub.apply("/usr/bin/tool") == "/opt/bin/tool"

    def test_escaped_delimiter(self):
        sub = Substitution.parse(r"s/a\/b/c/")
        assert sub.pattern.pattern == "a/b"
        assert sub.apply("a/b") == "c"

    def test_empty_replacement(self):
        assert Substitution.parse("s/--verbose//").apply("--verbose build") == " build"

    @pytest.mark.parametrize("text", [
        "",
        "s",
        "x/a/b/",
        "s/a/b",
        "s/a",
        "s/a/b/c/d",
        "sa/b/c/",
        "s a b ",
    ])
    def test_malformed(self, text):
        with pytest.raises(SubstitutionSyntaxError):
            Substitution.parse(text)

    def test_unknown_flag(self):
        with pytest.raises(SubstitutionSyntaxError, match="unknown flag"):
            Substitution.parse("s/a/b/i")

    def test_invalid_regex(self):
        with pytest.raises(SubstitutionSyntaxError, match="invalid regex"):
            Substitution.parse("s/(/x/")

    def test_bad_group_reference(self):
        with pytest.raises(SubstitutionSyntaxError, match="invalid replacement"):
            Substitution.parse("s/(a)/$2/")

    def test_syntax_error_is_value_error(self):
        with pytest.raises(ValueError):
            Substitution.parse("nope")


class TestSubstitutionApply:
    def test_first_match_only(self):
        assert Substitution.parse("s/o/0/").apply("foo boo") == "f0o boo"

    def test_global(self):
        assert Substitution.parse("s/o/0/g").apply("foo boo") == "f00 b00"

    def test_no_match_unchanged(self):
        assert Substitution.parse("s/xyz/abc/").apply("hello") == "hello"

    def test_dollar_group(self):
        sub = Substitution.parse(r"s/(\w+)@(\w+)/$2 at $1/")
        assert sub.apply("user@host") == "host at user"

    def test_braced_and_named_groups(self):
        sub = Substitution.parse(r"s/(?P<cmd>\w+)-(\d)/${cmd} ${2}/")
        assert sub.apply("build-3") == "build 3"

    def test_literal_dollar(self):
        assert Substitution.parse("s/price/$$5/").apply("price") == "$5"

    def test_python_backrefs_still_work(self):
        assert Substitution.parse(r"s/(a)(b)/\2\1/").apply("ab") == "ba"

    def test_apply_n_counts(self):
        assert Substitution.parse("s/a/b/g").apply_n("aaa") == ("bbb", 3)


class TestRewriteArgs:
    def test_rewrite_single_arg(self):
        sub = Substitution.parse("s/^build$/build --release/")
        assert rewrite_args(["build"], sub) == ["build", "--release"]

    def test_rewrite_across_args(self):
        sub = Substitution.parse("s/-v -v/-vv/")
        assert rewrite_args(["-v", "-v", "test"], sub) == ["-vv", "test"]

    def test_anchored_no_match_is_noop(self):
        sub = Substitution.parse("s/^foo$/bar/")
        assert rewrite_args(["baz"], sub) == ["baz"]

    def test_no_match_preserves_args_exactly(self):
        args = ["a b", "", "c"]
        sub = Substitution.parse("s/zzz/y/")
        assert rewrite_args(args, sub) == args

    def test_match_retokenizes_on_whitespace(self):
        sub = Substitution.parse("s/x/y/")
        assert rewrite_args(["x", "two  words"], sub) == ["y", "two", "words"]

    def test_rewrite_to_nothing(self):
        sub = Substitution.parse("s/.*//")
        assert rewrite_args(["--flag"], sub) == []

    def test_accepts_tuple(self):
        sub = Substitution.parse("s/a/b/")
        assert rewrite_args(("a",), sub) == ["b"]


class TestRewriteCommand:
    def test_replace_binary(self):
        sub = Substitution.parse("s|^/usr/bin/npm|/usr/bin/pnpm|")
        assert rewrite_command("/usr/bin/npm", ["install"], sub) == ("/usr/bin/pnpm", ["install"])

    def test_rewrite_spans_binary_and_args(self):
        sub = Substitution.parse("s|python3 -m pip|uv pip|")
        assert rewrite_command("python3", ["-m", "pip", "install", "x"], sub) == ("uv", ["pip", "install", "x"])

    def test_no_match_keeps_original(self):
        sub = Substitution.parse("s/nomatch/x/")
        assert rewrite_command("/bin/ls", ["-la"], sub) == ("/bin/ls", ["-la"])

    def test_empty_result_keeps_binary(self):
        sub = Substitution.parse("s/.*//")
        assert rewrite_command("/bin/ls", ["-la"], sub) == ("/bin/ls", [])

    def test_prepend_wrapper(self):
        sub = Substitution.parse("s/^/nice -n 10 /")
        assert rewrite_command("make", ["all"], sub) == ("nice", ["-n", "10", "make", "all"])
