"""Tests for naming — case conventions and identifier quoting."""

from crosstype.naming import (
    is_bare_identifier,
    needs_quoting,
    quote_literal,
    split_words,
    to_camel_case,
    to_pascal_case,
    to_screaming_snake_case,
    to_snake_case,
)


class TestCaseConversion:
    def test_pascal_from_snake(self):
        assert to_pascal_case("user_profile") == "UserProfile"

    def test_pascal_from_kebab(self):
        assert to_pascal_case("in-progress") == "InProgress"

    def test_pascal_keeps_inner_capitals(self):
        assert to_pascal_case("HttpRequest") == "HttpRequest"

    def test_pascal_all_caps_word(self):
        assert to_pascal_case("URL") == "Url"

    def test_camel(self):
        assert to_camel_case("UserProfile") == "userProfile"
        assert to_camel_case("user_profile") == "userProfile"

    def test_camel_empty(self):
        assert to_camel_case("") == ""

    def test_snake_from_pascal(self):
        assert to_snake_case("MaxRetries") == "max_retries"

    def test_snake_keeps_underscores(self):
        assert to_snake_case("max_retries") == "max_retries"

    def test_snake_all_caps(self):
        assert to_snake_case("MAX_RETRIES") == "max_retries"

    def test_screaming_snake(self):
        assert to_screaming_snake_case("maxRetries") == "MAX_RETRIES"

    def test_acronym_stays_one_word(self):
        assert to_snake_case("MaxHTTPRetries") == "max_http_retries"
        assert to_screaming_snake_case("MaxHTTPRetries") == "MAX_HTTP_RETRIES"
        assert to_pascal_case("HTTPServer") == "HttpServer"
        assert to_camel_case("HTTPServer") == "httpServer"

    def test_split_words(self):
        assert split_words("parseURLPath") == ["parse", "URL", "Path"]
        assert split_words("in-progress") == ["in", "progress"]

    def test_conversion_is_deterministic(self):
        assert to_camel_case("some_name") == to_camel_case("some_name")


class TestQuoting:
    def test_bare_identifiers(self):
        assert is_bare_identifier("field_1")
        assert is_bare_identifier("_private")

    def test_hyphen_is_not_bare(self):
        assert not is_bare_identifier("my-field")

    def test_leading_digit_is_not_bare(self):
        assert not is_bare_identifier("1st")

    def test_keyword_needs_quoting(self):
        assert needs_quoting("type", frozenset({"type"}))
        assert not needs_quoting("kind", frozenset({"type"}))

    def test_quote_literal_preserves_text(self):
        assert quote_literal("my-field") == '"my-field"'

    def test_quote_literal_escapes_quotes(self):
        assert quote_literal('say "hi"') == '"say \\"hi\\""'
