"""
Unit tests for compile failures rendered as asset content.
"""

import json

import pytest

from assetserver.assets.errors import AssetError, CompileError, FileNotFound
from assetserver.handlers.exceptions import (
    AssetKind,
    css_exception_response,
    error_category,
    error_origin,
    escape_css_content,
    javascript_exception_response,
)
from assetserver.http.status_codes import HTTPStatus


def raised(error):
    """Return `error` after raising it, so it carries a traceback."""
    try:
        raise error
    except Exception as e:
        return e


class TestAssetKind:
    """Tests for AssetKind.from_path()."""

    @pytest.mark.parametrize("path,kind", [
        ("application.js", AssetKind.SCRIPT),
        ("javascripts/app.js", AssetKind.SCRIPT),
        ("site.css", AssetKind.STYLESHEET),
        ("logo.png", AssetKind.UNCLASSIFIED),
        ("app.js.map", AssetKind.UNCLASSIFIED),
        ("README", AssetKind.UNCLASSIFIED),
    ])
    def test_classification(self, path, kind):
        assert AssetKind.from_path(path) is kind

    def test_case_sensitive(self):
        """Only lowercase extensions are classified."""
        assert AssetKind.from_path("APP.JS") is AssetKind.UNCLASSIFIED


class TestErrorDescription:
    """Tests for error_category() and error_origin()."""

    def test_category_is_class_name(self):
        assert error_category(FileNotFound("x")) == "FileNotFound"
        assert error_category(CompileError("x")) == "CompileError"

    def test_attached_origin(self):
        """A resolver-supplied origin wins."""
        error = raised(AssetError("x", origin="application.js:3"))
        assert error_origin(error) == "application.js:3"

    def test_traceback_origin(self):
        """Without an origin, the innermost frame is used."""
        error = raised(AssetError("x"))

        origin = error_origin(error)

        assert origin.endswith(":in raised")
        assert "test_exceptions.py:" in origin

    def test_unknown_origin(self):
        """Never raised and no origin."""
        assert error_origin(AssetError("x")) == "unknown"


class TestEscapeCssContent:
    """Tests for escape_css_content()."""

    @pytest.mark.parametrize("raw,escaped", [
        ("\\", "\\005c "),
        ("\n", "\\000a "),
        ('"', "\\0022 "),
        ("/", "\\002f "),
        ("plain text", "plain text"),
    ])
    def test_escapes(self, raw, escaped):
        assert escape_css_content(raw) == escaped

    def test_backslash_first(self):
        """Escapes introduced for other characters are not escaped again."""
        assert escape_css_content('\\"') == "\\005c \\0022 "

    def test_cannot_close_comment(self):
        assert "*/" not in escape_css_content("*/ body { }")


class TestJavascriptExceptionResponse:
    """Tests for javascript_exception_response()."""

    def test_body(self):
        """The body rethrows category, message and origin."""
        error = AssetError("Unexpected token", origin="app.js:7")

        response = javascript_exception_response(error)

        expected = "throw Error(" + json.dumps("AssetError: Unexpected token\n  (in app.js:7)") + ")"
        assert response.body == expected.encode("utf-8")

    def test_headers(self):
        response = javascript_exception_response(AssetError("x", origin="a.js:1"))

        assert response.status == HTTPStatus.OK
        assert response.headers == {
            "Content-Type": "application/javascript",
            "Content-Length": str(len(response.body)),
        }

    def test_quotes_escaped(self):
        """Quotes in the message cannot end the string literal."""
        response = javascript_exception_response(AssetError('bad "quote"', origin="a.js:1"))

        assert b'bad \\"quote\\"' in response.body

    def test_content_length_counts_bytes(self):
        """Non-ASCII messages are counted in bytes."""
        response = javascript_exception_response(AssetError("naïve", origin="a.js:1"))

        assert response.headers["Content-Length"] == str(len(response.body))


class TestCssExceptionResponse:
    """Tests for css_exception_response()."""

    def test_headers(self):
        response = css_exception_response(AssetError("x", origin="a.css:1"))

        assert response.status == HTTPStatus.OK
        assert response.headers["Content-Type"] == "text/css; charset=utf-8"
        assert response.headers["Content-Length"] == str(len(response.body))

    def test_message_and_origin(self):
        """Message and origin land in body:before and body:after."""
        error = FileNotFound("couldn't find file 'reset.css'", origin="site.css:2")

        body = css_exception_response(error).body.decode("utf-8")

        assert 'content: "\\000a FileNotFound: couldn\'t find file \'reset.css\'";' in body
        assert 'content: "\\000a   site.css:2";' in body

    def test_overlay(self):
        """The page is hidden and a title is shown."""
        body = css_exception_response(AssetError("x")).body.decode("utf-8")

        assert "body > * {\n  display: none !important;\n}" in body
        assert 'content: "Error compiling CSS asset";' in body

    def test_origin_path_escaped(self):
        """Slashes in a traceback origin are escaped."""
        body = css_exception_response(raised(AssetError("x"))).body.decode("utf-8")

        # The rule on its own line, not the shared "head:after, ..." selector
        after = body.split("\nbody:after {")[1]
        origin = after.split("content: \"")[1].split("\";")[0]
        assert "\\002f " in origin
        assert "/" not in origin.replace("\\002f ", "")
