"""
Unit tests for the command-line interface.
"""

import pytest

from assetserver.__main__ import build_parser, config_from_args, main, parse_header


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("ASSETS_PATHS", "ASSETS_PORT", "ASSETS_LOG_LEVEL", "ASSETS_GZIP"):
        monkeypatch.delenv(name, raising=False)


class TestParser:
    """Tests for argument parsing."""

    def test_serve_options(self):
        args = build_parser().parse_args(
            ["serve", "--port", "3000", "--prefix", "/static", "--no-gzip", "js", "css"]
        )

        config = config_from_args(args)

        assert config.port == 3000
        assert config.url_prefix == "/static"
        assert config.gzip is False
        assert config.paths == ["js", "css"]

    def test_serve_defaults_from_env(self, monkeypatch):
        """Options not given fall back to the environment."""
        monkeypatch.setenv("ASSETS_PORT", "9000")

        config = config_from_args(build_parser().parse_args(["serve", "js"]))

        assert config.port == 9000

    def test_render_paths(self):
        args = build_parser().parse_args(["render", "/app.js", "-P", "js", "-P", "css"])

        assert config_from_args(args).paths == ["js", "css"]

    def test_command_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])


class TestParseHeader:
    """Tests for parse_header()."""

    def test_name_and_value(self):
        assert parse_header('If-None-Match: "abc"') == ("If-None-Match", '"abc"')

    def test_value_with_colon(self):
        assert parse_header("X-Url: http://example") == ("X-Url", "http://example")

    @pytest.mark.parametrize("raw", ["no-colon", ": value"])
    def test_invalid(self, raw):
        with pytest.raises(ValueError):
            parse_header(raw)


class TestRender:
    """Tests for the render command."""

    def test_render_asset(self, asset_tree, capsys):
        """Status line and headers are printed."""
        exit_code = main(["render", "/application.js", "-P", str(asset_tree / "javascripts")])

        out = capsys.readouterr().out
        assert exit_code == 0
        assert out.startswith("HTTP/1.1 200 OK\n")
        assert "Content-Type: application/javascript\n" in out
        assert "Cache-Control: public, must-revalidate\n" in out
        assert "app.start();" not in out

    def test_render_body(self, asset_tree, capsys):
        """--body prints the asset after a blank line."""
        exit_code = main(
            ["render", "/application.js?body=1", "-P", str(asset_tree / "javascripts"), "--body"]
        )

        out = capsys.readouterr().out
        assert exit_code == 0
        assert out.endswith("\n\n\napp.start();\n")

    def test_render_not_modified(self, asset_tree, capsys):
        """--header feeds conditional requests."""
        root = str(asset_tree / "javascripts")
        main(["render", "/jquery.js", "-P", root])
        etag = next(
            line.split(": ", 1)[1]
            for line in capsys.readouterr().out.splitlines()
            if line.startswith("ETag: ")
        )

        exit_code = main(["render", "/jquery.js", "-P", root, "--header", f"If-None-Match: {etag}"])

        assert exit_code == 0
        assert capsys.readouterr().out.startswith("HTTP/1.1 304 Not Modified\n")

    def test_render_missing(self, asset_tree, capsys):
        """Error statuses exit 1."""
        exit_code = main(["render", "/missing.js", "-P", str(asset_tree / "javascripts")])

        assert exit_code == 1
        assert capsys.readouterr().out.startswith("HTTP/1.1 404 Not Found\n")

    def test_render_without_paths(self, capsys):
        """Configuration errors exit 2 with a message."""
        exit_code = main(["render", "/application.js"])

        assert exit_code == 2
        assert "At least one asset path" in capsys.readouterr().err

    def test_render_bad_header(self, asset_tree, capsys):
        exit_code = main(
            ["render", "/jquery.js", "-P", str(asset_tree / "javascripts"), "--header", "bogus"]
        )

        assert exit_code == 2
        assert "Invalid header" in capsys.readouterr().err
