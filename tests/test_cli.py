"""
Tests for the command-line entry point.
"""

from pathlib import Path

from hashed_assets.cli import main, parse_args
from hashed_assets.config import DEFAULT_ALGORITHM, DEFAULT_HASH_LENGTH


class TestParseArgs:
    """Tests for argument parsing."""

    def test_defaults(self):
        """Unspecified options fall back to the configured defaults."""
        args = parse_args(["site"])
        assert args.paths == [Path("site")]
        assert args.root is None
        assert args.algorithm == DEFAULT_ALGORITHM
        assert args.hash_length == DEFAULT_HASH_LENGTH
        assert not args.no_emit
        assert not args.verbose

    def test_reads_process_arguments_by_default(self, monkeypatch):
        """Without an explicit argv the process arguments are parsed."""
        monkeypatch.setattr("sys.argv", ["hashed-assets", "docs", "--verbose"])
        args = parse_args()
        assert args.paths == [Path("docs")]
        assert args.verbose


class TestMain:
    """Tests for running a build from the command line."""

    def test_build_rewrites_site(self, tmp_path, write_file):
        """The CLI rewrites documents using the requested hash settings."""
        write_file("app.js", b"console.log(1);")
        index = write_file("index.html", '<script src="/app.js"></script>')

        main([str(tmp_path), "--root", str(tmp_path), "--hash-length", "6", "--no-emit"])

        html = index.read_text(encoding="utf-8")
        assert html.startswith('<script src="/app.')
        assert len(html) == len('<script src="/app.js"></script>') + 7
        assert list(tmp_path.glob("app.*.js")) == []
