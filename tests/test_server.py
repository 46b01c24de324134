"""
Tests for the server entry point.
"""

import sys

import pytest

from chuk_mcp_curriculum.server import main


class TestMain:
    """Tests for the command line."""

    def test_help_describes_curriculum(self, monkeypatch, capsys) -> None:
        """--help names the data and output directories and the transports."""
        monkeypatch.setattr(sys, "argv", ["chuk-mcp-curriculum", "--help"])
        with pytest.raises(SystemExit) as exc_info:
            main()

        assert exc_info.value.code == 0
        out = " ".join(capsys.readouterr().out.split())
        assert "./curriculum" in out
        assert "./output" in out
        assert "curriculum tools over HTTP" in out

    def test_rejects_unknown_transport(self, monkeypatch) -> None:
        """Only stdio and http are accepted."""
        monkeypatch.setattr(sys, "argv", ["chuk-mcp-curriculum", "--transport", "sse"])
        with pytest.raises(SystemExit) as exc_info:
            main()
        assert exc_info.value.code == 2
