"""Tests for the CLI main module."""

import json

import pytest

from xml_grammar_parser import __version__
from xml_grammar_parser.cli.main import (
    EXIT_IO_ERROR,
    EXIT_MALFORMED,
    EXIT_OK,
    create_argument_parser,
    main,
)


@pytest.fixture
def plant_file(tmp_path):
    path = tmp_path / "plant.xml"
    path.write_text(
        "<Plant><ListOfMachines>"
        "<Machine><DisplayName>M1</DisplayName></Machine>"
        "</ListOfMachines></Plant>",
        encoding="utf-8",
    )
    return path


class TestArgumentParser:
    """Test command-line argument parsing."""

    def test_defaults(self):
        """Test default argument values."""
        args = create_argument_parser().parse_args(["doc.xml"])

        assert args.files == ["doc.xml"]
        assert args.indent == 2
        assert args.backend == "expat"
        assert args.encoding == "utf-8"
        assert args.verbose is False

    def test_invalid_backend(self):
        """Test that unknown backends are rejected by argparse."""
        with pytest.raises(SystemExit):
            create_argument_parser().parse_args(["--backend", "sax", "doc.xml"])

    def test_version(self, capsys):
        """Test the version flag."""
        with pytest.raises(SystemExit):
            create_argument_parser().parse_args(["--version"])

        assert __version__ in capsys.readouterr().out


class TestMain:
    """Test the CLI entry point."""

    def test_single_file(self, plant_file, capsys):
        """Test converting one file to JSON."""
        exit_code = main([str(plant_file)])

        assert exit_code == EXIT_OK
        output = json.loads(capsys.readouterr().out)
        assert output == {"plant": {"machines": [{"displayName": "M1"}]}}

    def test_multiple_files(self, plant_file, tmp_path, capsys):
        """Test that several files are keyed by file name."""
        other = tmp_path / "other.xml"
        other.write_text("<A><B>1</B></A>", encoding="utf-8")

        exit_code = main([str(plant_file), str(other), "--indent", "0"])

        assert exit_code == EXIT_OK
        output = json.loads(capsys.readouterr().out)
        assert output == {
            str(plant_file): {"plant": {"machines": [{"displayName": "M1"}]}},
            str(other): {"a": {"b": "1"}},
        }

    def test_malformed_file(self, tmp_path, capsys):
        """Test that malformed documents are reported on stderr."""
        path = tmp_path / "bad.xml"
        path.write_text("<A><B></A>", encoding="utf-8")

        exit_code = main([str(path)])

        captured = capsys.readouterr()
        assert exit_code == EXIT_MALFORMED
        assert captured.out == ""
        assert "bad.xml" in captured.err
        assert "line 1" in captured.err

    def test_missing_file(self, tmp_path, capsys):
        """Test that unreadable files give the I/O exit code."""
        exit_code = main([str(tmp_path / "missing.xml")])

        assert exit_code == EXIT_IO_ERROR
        assert "cannot read file" in capsys.readouterr().err

    def test_partial_failure(self, plant_file, tmp_path, capsys):
        """Test that good files are still converted when others fail."""
        exit_code = main([str(plant_file), str(tmp_path / "missing.xml")])

        captured = capsys.readouterr()
        assert exit_code == EXIT_IO_ERROR
        assert str(plant_file) in json.loads(captured.out)

    def test_undecodable_file(self, tmp_path, capsys):
        """Test that files invalid for the encoding give the malformed exit code."""
        path = tmp_path / "binary.xml"
        path.write_bytes(b"<A>\xff\xfe</A>")

        exit_code = main([str(path)])

        captured = capsys.readouterr()
        assert exit_code == EXIT_MALFORMED
        assert "binary.xml" in captured.err
        assert "Cannot decode" in captured.err

    def test_invalid_encoding(self, plant_file, capsys):
        """Test that an unknown encoding is reported as a usage error."""
        with pytest.raises(SystemExit) as exc_info:
            main([str(plant_file), "--encoding", "no-such-codec"])

        assert exc_info.value.code == 2
        assert "Unknown encoding" in capsys.readouterr().err
