"""
Tests for the command-line interface.
"""

import pytest
from unittest.mock import patch

from typer.testing import CliRunner

from papershelf.cli import app
from papershelf.corpus.store import ContentStore

runner = CliRunner()


class TestCli:
    """Test cases for CLI commands."""

    @pytest.fixture(autouse=True)
    def storage_env(self, temp_directory, monkeypatch):
        """Point the CLI at a temporary storage directory."""
        monkeypatch.setenv("PAPERSHELF_STORAGE_DIR", str(temp_directory / "storage"))
        return temp_directory / "storage"

    @pytest.fixture
    def acquired(self):
        """Acquire one paper through the CLI with downloads stubbed out."""
        with patch.object(ContentStore, "_fetch", return_value=b"%PDF-1.4 fake") as fetch:
            result = runner.invoke(app, [
                "acquire", "https://arxiv.org/abs/2301.00001",
                "--title", "An Example Paper",
                "--author", "Ada Lovelace",
                "--category", "cs.AI",
            ])
        assert result.exit_code == 0, result.output
        return fetch

    def test_version(self):
        """Test version command."""
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert "papershelf v" in result.output

    def test_list_empty(self):
        """Test listing an empty store."""
        result = runner.invoke(app, ["list"])
        assert result.exit_code == 0
        assert "No papers downloaded." in result.output

    def test_stats_empty(self):
        """Test stats on an empty store."""
        result = runner.invoke(app, ["stats"])
        assert result.exit_code == 0
        assert "Papers: 0" in result.output

    def test_acquire_derives_id_and_pdf_url(self, acquired, storage_env):
        """Test acquiring from an arXiv abstract URL."""
        acquired.assert_called_once_with("https://arxiv.org/pdf/2301.00001")
        assert (storage_env / "2301.00001_An_Example_Paper.pdf").exists()

        result = runner.invoke(app, ["list"])
        assert result.exit_code == 0
        assert "2301.00001" in result.output

    def test_stats_after_acquire(self, acquired):
        """Test stats after acquiring a paper."""
        result = runner.invoke(app, ["stats"])
        assert result.exit_code == 0
        assert "Papers: 1" in result.output

    def test_evict(self, acquired):
        """Test evicting a paper with confirmation."""
        result = runner.invoke(app, ["evict", "2301.00001", "--confirm"])
        assert result.exit_code == 0
        assert "Deleted paper '2301.00001'" in result.output

        result = runner.invoke(app, ["evict", "2301.00001", "--confirm"])
        assert "not found" in result.output

    def test_evict_cancelled(self, acquired):
        """Test declining the eviction prompt."""
        result = runner.invoke(app, ["evict", "2301.00001"], input="n\n")
        assert "Cancelled." in result.output

        result = runner.invoke(app, ["stats"])
        assert "Papers: 1" in result.output

    def test_read_not_downloaded(self):
        """Test reading a paper that was never acquired."""
        result = runner.invoke(app, ["read", "2301.00001"])
        assert result.exit_code == 1
        assert "not downloaded" in result.output

    def test_search_not_downloaded(self):
        """Test searching a paper that was never acquired."""
        result = runner.invoke(app, ["search", "2301.00001", "attention"])
        assert result.exit_code == 1

    def test_read_and_search(self, acquired, sample_paper_text):
        """Test reading a section and searching a stored paper."""
        with patch(
            "papershelf.corpus.extractor.PDFExtractor.extract_file_text",
            return_value=sample_paper_text
        ):
            result = runner.invoke(app, ["read", "2301.00001", "--section", "results"])
            assert result.exit_code == 0
            assert "The Transformer achieves 28.4 BLEU." in result.output

            result = runner.invoke(app, ["search", "2301.00001", "BLEU", "--case-sensitive"])
            assert result.exit_code == 0
            assert "Found 1 matches in 1 sections" in result.output

    def test_cleanup_huge_day_count(self, acquired):
        """Test cleanup with a day count beyond the calendar range."""
        result = runner.invoke(app, ["cleanup", "1000000"])
        assert result.exit_code == 0, result.output
        assert "Deleted 0 papers" in result.output

    def test_invalid_timeout(self, monkeypatch):
        """Test CLI exit on an invalid timeout setting."""
        monkeypatch.setenv("PAPERSHELF_FETCH_TIMEOUT", "soon")
        result = runner.invoke(app, ["list"])
        assert result.exit_code == 1
