"""
Integration tests for batch processing and result storage.

Uses real files in a temporary directory.
"""

import json

import pytest

from visibility_engine import JobRunner, PagePair
from visibility_engine.models import VisibilityCategory
from visibility_engine.storage import FileStorage, StorageError

INITIAL_HTML = """
<html>
  <body>
    <header><nav>Navigation menu</nav></header>
    <main>
      <h1>Welcome to Our Site</h1>
      <p>This content is visible to crawlers.</p>
    </main>
    <footer>Footer content</footer>
  </body>
</html>
"""

RENDERED_HTML = """
<html>
  <body>
    <header><nav>Navigation menu</nav></header>
    <main>
      <h1>Welcome to Our Site</h1>
      <p>This content is visible to crawlers.</p>
      <div class="dynamic-content">
        <h2>Dynamic Content</h2>
        <p>This content was loaded by JavaScript and is only visible to users, not AI crawlers.</p>
        <ul>
          <li>Feature 1: JavaScript-powered interactivity</li>
          <li>Feature 2: Dynamic data loading</li>
          <li>Feature 3: Real-time updates</li>
        </ul>
      </div>
    </main>
    <footer>Footer content</footer>
  </body>
</html>
"""


@pytest.fixture
def page_files(tmp_path):
    """Write an initial/rendered pair and an identical pair to disk."""
    (tmp_path / "initial.html").write_text(INITIAL_HTML, encoding="utf-8")
    (tmp_path / "rendered.html").write_text(RENDERED_HTML, encoding="utf-8")
    return tmp_path


@pytest.mark.asyncio
async def test_run_job_async_success(page_files):
    """Test a batch where every pair can be read."""
    runner = JobRunner(max_concurrency=2)
    pairs = [
        PagePair("dynamic", str(page_files / "initial.html"), str(page_files / "rendered.html")),
        PagePair("static", str(page_files / "initial.html"), str(page_files / "initial.html")),
    ]

    result = await runner.run_job_async(pairs)

    assert result.pairs_processed == 2
    assert result.pairs_succeeded == 2
    assert result.pairs_failed == 0
    assert result.success_rate == 100.0
    assert result.finished_at >= result.started_at

    by_name = {analysis.name: analysis for analysis in result.results}
    assert by_name["static"].visibility_score.score == 100
    assert by_name["static"].visibility_score.category is VisibilityCategory.EXCELLENT
    dynamic = by_name["dynamic"]
    assert dynamic.analysis.metrics.content_gain > 1
    assert dynamic.visibility_score.score < 90
    assert "Navigation" not in dynamic.analysis.initial_text


@pytest.mark.asyncio
async def test_run_job_async_preserves_order(page_files):
    """Test that results come back in input order."""
    runner = JobRunner(max_concurrency=1)
    initial = str(page_files / "initial.html")
    pairs = [PagePair(f"pair-{i}", initial, initial) for i in range(5)]

    result = await runner.run_job_async(pairs)

    assert [analysis.name for analysis in result.results] == [f"pair-{i}" for i in range(5)]


@pytest.mark.asyncio
async def test_missing_file_recorded_as_read_error(page_files):
    """Test that an unreadable file fails only its own pair."""
    runner = JobRunner()
    pairs = [
        PagePair("ok", str(page_files / "initial.html"), str(page_files / "rendered.html")),
        PagePair("missing", str(page_files / "initial.html"), str(page_files / "nope.html")),
    ]

    result = await runner.run_job_async(pairs)

    assert result.pairs_succeeded == 1
    assert result.pairs_failed == 1
    failed = result.get_failed_analyses()[0]
    assert failed.name == "missing"
    assert failed.analysis is None
    assert failed.read_errors == [f"File not found: {page_files / 'nope.html'}"]


def test_run_job_deduplicates_by_name(page_files):
    """Test that a repeated pair name is only processed once."""
    initial = str(page_files / "initial.html")
    pairs = [PagePair("home", initial, initial), PagePair("home", initial, initial)]

    result = JobRunner().run_job(pairs)

    assert result.pairs_processed == 1
    assert len(result.results) == 1


def test_run_job_keep_nav_footer(page_files):
    """Test that navigation text is compared when filtering is off."""
    initial = str(page_files / "initial.html")

    result = JobRunner(ignore_nav_footer=False).run_job([PagePair("home", initial, initial)])

    assert "Navigation menu" in result.results[0].analysis.initial_text


def test_run_job_plain_text(tmp_path):
    """Test comparing plain text files without HTML filtering."""
    (tmp_path / "a.txt").write_text("<b>kept</b> as text", encoding="utf-8")
    (tmp_path / "b.txt").write_text("<b>kept</b> as text too", encoding="utf-8")

    result = JobRunner(plain_text=True).run_job(
        [PagePair("text", str(tmp_path / "a.txt"), str(tmp_path / "b.txt"))]
    )

    metrics = result.results[0].analysis.metrics
    assert metrics.word_count.initial == 3
    assert metrics.word_count.final == 4


def test_invalid_concurrency():
    """Test that concurrency must be positive."""
    with pytest.raises(ValueError, match="max_concurrency"):
        JobRunner(max_concurrency=0)


class TestFileStorage:
    """Tests for exporting job results."""

    def _result(self, page_files):
        pairs = [
            PagePair("dynamic", str(page_files / "initial.html"), str(page_files / "rendered.html")),
            PagePair("missing", str(page_files / "initial.html"), str(page_files / "nope.html")),
        ]
        return JobRunner().run_job(pairs)

    def test_save_json(self, page_files, tmp_path):
        """Test JSON export with metadata and per-pair details."""
        storage = FileStorage(output_directory=str(tmp_path / "out"))

        path = storage.save(self._result(page_files), format="json")

        with open(path, encoding="utf-8") as f:
            data = json.load(f)

        assert data["metadata"]["pairs_processed"] == 2
        assert data["metadata"]["pairs_failed"] == 1
        dynamic, missing = data["results"]
        assert dynamic["name"] == "dynamic"
        assert dynamic["success"] is True
        assert dynamic["analysis"]["metrics"]["word_count"]["initial"] == 10
        assert missing["success"] is False
        assert "analysis" not in missing

    def test_save_csv(self, page_files, tmp_path):
        """Test CSV export with summary header and one row per pair."""
        storage = FileStorage(output_directory=str(tmp_path))

        path = storage.save(self._result(page_files), format="CSV", output_path="report.csv")

        with open(path, encoding="utf-8") as f:
            content = f.read()

        assert path.endswith("report.csv")
        assert content.startswith("# HTML Visibility Report\n")
        assert "# Pairs Failed: 1" in content
        assert "Name,Initial File,Rendered File" in content
        assert "Read: File not found" in content

    def test_unsupported_format(self, page_files, tmp_path):
        """Test that unknown formats are rejected."""
        storage = FileStorage(output_directory=str(tmp_path))

        with pytest.raises(StorageError, match="Unsupported format"):
            storage.save(self._result(page_files), format="xml")
