import json
from pathlib import Path

from typer.testing import CliRunner

from prose_feedback.cli import app

runner = CliRunner()


def test_cli_analyze_outputs_summary(tmp_path: Path):
    """CLI analyze command returns JSON summary listing .txt and .md docs."""
    corpus_dir = _create_sample_corpus(tmp_path)
    result = runner.invoke(app, ["analyze", "--input-path", str(corpus_dir)])
    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    doc_ids = [doc["doc_id"] for doc in payload["documents"]]
    assert doc_ids == ["chapter1.txt", "notes.md"]
    chapter = payload["documents"][0]
    assert chapter["metrics"]["word_count"] == 9
    assert chapter["issue_counts"] == {"adverb": 1}
    assert chapter["band"] == "Good Readability"


def test_cli_analyze_accepts_single_file(tmp_path: Path):
    doc = tmp_path / "single.txt"
    doc.write_text("The report was written.", encoding="utf-8")
    result = runner.invoke(app, ["analyze", "--input-path", str(doc)])
    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["documents"][0]["doc_id"] == "single.txt"
    assert payload["documents"][0]["issue_counts"] == {"passive": 1}


def test_cli_print_config():
    """print-config command dumps the current configuration values."""
    result = runner.invoke(app, ["print-config"])
    assert result.exit_code == 0
    assert "highlight_categories" in result.stdout
    assert "analysis_delay" in result.stdout


def test_cli_highlight_brackets_visible_issues(tmp_path: Path):
    doc = tmp_path / "draft.txt"
    doc.write_text("He was really tired.", encoding="utf-8")
    result = runner.invoke(app, ["highlight", "--input-path", str(doc)])
    assert result.exit_code == 0
    assert result.stdout.strip() == "He was [Weak Qualifiers: really] tired."


def test_cli_highlight_hover_limits_to_one_category(tmp_path: Path):
    doc = tmp_path / "draft.txt"
    doc.write_text("He was really tired.", encoding="utf-8")
    result = runner.invoke(
        app, ["highlight", "--input-path", str(doc), "--hover", "adverb"]
    )
    assert result.exit_code == 0
    assert result.stdout.strip() == "He was really tired."


def test_cli_highlight_respects_config(tmp_path: Path):
    doc = tmp_path / "draft.txt"
    doc.write_text("He was really tired.", encoding="utf-8")
    config_path = tmp_path / "config.yaml"
    config_path.write_text("show_all_highlights: false\n", encoding="utf-8")
    result = runner.invoke(
        app, ["highlight", "--input-path", str(doc), "--config", str(config_path)]
    )
    assert result.exit_code == 0
    assert "[" not in result.stdout


def test_cli_highlight_rejects_unknown_category(tmp_path: Path):
    doc = tmp_path / "draft.txt"
    doc.write_text("Text.", encoding="utf-8")
    result = runner.invoke(
        app, ["highlight", "--input-path", str(doc), "--category", "cliche"]
    )
    assert result.exit_code != 0


def _create_sample_corpus(tmp_path: Path) -> Path:
    """Create a small corpus with a .txt and a .md source plus an ignored file."""
    corpus_dir = tmp_path / "corpus"
    corpus_dir.mkdir()
    (corpus_dir / "chapter1.txt").write_text(
        "The storm rolled slowly over the bay. Sailors watched.",
        encoding="utf-8",
    )
    (corpus_dir / "notes.md").write_text("# Notes\n\nShort.", encoding="utf-8")
    (corpus_dir / "cover.png").write_bytes(b"\x89PNG")
    return corpus_dir
