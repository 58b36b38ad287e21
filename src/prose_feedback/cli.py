from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, TypedDict

import typer
import yaml

from .analysis import analyze, group_issues, readability_band
from .categories import ALL_CATEGORIES, CATEGORIES, get_category
from .config import ProseFeedbackConfig, load_config
from .models import AnalysisResult, Document
from .session import AnalysisSession
from .tree import BlockNode, MemoryEditor, TextNode
from .visibility import VisibilityState

app = typer.Typer(help="Prose feedback CLI.", no_args_is_help=True)

logger = logging.getLogger(__name__)

# File types the CLI knows how to read as documents.
SUPPORTED_INPUT_EXTENSIONS = {".txt", ".md", ".markdown"}


class DocumentSummary(TypedDict):
    doc_id: str
    band: str
    metrics: Dict[str, Any]
    issue_counts: Dict[str, int]


@app.command("analyze")
def analyze_command(
    input_path: Path = typer.Option(
        ..., exists=True, readable=True, dir_okay=True, file_okay=True
    ),
    config: Path | None = typer.Option(None, "--config", "-c"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Analyze the input documents and emit a JSON summary."""
    _configure_logging(verbose)
    cfg = load_config(config)
    documents = _load_documents(input_path)
    summary = [_summarize(doc, analyze(doc.text, cfg.analyzer)) for doc in documents]
    typer.echo(json.dumps({"documents": summary}, indent=2))


@app.command()
def highlight(
    input_path: Path = typer.Option(
        ..., exists=True, readable=True, dir_okay=False, file_okay=True
    ),
    config: Path | None = typer.Option(None, "--config", "-c"),
    hover: str | None = typer.Option(
        None,
        "--hover",
        help=f"Show one category, or '{ALL_CATEGORIES}' for every active category.",
    ),
    show_all: bool | None = typer.Option(
        None, "--all/--no-all", help="Show every active category when not hovering."
    ),
    category: List[str] = typer.Option(
        [], "--category", help="Restrict the active categories (repeatable)."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Render a document with its visible highlights bracketed."""
    _configure_logging(verbose)
    cfg = load_config(config)
    if hover is not None and hover != ALL_CATEGORIES and hover not in CATEGORIES:
        raise typer.BadParameter(f"Unknown category '{hover}'.", param_hint="--hover")
    for name in category:
        if name not in CATEGORIES:
            raise typer.BadParameter(
                f"Unknown category '{name}'.", param_hint="--category"
            )

    document = _load_documents(input_path)[0]
    editor = MemoryEditor.from_text(document.text)
    session = AnalysisSession(editor, cfg)
    try:
        result = session.refresh()
    finally:
        session.close()

    state = VisibilityState(
        hovered_category=hover,
        active_categories=set(category or cfg.active_categories),
        mode_all_on=cfg.show_all_highlights if show_all is None else show_all,
    )
    shown = state.apply(editor.root)
    logger.info("%s: %d issues, %d highlights shown", document.doc_id, len(result.issues), shown)
    typer.echo(render_highlights(editor))


@app.command("print-config")
def print_config() -> None:
    """Print the default configuration as YAML."""
    cfg = ProseFeedbackConfig()
    typer.echo(yaml.safe_dump(cfg.to_dict(), sort_keys=False))


def main() -> None:
    app()


def render_highlights(editor: MemoryEditor) -> str:
    """Plain-text view of the document with visible tags as [label: text]."""
    blocks: List[str] = []
    for child in editor.root.children:
        if not isinstance(child, BlockNode):
            continue
        parts = [_render_node(node) for node in child.iter_text_nodes()]
        prefix = "#" * child.level + " " if child.block_type == "heading" else ""
        blocks.append(prefix + "".join(parts))
    return "\n\n".join(blocks)


def _render_node(node: TextNode) -> str:
    if node.issue_type is None or not node.visible:
        return node.text
    return f"[{get_category(node.issue_type).label}: {node.text}]"


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _load_documents(input_path: Path) -> List[Document]:
    """Expand the input path into documents keyed by their relative path."""
    if input_path.is_file():
        return [_document_from_file(input_path, input_path.name)]

    files = sorted(
        p
        for p in input_path.rglob("*")
        if p.is_file() and p.suffix.lower() in SUPPORTED_INPUT_EXTENSIONS
    )
    return [_document_from_file(p, str(p.relative_to(input_path))) for p in files]


def _document_from_file(path: Path, doc_id: str) -> Document:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise typer.BadParameter(f"Unable to read {path}: {exc}") from exc
    return Document(doc_id=doc_id, text=text)


def _summarize(doc: Document, result: AnalysisResult) -> DocumentSummary:
    return {
        "doc_id": doc.doc_id,
        "band": readability_band(result.score),
        "metrics": result.to_dict(),
        "issue_counts": {
            issue_type: len(issues)
            for issue_type, issues in group_issues(result.issues).items()
        },
    }


if __name__ == "__main__":
    main()
