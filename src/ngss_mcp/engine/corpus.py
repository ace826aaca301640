"""Corpus loading from the bundled (or configured) JSON file.

Any failure is a CorpusLoadError. Callers at startup treat it as fatal;
the engine is never built from a partially-loaded corpus.
"""

from __future__ import annotations

import json
from pathlib import Path

import structlog
from pydantic import ValidationError

from ngss_mcp.core.errors import CorpusLoadError
from ngss_mcp.engine.models import Corpus, CorpusFile

log = structlog.get_logger(__name__)

CORPUS_FILENAME = "ngss-ms-standards.json"


def default_corpus_path() -> Path:
    """Path of the corpus shipped inside the package."""
    return Path(__file__).resolve().parent.parent / "data" / CORPUS_FILENAME


def parse_corpus(payload: object) -> Corpus:
    """Validate an already-decoded corpus document."""
    try:
        document = CorpusFile.model_validate(payload)
    except ValidationError as e:
        err = e.errors()[0]
        location = ".".join(str(part) for part in err["loc"]) or "<root>"
        raise CorpusLoadError.schema_error(location, err["msg"]) from e
    return Corpus(
        standards=tuple(document.standards),
        generated_at=document.generated_at,
        source=document.source,
    )


def load_corpus(path: Path | str | None = None) -> Corpus:
    """Read and validate the corpus file.

    Args:
        path: Corpus JSON path. Defaults to the bundled corpus.

    Raises:
        CorpusLoadError: File missing, unreadable, not JSON, or not schema-valid.
    """
    corpus_path = Path(path).expanduser() if path is not None else default_corpus_path()
    if not corpus_path.is_file():
        raise CorpusLoadError.not_found(str(corpus_path))

    try:
        payload = json.loads(corpus_path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise CorpusLoadError.parse_error(str(corpus_path), str(e)) from e

    corpus = parse_corpus(payload)
    log.info("corpus_loaded", path=str(corpus_path), standards=len(corpus))
    return corpus
