"""Lenient artifact loading.

Parses generated markup into a BeautifulSoup tree and extracts the inline
script text. Parsing never raises: any fault degrades to an empty document,
which downstream analyzers treat as "no elements found".
"""

import logging
from dataclasses import dataclass, field

from bs4 import BeautifulSoup, Doctype

logger = logging.getLogger(__name__)

# Script types whose body is executable JavaScript
SCRIPT_TYPES = {"", "text/javascript", "application/javascript", "module"}


@dataclass(frozen=True)
class ParsedArtifact:
    """Queryable view of one artifact."""
    markup: str
    document: BeautifulSoup
    script: str = ""
    script_sources: tuple[str, ...] = ()
    inline_script_count: int = 0
    has_doctype: bool = False
    title: str | None = None
    parse_errors: tuple[str, ...] = field(default_factory=tuple)

    @property
    def is_empty(self) -> bool:
        return not self.markup.strip()

    @property
    def size_bytes(self) -> int:
        return len(self.markup.encode("utf-8"))


def _empty_document() -> BeautifulSoup:
    return BeautifulSoup("", "html.parser")


def _detect_doctype(document: BeautifulSoup) -> bool:
    return any(
        isinstance(node, Doctype) and str(node).strip().lower().startswith("html")
        for node in document.contents
    )


def _extract_title(document: BeautifulSoup) -> str | None:
    tag = document.find("title")
    if tag is None:
        return None
    text = tag.get_text(strip=True)
    return text or None


def parse_artifact(markup: str | None) -> ParsedArtifact:
    """Parse artifact markup leniently.

    Args:
        markup: Full artifact source, possibly malformed or empty

    Returns:
        ParsedArtifact; on parse failure the document is empty and the failure
        is recorded in `parse_errors`
    """
    markup = markup or ""
    errors: list[str] = []

    try:
        document = BeautifulSoup(markup, "html.parser")
    except Exception as e:
        logger.warning(f"Markup could not be parsed, treating as empty document: {e}")
        errors.append(f"Markup could not be parsed: {e}")
        document = _empty_document()

    blocks: list[str] = []
    sources: list[str] = []
    for tag in document.find_all("script"):
        src = tag.get("src")
        if src is not None:
            sources.append(src.strip())
            continue
        if tag.get("type", "").strip().lower() not in SCRIPT_TYPES:
            continue
        blocks.append(tag.get_text())

    artifact = ParsedArtifact(
        markup=markup,
        document=document,
        script="\n".join(blocks),
        script_sources=tuple(sources),
        inline_script_count=len(blocks),
        has_doctype=_detect_doctype(document),
        title=_extract_title(document),
        parse_errors=tuple(errors),
    )
    logger.debug(
        f"Parsed artifact: {artifact.size_bytes} bytes, {artifact.inline_script_count} inline scripts, "
        f"{len(artifact.script_sources)} external scripts"
    )
    return artifact
