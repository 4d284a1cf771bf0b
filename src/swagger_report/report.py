"""Convert an API document on disk into a Markdown report on disk."""

import logging
from pathlib import Path

from swagger_report.config import ReportConfig
from swagger_report.parser.swagger import load_document
from swagger_report.renderer.markdown import render_markdown

log = logging.getLogger(__name__)


def generate(source: Path, destination: Path, config: ReportConfig | None = None) -> str:
    """Render *source* into *destination*, overwriting it, and return the report.

    The report is built in memory first, so a document that fails to parse
    never creates or truncates *destination*.
    """
    document = load_document(source)
    log.debug("Loaded %s: %d paths, %d definitions", source, len(document.paths), len(document.definitions))

    report = render_markdown(document, config)

    destination.parent.mkdir(parents=True, exist_ok=True)
    destination.write_text(report, encoding="utf-8")
    log.info("Report written to %s", destination)
    return report
