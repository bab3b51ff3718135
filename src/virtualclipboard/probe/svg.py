"""Structural SVG check: a gate before treating clipboard text as an SVG."""

import io
import logging
import xml.sax
from typing import Optional
from xml.sax import handler
from xml.sax.xmlreader import InputSource

logger = logging.getLogger(__name__)


class _RootElementHandler(handler.ContentHandler):

    def __init__(self) -> None:
        super().__init__()
        self.root_name: Optional[str] = None

    def startElementNS(self, name, qname, attrs) -> None:
        if self.root_name is None:
            _, local_name = name
            self.root_name = local_name


def _make_parser(content_handler: handler.ContentHandler):
    parser = xml.sax.make_parser()
    parser.setFeature(handler.feature_namespaces, True)
    parser.setFeature(handler.feature_validation, False)
    parser.setFeature(handler.feature_external_ges, False)
    parser.setFeature(handler.feature_external_pes, False)
    parser.setContentHandler(content_handler)
    return parser


def is_svg(text: Optional[str]) -> bool:
    """Return ``True`` when ``text`` parses as XML whose root element is ``svg``."""
    if not text or "<svg" not in text.lower():
        return False

    root_handler = _RootElementHandler()
    source = InputSource()
    source.setCharacterStream(io.StringIO(text.strip()))

    try:
        _make_parser(root_handler).parse(source)
    except (xml.sax.SAXException, ValueError) as exc:
        logger.debug("Text mentions <svg but is not well-formed XML: %s", exc)
        return False

    return root_handler.root_name is not None and root_handler.root_name.lower() == "svg"
