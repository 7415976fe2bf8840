# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Static lxml DOM view shared by all signals of one detection call.

Parsing is markup-only: the recovering HTML parser never runs scripts,
never resolves external entities, and never touches the network.
"""

from __future__ import annotations

import copy
import logging
import re
from functools import cached_property

import lxml.html
from lxml import etree

logger = logging.getLogger(__name__)

# Subtrees whose text is never rendered
_HIDDEN_TAGS = ("script", "style", "noscript", "template")

_WS_RE = re.compile(r"\s+")

_EMPTY_DOCUMENT = "<html><head></head><body></body></html>"


def _new_parser() -> lxml.html.HTMLParser:
    return lxml.html.HTMLParser(
        recover=True,
        encoding="utf-8",
        no_network=True,
        remove_comments=True,
        remove_pis=True,
    )


def parse_document(html: str) -> lxml.html.HtmlElement:
    """Parse *html* into a document root; empty or garbled input gives an empty document."""
    parser = _new_parser()
    if html and html.strip():
        try:
            doc = lxml.html.document_fromstring(html.encode("utf-8", errors="replace"), parser=parser)
        except (etree.ParserError, etree.XMLSyntaxError, ValueError) as e:
            logger.debug("HTML parse failed, using empty document: %s", e)
        else:
            if doc is not None:
                return doc
    return lxml.html.document_fromstring(_EMPTY_DOCUMENT.encode("utf-8"), parser=parser)


class DomView:
    """Queryable view of one parsed page, shared by every signal of a call.

    Query results are live lxml nodes of the shared tree.  Signals must treat
    them as read-only; anything that needs to edit the tree works on a
    ``copy.deepcopy`` as ``visible_text`` does.
    """

    def __init__(self, html: str) -> None:
        self._doc = parse_document(html)

    def xpath(self, expr: str) -> list:
        return self._doc.xpath(expr)

    def count(self, expr: str) -> int:
        return len(self._doc.xpath(expr))

    def exists(self, expr: str) -> bool:
        return self.count(expr) > 0

    def title(self) -> str:
        nodes = self._doc.xpath("//title")
        if not nodes:
            return ""
        return _WS_RE.sub(" ", nodes[0].text_content() or "").strip()

    @cached_property
    def _visible_text(self) -> str:
        bodies = self._doc.xpath("//body")
        if not bodies:
            return ""
        pruned = copy.deepcopy(bodies[0])
        for el in pruned.xpath(" | ".join(f".//{tag}" for tag in _HIDDEN_TAGS)):
            el.drop_tree()
        text = pruned.text_content() or ""
        return _WS_RE.sub(" ", text).strip().lower()

    def visible_text(self) -> str:
        """Lower-cased rendered text of the body, hidden subtrees excluded."""
        return self._visible_text
