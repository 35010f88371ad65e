"""
Tolerant HTML tokenizer.

Splits markup into text, start tag, end tag and comment tokens. Anything that
does not form a tag (``<3``, ``< b >``, a ``<`` without closing ``>``) stays
literal text. The content of opaque tags (``script``, ``style``, unknown tags)
is skipped up to the matching close tag, or to the end of input.
"""

from __future__ import annotations

import re
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Optional, Union

from .tags import is_opaque

logger = logging.getLogger(__name__)

TAG_NAME = r"[A-Za-z][\w:.-]*"

_START_TAG = re.compile(
    r"""<(?P<name>""" + TAG_NAME + r""")
    (?P<attributes>(?:\s+[^\s"'>/=]+(?:\s*=\s*(?:"[^"]*"|'[^']*'|[^\s"'>]+))?)*)
    \s*(?P<self_closing>/)?>""",
    re.VERBOSE | re.DOTALL,
)
# quotes left unbalanced: take everything up to the next '>'
_LENIENT_START_TAG = re.compile(r"<(?P<name>" + TAG_NAME + r")(?P<attributes>\s[^>]*)?>", re.DOTALL)
_END_TAG = re.compile(r"</(?P<name>" + TAG_NAME + r")\s*>")


class TokenizerState(Enum):
    OUTSIDE_TAG = "outside_tag"
    IN_TAG = "in_tag"
    IN_RAW_TEXT = "in_raw_text"
    IN_COMMENT = "in_comment"


@dataclass(frozen=True)
class TextToken:
    text: str


@dataclass(frozen=True)
class StartTag:
    name: str
    attributes_text: str = ""
    self_closing: bool = False


@dataclass(frozen=True)
class EndTag:
    name: str


@dataclass(frozen=True)
class Comment:
    """Comment, doctype, processing instruction or CDATA section."""

    text: str


Token = Union[TextToken, StartTag, EndTag, Comment]


class HtmlTokenizer:
    """State machine turning markup into a token stream."""

    def __init__(self, markup: str):
        self.markup = markup
        self.state = TokenizerState.OUTSIDE_TAG
        self._position = 0
        self._pending_text: List[str] = []

    def __iter__(self) -> Iterator[Token]:
        return self.tokens()

    def tokens(self) -> Iterator[Token]:
        markup = self.markup
        length = len(markup)
        while self._position < length:
            start = markup.find("<", self._position)
            if start < 0:
                self._pending_text.append(markup[self._position:])
                self._position = length
                break
            if start > self._position:
                self._pending_text.append(markup[self._position:start])
            self._position = start

            token = self._read_markup(start)
            if token is None:
                # not a tag: the '<' is text
                self._pending_text.append("<")
                self._position = start + 1
                continue

            text = self._take_text()
            if text is not None:
                yield text
            yield token

            if isinstance(token, StartTag) and not token.self_closing and is_opaque(token.name):
                self._skip_raw_text(token.name)
            self.state = TokenizerState.OUTSIDE_TAG

        text = self._take_text()
        if text is not None:
            yield text

    # ------------------------------------------------------------------
    def _take_text(self) -> Optional[TextToken]:
        if not self._pending_text:
            return None
        text = "".join(self._pending_text)
        self._pending_text = []
        return TextToken(text)

    def _read_markup(self, start: int) -> Optional[Token]:
        markup = self.markup
        if markup.startswith("<!--", start):
            self.state = TokenizerState.IN_COMMENT
            return self._read_until(start, start + 4, "-->")
        if markup.startswith("<![CDATA[", start):
            self.state = TokenizerState.IN_COMMENT
            return self._read_until(start, start + 9, "]]>")
        if markup.startswith("<!", start) or markup.startswith("<?", start):
            self.state = TokenizerState.IN_COMMENT
            return self._read_until(start, start + 2, ">")

        self.state = TokenizerState.IN_TAG
        match = _END_TAG.match(markup, start)
        if match:
            self._position = match.end()
            return EndTag(match.group("name").lower())

        match = _START_TAG.match(markup, start)
        if match:
            self._position = match.end()
            return StartTag(
                match.group("name").lower(),
                match.group("attributes") or "",
                match.group("self_closing") is not None,
            )

        match = _LENIENT_START_TAG.match(markup, start)
        if match:
            self._position = match.end()
            attributes = match.group("attributes") or ""
            self_closing = attributes.rstrip().endswith("/")
            if self_closing:
                attributes = attributes.rstrip()[:-1]
            logger.debug(f"Lenient tag parse: {match.group(0)[:80]!r}")
            return StartTag(match.group("name").lower(), attributes, self_closing)

        logger.debug(f"Literal '<' at offset {start}")
        self.state = TokenizerState.OUTSIDE_TAG
        return None

    def _read_until(self, start: int, body_start: int, terminator: str) -> Comment:
        end = self.markup.find(terminator, body_start)
        if end < 0:
            logger.debug(f"Unterminated comment/declaration at offset {start}")
            self._position = len(self.markup)
            return Comment(self.markup[body_start:])
        self._position = end + len(terminator)
        return Comment(self.markup[body_start:end])

    def _skip_raw_text(self, name: str) -> None:
        self.state = TokenizerState.IN_RAW_TEXT
        close = re.compile(r"</" + re.escape(name) + r"\s*>", re.IGNORECASE)
        match = close.search(self.markup, self._position)
        if match is None:
            logger.debug(f"Opaque <{name}> runs to end of input")
            self._position = len(self.markup)
        else:
            self._position = match.end()


def tokenize(markup: str) -> List[Token]:
    """Tokenize ``markup`` into a list."""
    return list(HtmlTokenizer(markup).tokens())
