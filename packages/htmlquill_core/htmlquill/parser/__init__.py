"""
Parser module: tokenizer and tree builder for HTML markup.
"""

from .tags import TAGS, TagKind, is_opaque, is_void, tag_kind
from .tokenizer import Comment, EndTag, HtmlTokenizer, StartTag, TextToken, TokenizerState, tokenize
from .html_parser import HtmlContentBuilder, HtmlParser, ImageSlot, ParseResult

__all__ = [
    "TAGS",
    "TagKind",
    "is_opaque",
    "is_void",
    "tag_kind",
    "Comment",
    "EndTag",
    "HtmlTokenizer",
    "StartTag",
    "TextToken",
    "TokenizerState",
    "tokenize",
    "HtmlContentBuilder",
    "HtmlParser",
    "ImageSlot",
    "ParseResult",
]
