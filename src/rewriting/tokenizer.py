"""Lossless structural tokenizer for XML build descriptors.

The tokenizer splits a document into start/end/empty element tags, text
runs and the other markup kinds while keeping every byte: joining the raw
text of all tokens gives back the input exactly. It only checks structure
(balanced, properly nested elements and terminated markup), which is all
the rewriter needs.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional


class DocumentStructureError(ValueError):
    """Raised when a document is not well-formed enough to rewrite safely."""

    def __init__(self, message: str, line: Optional[int] = None):
        self.line = line
        super().__init__(f"{message} (line {line})" if line is not None else message)


class TokenKind(Enum):
    START = "start"
    END = "end"
    EMPTY = "empty"
    TEXT = "text"
    COMMENT = "comment"
    CDATA = "cdata"
    PI = "pi"
    DECLARATION = "declaration"


@dataclass
class Token:
    """One structural event with its original text."""
    kind: TokenKind
    raw: str
    name: Optional[str] = None
    # Original self-closing tag of an element expanded for a patch
    collapsed: Optional[str] = None

    @property
    def local_name(self) -> Optional[str]:
        """Element name without a namespace prefix."""
        if self.name is None:
            return None
        return self.name.rsplit(":", 1)[-1]


_NAME = re.compile(r"[^\s/>=\"'<]+")

# Terminators for markup that is skipped as an opaque block.
_BLOCKS = (
    ("<!--", "-->", TokenKind.COMMENT),
    ("<![CDATA[", "]]>", TokenKind.CDATA),
    ("<?", "?>", TokenKind.PI),
)


def _line_of(text: str, position: int) -> int:
    return text.count("\n", 0, position) + 1


def _scan_tag_end(text: str, position: int) -> int:
    """Index just past the ``>`` closing the tag that starts at ``position``.

    Quoted attribute values may contain ``>``.
    """
    quote = None
    index = position + 1
    length = len(text)
    while index < length:
        char = text[index]
        if quote is not None:
            if char == quote:
                quote = None
        elif char in "\"'":
            quote = char
        elif char == "<":
            raise DocumentStructureError("Unexpected '<' inside tag", _line_of(text, index))
        elif char == ">":
            return index + 1
        index += 1
    raise DocumentStructureError("Unterminated tag", _line_of(text, position))


def _scan_declaration_end(text: str, position: int) -> int:
    """End of a ``<!DOCTYPE ...>`` style declaration, allowing an internal subset."""
    depth = 0
    index = position + 2
    while index < len(text):
        char = text[index]
        if char == "[":
            depth += 1
        elif char == "]":
            depth -= 1
        elif char == ">" and depth <= 0:
            return index + 1
        index += 1
    raise DocumentStructureError("Unterminated declaration", _line_of(text, position))


def tokenize(text: str) -> List[Token]:
    """Split ``text`` into tokens, validating element nesting.

    Raises DocumentStructureError on unterminated markup, mismatched or
    unclosed elements, a second root element or text outside the root.
    """
    tokens: List[Token] = []
    stack: List[str] = []
    seen_root = False
    position = 0
    length = len(text)

    while position < length:
        if text[position] != "<":
            end = text.find("<", position)
            if end < 0:
                end = length
            raw = text[position:end]
            if not stack and raw.strip() and raw.strip() != "\ufeff":
                raise DocumentStructureError("Text outside the root element", _line_of(text, position))
            tokens.append(Token(TokenKind.TEXT, raw))
            position = end
            continue

        for opener, closer, kind in _BLOCKS:
            if text.startswith(opener, position):
                end = text.find(closer, position + len(opener))
                if end < 0:
                    raise DocumentStructureError(f"Unterminated {kind.value}", _line_of(text, position))
                end += len(closer)
                if kind is TokenKind.CDATA and not stack:
                    raise DocumentStructureError("CDATA outside the root element", _line_of(text, position))
                tokens.append(Token(kind, text[position:end]))
                position = end
                break
        else:
            if text.startswith("<!", position):
                end = _scan_declaration_end(text, position)
                tokens.append(Token(TokenKind.DECLARATION, text[position:end]))
                position = end
                continue

            end = _scan_tag_end(text, position)
            raw = text[position:end]
            if raw.startswith("</"):
                match = _NAME.match(raw, 2)
                name = match.group() if match else ""
                if not stack:
                    raise DocumentStructureError(f"Unexpected closing tag </{name}>", _line_of(text, position))
                if stack[-1] != name:
                    raise DocumentStructureError(
                        f"Mismatched closing tag </{name}>, expected </{stack[-1]}>", _line_of(text, position)
                    )
                stack.pop()
                tokens.append(Token(TokenKind.END, raw, name))
            else:
                match = _NAME.match(raw, 1)
                if match is None:
                    raise DocumentStructureError("Missing element name", _line_of(text, position))
                name = match.group()
                if not stack:
                    if seen_root:
                        raise DocumentStructureError(f"Second root element <{name}>", _line_of(text, position))
                    seen_root = True
                if raw.endswith("/>"):
                    tokens.append(Token(TokenKind.EMPTY, raw, name))
                else:
                    stack.append(name)
                    tokens.append(Token(TokenKind.START, raw, name))
            position = end

    if stack:
        raise DocumentStructureError(f"Unclosed element <{stack[-1]}>", _line_of(text, length))
    if not seen_root:
        raise DocumentStructureError("Document has no root element")
    return tokens
