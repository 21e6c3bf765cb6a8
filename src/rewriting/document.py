"""In-memory token buffer for a document being rewritten.

A ``ModifiedDocument`` keeps the token list of the original text. Patches
replace the raw text of individual tokens, so every untouched region
re-serializes byte for byte. Locations are found by rescanning the tokens
structurally, never by byte offsets computed ahead of time.
"""

from __future__ import annotations

import logging
from typing import Iterator, List, Optional, Tuple
from xml.sax.saxutils import escape, unescape

from common.logging_utils import extra_context, is_debug_enabled

from .tokenizer import DocumentStructureError, Token, TokenKind, tokenize

logger = logging.getLogger(__name__)

Path = Tuple[str, ...]


class ModifiedDocument:
    """Token buffer plus its serialized view."""

    def __init__(self, text: str):
        self._original = text
        self._tokens: List[Token] = tokenize(text)

    @property
    def tokens(self) -> List[Token]:
        return list(self._tokens)

    @property
    def text(self) -> str:
        """Current document text."""
        return "".join(token.raw for token in self._tokens)

    @property
    def original(self) -> str:
        return self._original

    @property
    def modified(self) -> bool:
        return self.text != self._original

    def walk(self) -> Iterator[Tuple[int, Token, Path]]:
        """Yield (index, token, element path) in document order.

        The path of a start tag includes the element itself; text and other
        tokens carry the path of their enclosing element.
        """
        stack: List[str] = []
        for index, token in enumerate(self._tokens):
            if token.kind is TokenKind.START:
                stack.append(token.local_name or "")
                yield index, token, tuple(stack)
            elif token.kind is TokenKind.END:
                yield index, token, tuple(stack)
                stack.pop()
            elif token.kind is TokenKind.EMPTY:
                yield index, token, tuple(stack) + (token.local_name or "",)
            else:
                yield index, token, tuple(stack)

    def element_span(self, start_index: int) -> int:
        """Index of the END token closing the START token at ``start_index``."""
        depth = 0
        for index in range(start_index, len(self._tokens)):
            kind = self._tokens[index].kind
            if kind is TokenKind.START:
                depth += 1
            elif kind is TokenKind.END:
                depth -= 1
                if depth == 0:
                    return index
        raise DocumentStructureError("Unbalanced element in buffer")

    def children(self, start_index: int) -> Iterator[Tuple[int, str]]:
        """Yield (index, local name) of the direct child elements."""
        if self._tokens[start_index].kind is TokenKind.EMPTY:
            return
        end_index = self.element_span(start_index)
        depth = 0
        for index in range(start_index + 1, end_index):
            token = self._tokens[index]
            if token.kind is TokenKind.START:
                if depth == 0:
                    yield index, token.local_name or ""
                depth += 1
            elif token.kind is TokenKind.END:
                depth -= 1
            elif token.kind is TokenKind.EMPTY and depth == 0:
                yield index, token.local_name or ""

    def child_text(self, start_index: int, name: str) -> Optional[str]:
        """Stripped text of the first direct child called ``name``."""
        for index, child in self.children(start_index):
            if child == name:
                text = self.element_text(index)
                return text.strip() if text is not None else None
        return None

    def element_text(self, start_index: int) -> Optional[str]:
        """Unescaped text content of a leaf element, None if it has child markup."""
        token = self._tokens[start_index]
        if token.kind is TokenKind.EMPTY:
            return ""
        end_index = self.element_span(start_index)
        parts = []
        for inner in self._tokens[start_index + 1:end_index]:
            if inner.kind is not TokenKind.TEXT:
                return None
            parts.append(inner.raw)
        return unescape("".join(parts))

    def replace_element_text(self, start_index: int, value: str) -> None:
        """Replace the text of a leaf element, keeping surrounding whitespace.

        A self-closing element is expanded from its own tag, attributes and
        spacing included, and collapses back when its value is cleared again.
        Clearing a value leaves an empty text token between the original
        padding so a later patch lands in the same place.
        """
        token = self._tokens[start_index]
        escaped = escape(value)
        if token.kind is TokenKind.EMPTY:
            if not value:
                return
            name = token.name or ""
            self._tokens[start_index:start_index + 1] = [
                Token(TokenKind.START, token.raw[:-2] + ">", name, collapsed=token.raw),
                Token(TokenKind.TEXT, escaped),
                Token(TokenKind.END, f"</{name}>", name),
            ]
            self._log_replace(token, start_index)
            return

        end_index = self.element_span(start_index)
        if not value and token.collapsed is not None:
            self._tokens[start_index:end_index + 1] = [Token(TokenKind.EMPTY, token.collapsed, token.name)]
            self._log_replace(token, start_index)
            return

        inner = self._tokens[start_index + 1:end_index]
        cleared = [i for i, t in enumerate(inner) if not t.raw]
        if cleared:
            leading = "".join(t.raw for t in inner[:cleared[0]])
            trailing = "".join(t.raw for t in inner[cleared[0] + 1:])
        else:
            raw = "".join(t.raw for t in inner)
            if raw.strip():
                leading = raw[:len(raw) - len(raw.lstrip())]
                trailing = raw[len(raw.rstrip()):]
            else:
                leading, trailing = raw, ""
        replacement = [Token(TokenKind.TEXT, leading)] if leading else []
        if escaped or inner:
            replacement.append(Token(TokenKind.TEXT, escaped))
        if trailing:
            replacement.append(Token(TokenKind.TEXT, trailing))
        self._tokens[start_index + 1:end_index] = replacement
        self._log_replace(token, start_index)

    def _log_replace(self, token: Token, start_index: int) -> None:
        if is_debug_enabled(logger):
            logger.debug(
                "Replaced element text",
                extra=extra_context(
                    event="rewrite", component="document", action="replace_text",
                    element=token.local_name, token_index=start_index,
                ),
            )
