"""Minimal-diff rewriting of XML build descriptors."""

from .document import ModifiedDocument
from .patcher import apply_patch, apply_patch_all, find_targets, set_value
from .rewrite import RewriteOutcome, rewrite_file
from .tokenizer import DocumentStructureError, Token, TokenKind, tokenize

__all__ = [
    "DocumentStructureError",
    "ModifiedDocument",
    "RewriteOutcome",
    "Token",
    "TokenKind",
    "apply_patch",
    "apply_patch_all",
    "find_targets",
    "rewrite_file",
    "set_value",
    "tokenize",
]
