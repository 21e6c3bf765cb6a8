"""Buffered rewrite pass over a document on disk.

The file is read and tokenized fully in memory, all patches run against the
buffer, and the result is written back only when the whole pass succeeded
and something changed. Any exception leaves the file exactly as it was.
"""

from __future__ import annotations

import logging
import os
import re
import shutil
import tempfile
from dataclasses import dataclass
from typing import Any, Callable, Tuple

from common.logging_utils import Timer, extra_context, is_debug_enabled
from constants import Constants

from .document import ModifiedDocument

logger = logging.getLogger(__name__)

_DECLARED_ENCODING = re.compile(rb"""<\?xml[^>]*?encoding\s*=\s*["']([A-Za-z0-9._-]+)["']""")

# BOMs are kept as part of the text so they survive the round trip.
_BOMS = (
    (b"\xef\xbb\xbf", "utf-8"),
    (b"\xff\xfe", "utf-16-le"),
    (b"\xfe\xff", "utf-16-be"),
)


def detect_encoding(data: bytes) -> str:
    """Encoding from the BOM, then the XML declaration, then UTF-8."""
    for bom, encoding in _BOMS:
        if data.startswith(bom):
            return encoding
    match = _DECLARED_ENCODING.search(data[:512])
    if match:
        return match.group(1).decode("ascii").lower()
    return Constants.DEFAULT_ENCODING


def read_document_text(path: str) -> Tuple[str, str]:
    """Return (text, encoding) for ``path`` without newline translation."""
    with open(path, "rb") as handle:
        data = handle.read()
    encoding = detect_encoding(data)
    return data.decode(encoding), encoding


def write_document_text(path: str, text: str, encoding: str) -> None:
    """Atomically replace ``path`` with ``text``."""
    directory = os.path.dirname(os.path.abspath(path))
    handle = tempfile.NamedTemporaryFile(mode="wb", dir=directory, prefix=".pomversions-", delete=False)
    try:
        with handle:
            handle.write(text.encode(encoding))
        shutil.copymode(path, handle.name)
        os.replace(handle.name, path)
    except BaseException:
        if os.path.exists(handle.name):
            os.unlink(handle.name)
        raise


@dataclass
class RewriteOutcome:
    """What a rewrite pass did to one file."""
    path: str
    changed: bool
    written: bool
    result: Any = None


def rewrite_file(
    path: str,
    update: Callable[[ModifiedDocument], Any],
    backup: bool = False,
    dry_run: bool = False,
) -> RewriteOutcome:
    """Run ``update`` against the buffered document at ``path``.

    Raises DocumentStructureError (before ``update`` runs) when the file is
    malformed; exceptions from ``update`` propagate. In both cases nothing
    is written.
    """
    with Timer() as timer:
        text, encoding = read_document_text(path)
        document = ModifiedDocument(text)
        result = update(document)
        changed = document.modified
        written = False
        if changed and not dry_run:
            if backup:
                backup_path = path + Constants.BACKUP_SUFFIX
                shutil.copy2(path, backup_path)
                logger.info("Backup written to %s", backup_path)
            write_document_text(path, document.text, encoding)
            written = True
    if is_debug_enabled(logger):
        logger.debug(
            "Rewrite pass finished",
            extra=extra_context(
                event="function_exit", component="rewrite", action="rewrite_file",
                target=path, changed=changed, written=written, duration_ms=timer.duration_ms(),
            ),
        )
    return RewriteOutcome(path=path, changed=changed, written=written, result=result)
