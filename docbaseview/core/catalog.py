import logging
import os
from dataclasses import dataclass
from typing import Tuple

logger = logging.getLogger(__name__)

@dataclass(frozen=True)
class Document:
    file_name: str
    title: str = ""

def _decode_line(raw: bytes) -> str:
    """Drop the line terminator: one LF, then one CR before it."""
    if raw.endswith(b'\n'):
        raw = raw[:-1]
    if raw.endswith(b'\r'):
        raw = raw[:-1]
    return raw.decode('utf-8', errors='replace')

def read_title(path) -> str:
    """Return the first line of a file without its line terminator."""
    with open(path, 'rb') as f:
        return _decode_line(f.readline())

def read_title_and_body(path) -> Tuple[str, str]:
    """
    Split a Markdown file into its title (first line) and body.
    Lines end at LF only. Every body line is terminated by a newline.
    """
    with open(path, 'rb') as f:
        title = _decode_line(f.readline())
        body = ''.join(_decode_line(line) + '\n' for line in f)
    return title, body

def scan_documents(directory) -> Tuple[Document, ...]:
    """
    Build the document catalog for a Markdown directory.

    Unreadable files are kept with an empty title. Raises OSError if the
    directory itself cannot be listed.
    """
    documents = []
    with os.scandir(directory) as it:
        entries = sorted(it, key=lambda e: e.name)
    for entry in entries:
        if entry.is_dir():
            continue
        try:
            title = read_title(entry.path)
        except OSError as e:
            logger.warning(f"Failed to read title of {entry.path}: {e}")
            title = ""
        documents.append(Document(file_name=entry.name, title=title))
    logger.info(f"Cataloged {len(documents)} documents in {directory}")
    return tuple(documents)
