"""
Process-wide, read-only state built once at startup.
"""
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Tuple

from docbaseview.core.catalog import Document, scan_documents
from docbaseview.core.name_index import build_name_index

logger = logging.getLogger(__name__)


class StartupError(Exception):
    """An export directory could not be read; the server must not start."""


@dataclass(frozen=True)
class SiteContext:
    markdown_dir: Path
    image_dir: Path
    file_dir: Path
    documents: Tuple[Document, ...]
    image_index: Mapping[str, str]
    file_index: Mapping[str, str]
    basic_user: str = ""
    basic_password: str = ""

    @property
    def auth_enabled(self) -> bool:
        return bool(self.basic_user)


def load_site(config) -> SiteContext:
    """Scan the three export directories named by config."""
    markdown_dir = Path(config.markdown_dir)
    image_dir = Path(config.image_dir)
    file_dir = Path(config.file_dir)

    try:
        documents = scan_documents(markdown_dir)
    except OSError as e:
        raise StartupError(f"failed to read markdown directory {markdown_dir}: {e}") from e
    try:
        image_index = build_name_index(image_dir)
    except OSError as e:
        raise StartupError(f"failed to read images directory {image_dir}: {e}") from e
    try:
        file_index = build_name_index(file_dir)
    except OSError as e:
        raise StartupError(f"failed to read files directory {file_dir}: {e}") from e

    return SiteContext(
        markdown_dir=markdown_dir,
        image_dir=image_dir,
        file_dir=file_dir,
        documents=documents,
        image_index=image_index,
        file_index=file_index,
        basic_user=config.basic_user or "",
        basic_password=config.basic_password or "",
    )
