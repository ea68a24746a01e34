import logging
import os
from types import MappingProxyType
from typing import Mapping

logger = logging.getLogger(__name__)

# The export names files "<id>_<originalName>"; links only carry the original name.
SEPARATOR = "_"

def index_key(file_name: str) -> str:
    """Return the public link name for an exported file name."""
    return file_name[file_name.rfind(SEPARATOR) + 1:]

def build_name_index(directory) -> Mapping[str, str]:
    """
    Map the public link name of every file in directory to its on-disk name.

    Subdirectories are ignored. When two files share a link name the one
    scanned later wins. Raises OSError if the directory cannot be listed.
    """
    index = {}
    with os.scandir(directory) as it:
        entries = sorted(it, key=lambda e: e.name)
    for entry in entries:
        if entry.is_dir():
            continue
        key = index_key(entry.name)
        if key in index:
            logger.debug(f"Name index {directory}: {entry.name} replaces {index[key]} for '{key}'")
        index[key] = entry.name
    logger.info(f"Indexed {len(index)} files in {directory}")
    return MappingProxyType(index)
