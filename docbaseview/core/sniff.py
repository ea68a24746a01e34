import re

import filetype

TEXT_PLAIN = "text/plain; charset=utf-8"
OCTET_STREAM = "application/octet-stream"

# filetype only reads the leading bytes
SNIFF_LENGTH = 8192

# control characters never found in text files (tab, newlines, FF, CR and ESC are allowed)
BINARY_BYTES = re.compile(rb'[\x00-\x08\x0b\x0e-\x1a\x1c-\x1f]')

def detect_content_type(content: bytes) -> str:
    """
    Detect a MIME type from file content, ignoring the file name.

    Binary formats are recognised by signature; anything else that decodes as
    UTF-8 and holds no control bytes is served as plain text, and the rest as
    an octet stream.
    """
    head = content[:SNIFF_LENGTH]
    mime = filetype.guess_mime(head) if head else None
    if mime:
        return mime
    if BINARY_BYTES.search(head):
        return OCTET_STREAM
    try:
        head.decode('utf-8')
    except UnicodeDecodeError as e:
        # a multibyte sequence cut at the sniff boundary is still text
        if len(content) <= SNIFF_LENGTH or e.start < len(head) - 3:
            return OCTET_STREAM
    return TEXT_PLAIN
