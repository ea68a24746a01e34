import logging

import markdown

from docbaseview.core.rewriter import rewrite_links, replace_emoji

logger = logging.getLogger(__name__)

MARKDOWN_EXTENSIONS = [
    'tables',
    'fenced_code',
    'def_list',
    'sane_lists',
    'toc',                  # heading ids
    'pymdownx.tilde',       # ~~strikethrough~~
    'pymdownx.betterem',
    'pymdownx.magiclink',   # bare URLs become links
]

def prepare_markdown(md_text: str) -> str:
    """Apply the export link rewrites and the emoji pass to raw Markdown."""
    return replace_emoji(rewrite_links(md_text))

def render_markdown(md_text: str) -> str:
    """Rewrite export references and convert the Markdown body to HTML."""
    processed = prepare_markdown(md_text)
    logger.debug(f"Render markdown: {len(md_text)} chars input, {len(processed)} after rewrite")
    # Markdown instances keep state between conversions, so each render gets its own
    md_instance = markdown.Markdown(extensions=MARKDOWN_EXTENSIONS)
    return md_instance.convert(processed)
