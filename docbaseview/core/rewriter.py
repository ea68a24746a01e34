"""
Rewrites DocBase export references in raw Markdown into local ones.

The rules run on the Markdown source before it is converted to HTML, in the
order given by LINK_RULES. Images and attachments are shortened to their bare
link name so the browser requests them from this server, where the name
index resolves them to the exported file.
"""
import re
from typing import Callable, Iterable, List

DOCUMENT_ICON = "\U0001F4C4\uFE0F"
LINK_ICON = "\U0001F517"
HELP_SITE = "https://help.docbase.io"
CHECKBOX = '<input type="checkbox" disabled></input>'
CHECKBOX_CHECKED = '<input type="checkbox" disabled checked></input>'


class PatternRule:
    """Regex substitution; replacement uses re.sub template syntax."""

    def __init__(self, name: str, pattern: str, replacement: str):
        self.name = name
        self.pattern: re.Pattern = re.compile(pattern)
        self.replacement = replacement

    def apply(self, text: str) -> str:
        return self.pattern.sub(self.replacement, text)

    def __repr__(self):
        return f"PatternRule({self.name!r}, {self.pattern.pattern!r})"


class LiteralRule:
    """Plain substring substitution."""

    def __init__(self, name: str, old: str, new: str):
        self.name = name
        self.old = old
        self.new = new

    def apply(self, text: str) -> str:
        return text.replace(self.old, self.new)

    def __repr__(self):
        return f"LiteralRule({self.name!r}, {self.old!r})"


class RewritePipeline:
    """
    A sequence of text transformations executed in order.
    Errors propagate; a half-rewritten document is never returned.
    """

    def __init__(self, name: str, steps: Iterable[Callable[[str], str]] = ()):
        self.name = name
        self._steps: List[Callable[[str], str]] = list(steps)

    def add_step(self, handler: Callable[[str], str]):
        self._steps.append(handler)

    def run(self, content: str) -> str:
        for step in self._steps:
            content = step(content)
        return content

    def __iter__(self):
        return iter(self._steps)

    def __len__(self):
        return len(self._steps)


LINK_RULES = (
    # #{123} references another exported document by its numeric id
    PatternRule(
        "document_link",
        r"#\{([0-9]+)\}",
        LINK_ICON + r' <a href="\g<1>.md">\g<1>.md</a>',
    ),
    PatternRule(
        "attachment_url",
        r"https://docbase\.io/file_attachments/([0-9a-zA-Z.]+)",
        r"\g<1>",
    ),
    PatternRule(
        "file_icon",
        r"!\[[a-z]+\]\(/images/file_icons/[a-z]+\.svg\)",
        DOCUMENT_ICON,
    ),
    # query parameters after the upload name are dropped
    PatternRule(
        "image_url",
        r"https://image\.docbase\.io/uploads/([0-9a-zA-Z.\-]+)[^)]*",
        r"\g<1>",
    ),
    LiteralRule("checkbox", "[ ]", CHECKBOX),
    LiteralRule("checkbox_checked", "[x]", CHECKBOX_CHECKED),
    PatternRule(
        "guidance_path",
        r"(?<!" + re.escape(HELP_SITE) + r")/guidance/",
        HELP_SITE + "/guidance/",
    ),
)

# Only the shortcodes seen in practice; anything else is left as typed.
EMOJI = {
    "+1": "\U0001F44D",
    "-1": "\U0001F44E",
    "bulb": "\U0001F4A1",
    "computer": "\U0001F4BB",
    "inbox_tray": "\U0001F4E5",
    "link": "\U0001F517",
    "lock": "\U0001F512",
    "mag": "\U0001F50D",
    "memo": "\U0001F4DD",
    "moneybag": "\U0001F4B0",
    "movie_camera": "\U0001F3A5",
    "poop": "\U0001F4A9",
    "pray": "\U0001F64F",
    "shit": "\U0001F4A9",
    "sparkle": "\u2728",
    "sparkles": "\u2728",
    "speech_balloon": "\U0001F4AC",
    "unlock": "\U0001F513",
}

EMOJI_RULES = tuple(
    LiteralRule(f"emoji_{code}", f":{code}:", glyph) for code, glyph in EMOJI.items()
)

LINK_PIPELINE = RewritePipeline("links", (rule.apply for rule in LINK_RULES))
EMOJI_PIPELINE = RewritePipeline("emoji", (rule.apply for rule in EMOJI_RULES))


def rewrite_links(text: str) -> str:
    return LINK_PIPELINE.run(text)


def replace_emoji(text: str) -> str:
    return EMOJI_PIPELINE.run(text)
