import unittest
import sys
from pathlib import Path

# Add project root to sys.path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from docbaseview.core.rewriter import (
    CHECKBOX, CHECKBOX_CHECKED, DOCUMENT_ICON, EMOJI, LINK_RULES,
    LiteralRule, PatternRule, RewritePipeline, replace_emoji, rewrite_links,
)

RULES = {rule.name: rule for rule in LINK_RULES}

class TestLinkRules(unittest.TestCase):
    def test_rule_order(self):
        self.assertEqual([r.name for r in LINK_RULES], [
            "document_link", "attachment_url", "file_icon", "image_url",
            "checkbox", "checkbox_checked", "guidance_path",
        ])

    def test_document_link(self):
        out = RULES["document_link"].apply("see #{42} and #{7}")
        self.assertIn('<a href="42.md">42.md</a>', out)
        self.assertIn('<a href="7.md">7.md</a>', out)
        self.assertNotIn("#{", out)

    def test_document_link_requires_digits(self):
        self.assertEqual(RULES["document_link"].apply("#{abc} #{}"), "#{abc} #{}")

    def test_attachment_url(self):
        out = RULES["attachment_url"].apply(
            "[abc123.png](https://docbase.io/file_attachments/abc123.png)")
        self.assertEqual(out, "[abc123.png](abc123.png)")

    def test_file_icon(self):
        out = RULES["file_icon"].apply("![pdf](/images/file_icons/pdf.svg) report.pdf")
        self.assertEqual(out, DOCUMENT_ICON + " report.pdf")

    def test_file_icon_needs_lowercase_alt(self):
        text = "![PDF](/images/file_icons/pdf.svg)"
        self.assertEqual(RULES["file_icon"].apply(text), text)

    def test_image_url_drops_query(self):
        out = RULES["image_url"].apply(
            "![a.png](https://image.docbase.io/uploads/aa-bb-cc.png?width=300&height=200)")
        self.assertEqual(out, "![a.png](aa-bb-cc.png)")

    def test_checkboxes(self):
        self.assertEqual(RULES["checkbox"].apply("- [ ] todo"), f"- {CHECKBOX} todo")
        self.assertEqual(RULES["checkbox_checked"].apply("- [x] done"), f"- {CHECKBOX_CHECKED} done")

    def test_guidance_path(self):
        out = RULES["guidance_path"].apply("[help](/guidance/markdown)")
        self.assertEqual(out, "[help](https://help.docbase.io/guidance/markdown)")

    def test_guidance_path_already_on_help_site(self):
        url = "https://help.docbase.io/guidance/markdown"
        self.assertEqual(RULES["guidance_path"].apply(url), url)

class TestRewriteLinks(unittest.TestCase):
    SOURCE = (
        "Related: #{42}\n"
        "![pdf](/images/file_icons/pdf.svg) [spec.pdf](https://docbase.io/file_attachments/abc123.pdf)\n"
        "![shot.png](https://image.docbase.io/uploads/0a1b-2c3d.png?w=10)\n"
        "- [ ] open\n"
        "- [x] closed\n"
        "See /guidance/ for help\n"
    )

    def test_all_rules_applied(self):
        out = rewrite_links(self.SOURCE)
        self.assertIn('href="42.md"', out)
        self.assertIn(f"{DOCUMENT_ICON} [spec.pdf](abc123.pdf)", out)
        self.assertIn("![shot.png](0a1b-2c3d.png)", out)
        self.assertIn(f"- {CHECKBOX} open", out)
        self.assertIn(f"- {CHECKBOX_CHECKED} closed", out)
        self.assertIn("https://help.docbase.io/guidance/", out)
        self.assertNotIn("docbase.io/uploads", out)
        self.assertNotIn("file_attachments", out)

    def test_attachment_url_stripped_exactly(self):
        out = rewrite_links("https://docbase.io/file_attachments/abc123.png")
        self.assertEqual(out, "abc123.png")

    def test_no_plain_checkbox_survives(self):
        out = rewrite_links("[ ][x] `[ ]` [x][ ]")
        self.assertNotIn("[ ]", out)
        self.assertNotIn("[x]", out)
        self.assertEqual(out.count(CHECKBOX), 3)
        self.assertEqual(out.count(CHECKBOX_CHECKED), 2)

    def test_idempotent(self):
        once = rewrite_links(self.SOURCE)
        self.assertEqual(rewrite_links(once), once)

    def test_plain_text_unchanged(self):
        text = "# Heading\n\nNothing to rewrite here: [link](other.md)\n"
        self.assertEqual(rewrite_links(text), text)

class TestEmoji(unittest.TestCase):
    def test_known_shortcodes(self):
        self.assertEqual(replace_emoji(":+1: :bulb:"), "\U0001F44D \U0001F4A1")

    def test_every_occurrence_replaced(self):
        self.assertEqual(replace_emoji(":memo::memo:"), "\U0001F4DD\U0001F4DD")

    def test_every_dictionary_entry(self):
        for code, glyph in EMOJI.items():
            with self.subTest(code=code):
                self.assertEqual(replace_emoji(f"a :{code}: b"), f"a {glyph} b")

    def test_shared_glyphs(self):
        self.assertEqual(replace_emoji(":poop:"), replace_emoji(":shit:"))
        self.assertEqual(replace_emoji(":sparkle:"), replace_emoji(":sparkles:"))

    def test_unknown_shortcode_left_alone(self):
        self.assertEqual(replace_emoji(":smile: :+1"), ":smile: :+1")

    def test_order_with_rewrite_does_not_matter(self):
        text = "#{3} :link: - [x] :lock:"
        self.assertEqual(replace_emoji(rewrite_links(text)), rewrite_links(replace_emoji(text)))

class TestPipeline(unittest.TestCase):
    def test_steps_run_in_order(self):
        pipeline = RewritePipeline("test")
        pipeline.add_step(LiteralRule("a", "a", "b").apply)
        pipeline.add_step(PatternRule("b", "b+", "c").apply)
        self.assertEqual(len(pipeline), 2)
        self.assertEqual(pipeline.run("aab"), "c")

    def test_errors_propagate(self):
        def broken(content):
            raise ValueError("bad step")
        pipeline = RewritePipeline("test", [broken])
        with self.assertRaises(ValueError):
            pipeline.run("text")

if __name__ == '__main__':
    unittest.main()
