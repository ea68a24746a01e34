"""
DocBase export viewer.
Serves an exported DocBase tree (Markdown, images, attachments) as a read-only site.
"""
