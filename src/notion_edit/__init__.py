"""Edit Notion pages as Markdown files."""

__version__ = "0.1.0"
