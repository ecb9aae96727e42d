"""spandex: migrate text-expansion snippets between expander backends."""

__version__ = "0.1.0"
