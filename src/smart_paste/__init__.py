"""Clipboard-content normalization for a rich-text editor.

Subpackages:
  cleaning  -- text normalization, PDF line-break removal, list recognition
  tables    -- TSV/CSV/HTML table reconstruction and sanitization
  paste     -- payload classification, document nodes, paste orchestration
"""

from smart_paste.paste.handler import handle_paste

__all__ = ["handle_paste"]
