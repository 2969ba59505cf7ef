"""Table reconstruction from pasted spreadsheet text and HTML.

Submodules:
  patterns     -- compiled regex patterns and tag whitelists
  schema       -- TableGrid / StructuredTable Pydantic models
  classifiers  -- definite-data-table and layout-table heuristics
  builder      -- TSV / CSV / HTML -> TableGrid
  sanitize     -- structure-preserving HTML table sanitization
"""
