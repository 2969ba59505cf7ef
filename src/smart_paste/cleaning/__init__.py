"""Text cleaning for pasted prose.

Submodules:
  normalize  -- non-breaking / zero-width character and whitespace collapsing
  patterns   -- compiled regex patterns shared by the cleaners
  pdf_text   -- statistical removal of artificial line breaks
  lists      -- bullet / numbered list recognition into text blocks
"""
