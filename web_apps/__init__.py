"""
Web applications for the word family system.

This package contains the HTTP surface:
- Vocabulary search and word family resolution
- Row import and headword population
- Family, word and grade statistics with mapping management
"""

# Web applications are typically run as modules, not imported

__all__ = []
