"""
OralGen - Turn transcribed MZ11 survey forms into lineage-linked pedigrees.

This package normalizes rows extracted from the 75-row MZ11 form, resolves
their kinship codes into family units, and exports GEDCOM documents.
"""

__version__ = "0.1.0"
__author__ = "OralGen Contributors"
