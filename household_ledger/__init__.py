"""
Household Ledger - Source Package

The split-calculation and aggregation engine of a household expense
ledger: canonical monthly costs, per-member owed shares, category
roll-ups, settlements and budget summaries.

DESIGN PRINCIPLES:
1. Every calculation is pure: inputs are frozen, results are new values
2. Invalid edits are rejected in full, never silently fixed
3. Missing references degrade gracefully (orphans become Uncategorized)
4. Every edit is auditable
5. Storage and presentation are external collaborators
"""

__version__ = "1.0.0"
__author__ = "Household Ledger Team"
