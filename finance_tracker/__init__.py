"""
Finance Tracker - Source Package

A personal finance tracking backend: users record their income and
expenses, and every record belongs to exactly one user.

DESIGN PRINCIPLES:
1. Validate first, touch the store second
2. Every income/expense query is scoped by owner
3. Amounts are exact decimals, never floats
4. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Finance Tracker Team"
