"""Storage optimization layer.

This package chunks, compacts, expires, and analyzes entries of a
size-constrained key-value store, and snapshots project state into it.
"""
