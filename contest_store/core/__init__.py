"""
Shared, cross-cutting code.

`core/` holds small building blocks (DB wiring, settings). Keep table-specific
SQL in the feature package that owns it (e.g. `catalog/`).
"""
