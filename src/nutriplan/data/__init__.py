"""Data layer: catalog entities, planning records, and the catalog registry."""
