"""
Test suites package.

Kept importable so unit modules can share the in-memory driver and the
sample page types (`testsuites.unit.fakes`, `testsuites.unit.sample_pages`).
"""
