"""
Test suites package.

Kept importable so unit tests can share fakes (`testsuites.unit.fakes`)
and UI tests can share fixture pages.
"""
