"""
Blog posts integration test harness

Dual-layer validation: every HTTP response is cross-checked against the
records stored in the test database.
"""
