"""
dbtest: SQL assertion fixtures for database integration tests.

Loads declarative assertion files from a resource tree and serves them
to the test harness by case identifier.
"""

__version__ = "0.1.0"
