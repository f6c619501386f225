"""
Tests package - test suite for the webhook lifecycle subsystem.

Contains:
- unit/: Unit tests for individual components
- fixtures/: Test data and in-memory API fakes
"""
