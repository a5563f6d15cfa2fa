"""
Test suite for the quantum math core

Contains:
- tests/unit/          : Unit tests for individual modules
"""
