"""
Test suite for bonding_curve

Contains:
- tests/unit/          : Unit tests for individual modules
"""
