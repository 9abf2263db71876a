"""Test fixtures for the virtual calendar.

- core: event, rule, calendar, registry and interpreter fixtures
"""
