"""Test suite for the balext package.

This package contains unit and integration tests validating markup
reading, attribute coercion, the BAL validators and dispatcher,
extension loading and the command-line utilities.
"""
