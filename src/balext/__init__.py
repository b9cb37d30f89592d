"""Compiler for the bootstrapper application layer markup extension.

The `balext` package validates the BAL namespace of an installer-bundle
authoring language and projects it into typed records for a linker.

Key features:
- declarative element schemas with typed attribute coercion;
- diagnostics collected per element, records kept only for clean elements;
- delegation of foreign namespaces to extensions loaded from entry points;
- a markup reader and a compiler host for standalone use.

The records are never interpreted: the package validates markup and
describes what it configures.
"""
