"""Test suite for rulegate.

This package contains tests for:
- Rule values, cross-references and combinators
- The built-in rule catalog
- Schema compilation
- The gate evaluator
- The traversal engine and ValidationEngine host API
"""
