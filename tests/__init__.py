"""Test suite for docsearch."""
