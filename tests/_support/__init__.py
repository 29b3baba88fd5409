"""
Test support utilities for modkit tests.

- ``fakes``: fake ``Compiler`` implementations
- ``trees``: builders for source trees, outputs, artifacts and zips
"""
