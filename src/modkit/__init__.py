"""
modkit - incremental build and packaging core for modular archives.

Subpackages:
- modkit.core: errors, logging, result envelope, hashing, settings
- modkit.build: staleness detection, checksums, owner markers, orchestration
- modkit.compiler: compiler protocol, diagnostics, javac subprocess adapter
- modkit.packaging: artifacts, closure resolution, archive assembly, bundles
- modkit.cli: the `modkit` command (make, resolve)
"""

__version__ = "0.4.0"
