"""
Records Kernel - shared foundation for the records codec.

Provides:
- Field kinds and width markers for entry types
- Typed exception hierarchy with machine-readable codes
- Structured JSON logging
"""

__version__ = "0.1.0"
