"""Build graph resolution and source provenance for Maven projects.

This package turns a live project model into inputs for static analysis:
- Descriptor candidate collection across modules and parents
- Descriptor caching with in-memory fallback
- User settings and active profiles
- Source enumeration for main, test and generated roots
- Provenance markers on every parsed unit
"""

__version__ = "0.1.0"
