# scripture_refs/__init__.py
"""
Scripture reference parsing, detection and USX versification tools.

Subpackages:
- services.references: parse, validate, detect and render passage references
- services.usx: validate and reverse the versification of USX documents
- routes: Flask blueprints exposing both over HTTP
"""

__version__ = "0.1.0"
