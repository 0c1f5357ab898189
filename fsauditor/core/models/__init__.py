from __future__ import annotations

"""Core data models for analyzer results.

This package contains the parsed issue model, the ORM models used to store
imported results, and the document parsers.

Modules
-------
orm : SQLAlchemy ORM models
schema : Pydantic schema models
parsers : AnalysisOutput reader and parser

See Also
--------
fsauditor.infra.db : Database utilities
"""

from .schema import *
