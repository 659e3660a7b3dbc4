"""
=============================================================================
HANDLERS MODULE
=============================================================================

Body production for the server.

    ┌─────────────────────────────────────────────────────────────────────┐
    │              CONTENT TYPE + EXISTENCE → BODY BYTES                  │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   BodyRenderer      Dispatches to one of four bodies:               │
    │                     placeholder page, templated text file,          │
    │                     raw binary file, or the 404 snippet             │
    │                                                                      │
    │   TemplateContext   Time + server identity for the two              │
    │                     template tokens                                  │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from .content import (
    BodyRenderer,
    TemplateContext,
    PLACEHOLDER_PAGE,
    NOT_FOUND_PAGE,
    DATE_TOKEN,
    SERVER_TOKEN,
)

__all__ = [
    "BodyRenderer",
    "TemplateContext",
    "PLACEHOLDER_PAGE",
    "NOT_FOUND_PAGE",
    "DATE_TOKEN",
    "SERVER_TOKEN",
]
