"""
Analyzer Module

Classifies the fields of structured types into Swagger models.
"""

from .object_analyzer import ObjectAnalyzer, VisitedSet, TypeFallback, UnknownTypeError

__all__ = [
    "ObjectAnalyzer",
    "VisitedSet",
    "TypeFallback",
    "UnknownTypeError",
]
