"""
Austin Lot Split Analysis Module

Estimates whether a residential lot can be subdivided under Austin
zoning rules and whether doing so is worth it:
- Lot geometry and buildable envelope
- Subdivision feasibility (size, width, frontage, utilities, drainage)
- Investment economics
- 0-100 desirability score and ranking
"""

from .analyzer import AnalysisResult, LotAnalyzer, analyze_batch, analyze_one
from .property import AnalysisConfig, LotDimensions, Property

__all__ = [
    "AnalysisConfig",
    "AnalysisResult",
    "LotAnalyzer",
    "LotDimensions",
    "Property",
    "analyze_batch",
    "analyze_one",
]
