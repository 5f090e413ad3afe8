"""
Extraction strategies for the two grammars the project index reads.
"""

from .base_strategy import ExtractionStrategy
from .strategy_factory import StrategyFactory
from .typescript_strategy import TypeScriptExtractionStrategy, TypeScriptSymbolParser
from .view_tree_strategy import ViewTreeExtractionStrategy

__all__ = [
    "ExtractionStrategy",
    "StrategyFactory",
    "TypeScriptExtractionStrategy",
    "TypeScriptSymbolParser",
    "ViewTreeExtractionStrategy",
]
