"""
Strategy factory for choosing the extraction strategy of a file.
"""

import threading
from typing import Dict, List, Optional

from ...constants import TREE_EXTENSION, TYPED_EXTENSION
from .base_strategy import ExtractionStrategy
from .typescript_strategy import TypeScriptExtractionStrategy
from .view_tree_strategy import ViewTreeExtractionStrategy


class StrategyFactory:
    """Factory for the view.tree and TypeScript extraction strategies."""

    def __init__(self, tree_extension: str = TREE_EXTENSION, typed_extension: str = TYPED_EXTENSION):
        self._lock = threading.RLock()
        self.tree_strategy = ViewTreeExtractionStrategy(tree_extension)
        self.typed_strategy = TypeScriptExtractionStrategy(typed_extension)
        # Scan order matters: typed sources are merged after tree files
        self._strategies: List[ExtractionStrategy] = [self.tree_strategy, self.typed_strategy]

    def get_strategy(self, file_path: str) -> Optional[ExtractionStrategy]:
        """Strategy for a path, or None when no grammar applies."""
        with self._lock:
            for strategy in self._strategies:
                if strategy.handles(file_path):
                    return strategy
        return None

    def get_strategy_info(self) -> Dict[str, List[str]]:
        """Languages and the suffixes they handle."""
        with self._lock:
            return {s.get_language_name(): s.get_supported_extensions() for s in self._strategies}
