"""
Abstract base class for component extraction strategies.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..models import ComponentEntry


class ExtractionStrategy(ABC):
    """Extracts the component declared by one file of a given grammar."""

    @abstractmethod
    def get_language_name(self) -> str:
        """Return the language name this strategy handles."""
        pass

    @abstractmethod
    def get_supported_extensions(self) -> List[str]:
        """Return list of file suffixes this strategy supports."""
        pass

    def get_excluded_extensions(self) -> List[str]:
        """Return suffixes that look supported but must be skipped."""
        return []

    def handles(self, file_path: str) -> bool:
        """Check whether a path belongs to this strategy's grammar."""
        if any(file_path.endswith(ext) for ext in self.get_excluded_extensions()):
            return False
        return any(file_path.endswith(ext) for ext in self.get_supported_extensions())

    @abstractmethod
    def extract(self, file_path: str, content: str) -> Optional[ComponentEntry]:
        """
        Extract the component declared by a file.

        Args:
            file_path: Absolute path of the file being indexed
            content: File content as string

        Returns:
            The declared component, or None if the file declares none
        """
        pass
