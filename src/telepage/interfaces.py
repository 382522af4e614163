from abc import ABC, abstractmethod
from typing import List

from .types import Node


class IConverter(ABC):
    """
    Interface for content converters (e.g. HTML -> Node, Markdown -> Node).
    This allows page content to be authored in different source formats
    and handed to the client interchangeably.
    """

    @abstractmethod
    def convert(self, content: str) -> List[Node]:
        """
        Convert source text to Telegraph nodes.

        Args:
            content: Source text in the converter's format

        Returns:
            List of top-level nodes, in document order
        """
        pass
