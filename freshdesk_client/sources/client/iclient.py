from abc import ABC, abstractmethod
from typing import Any


class IClient(ABC):
    """Interface shared by every client wrapper"""

    @abstractmethod
    def get_client(self) -> Any:
        """Return the underlying client object"""
        raise NotImplementedError
