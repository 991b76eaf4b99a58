from typing import Optional

import httpx  # type: ignore


class HTTPResponse:
    """Thin wrapper over an httpx response"""

    def __init__(self, response: httpx.Response) -> None:
        self.response = response

    @property
    def status(self) -> int:
        return self.response.status_code

    def header(self, name: str) -> Optional[str]:
        """Case-insensitive header lookup"""
        return self.response.headers.get(name)

    def text(self) -> str:
        return self.response.text

    def bytes(self) -> bytes:
        return self.response.content
