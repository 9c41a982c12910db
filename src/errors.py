class SoundsProxyError(Exception):
    """Base exception for the relay"""


class TransportError(SoundsProxyError):
    """Upstream could not be reached, or replied with something undecodable"""

    def __init__(self, message: str, url: str | None = None):
        super().__init__(message)
        self.url = url


class RenderError(SoundsProxyError):
    """The feed library rejected the assembled document"""

    def __init__(self, message: str, programme_id: str | None = None):
        super().__init__(message)
        self.programme_id = programme_id
