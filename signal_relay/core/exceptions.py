from typing import Optional


class RelayError(Exception):
    """
    Base class for every error raised by the relay core.
    """


class NotFoundError(RelayError):
    """
    Raised when a user, chat id, trading identity or safe address cannot be resolved.
    Lookups fail closed: there is never a default value.
    """
    def __init__(self, msg: str, stage: Optional[str] = None):
        super().__init__(msg)
        self.msg = msg
        self.stage = stage


class TransportError(RelayError):
    """
    Raised when Telegram rejects a send / edit / answer call.
    `description` carries the platform-provided reason when there is one.
    """
    def __init__(self, method: str, description: Optional[str] = None):
        msg = f"Telegram API Error ({method}): {description}" if description else f"Telegram API Error ({method})"
        super().__init__(msg)
        self.method = method
        self.description = description


class RemoteCallError(RelayError):
    """
    Raised when the trade-simulation RPC fails: network error, timeout,
    non-2xx status or an undecodable body. Nothing was recorded locally.
    """
    def __init__(self, msg: str, status_code: Optional[int] = None, body: Optional[str] = None):
        super().__init__(msg)
        self.msg = msg
        self.status_code = status_code
        self.body = body


class PersistenceError(RelayError):
    """
    Raised when a simulation record could not be written.
    The remote simulation may already have happened when this is raised.
    """
    def __init__(self, msg: str, remote_response: Optional[dict] = None):
        super().__init__(msg)
        self.msg = msg
        self.remote_response = remote_response
