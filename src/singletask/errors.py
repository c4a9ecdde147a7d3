"""Error types shared by every layer.

All failures reach the request boundary as a SingleTaskError carrying a short
source label, a message and the status code the boundary should answer with.
"""


class SingleTaskError(Exception):
    """Base error: a source label plus a human-readable message."""

    status_code = 500

    def __init__(self, source: str, message: str, status_code: int | None = None):
        super().__init__(f"{source}: {message}")
        self.source = source
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class TransportError(SingleTaskError):
    """Remote call failed or returned a non-success status."""

    def __init__(
        self,
        message: str,
        method: str = "",
        url: str = "",
        body: object = None,
        response: str = "",
    ):
        super().__init__("requests", message)
        self.method = method
        self.url = url
        self.body = body
        self.response = response

    @classmethod
    def from_response(cls, method: str, url: str, body: object, response: str) -> "TransportError":
        message = (
            f"\n    method: {method}"
            f"\n    url: {url}"
            f"\n    body: {body}"
            f"\n    response: {response}"
        )
        return cls(message, method=method, url=url, body=body, response=response)


class DecodeError(SingleTaskError):
    """Malformed JSON or a payload that does not match the expected shape."""

    def __init__(self, message: str):
        super().__init__("decode", message)


class ParseError(SingleTaskError):
    """Unparseable timezone or date/time string."""

    def __init__(self, source: str, message: str):
        super().__init__(source, message)


class PersistenceError(SingleTaskError):
    """Cache store failure."""

    def __init__(self, message: str):
        super().__init__("store", message)


class MissingParameterError(SingleTaskError):
    """A required request parameter is absent."""

    status_code = 400

    def __init__(self, field: str):
        super().__init__("fetch_parameter", f"Missing query parameter: {field}")
        self.field = field
