"""Error raised when a call to the payment processor fails."""


class ProcessorCallFailed(Exception):
    """Any failure from the processor client: bad params, auth, network, rate limit.

    The failure is not classified further. Only the message text reaches the
    caller, always with HTTP 400.
    """

    status_code = 400

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert exception to API error response format."""

        return {"error": {"message": self.message}}
