class LogContractError(Exception):
    """Internal invariant broken by a caller or a corrupted channel."""


class UnknownCallsiteError(LogContractError):
    def __init__(self, callsite_id, reason):
        self.callsite_id = callsite_id
        self.reason = reason
        super().__init__(f"{reason}: {callsite_id!r}")


class ProtocolViolationError(LogContractError):
    def __init__(self, reason, payload=None):
        self.reason = reason
        self.payload = payload
        super().__init__(reason)
