class TruthLensError(Exception):
    """Base class for errors raised during an analysis cycle"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(TruthLensError):
    """Claim is empty or too short to analyze"""


class UpstreamUnavailable(TruthLensError):
    """Search or language-model provider could not be reached or failed"""

    def __init__(self, message: str, provider: str = ""):
        super().__init__(message)
        self.provider = provider


class MissingCredentialError(UpstreamUnavailable):
    """Provider API key is not configured on the server"""
