"""Pipeline errors — raised inside a provider pipeline, reported as its failure."""


class PipelineError(Exception):
    kind = "pipeline_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class CredentialMissingError(PipelineError):
    kind = "credential_missing"


class TransportError(PipelineError):
    kind = "transport_error"


class ProviderError(PipelineError):
    kind = "provider_error"

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class ResponseParseError(PipelineError):
    kind = "response_parse_error"


def provider_message(body, fallback: str) -> str:
    """Pull the human-readable message out of a provider error payload.

    Handles ``{"error": {"message": ...}}`` (Anthropic, OpenAI, Gemini REST)
    and the already-unwrapped ``{"message": ...}`` the OpenAI SDK keeps.
    """
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if isinstance(error, str) and error:
            return error
        if body.get("message"):
            return str(body["message"])
    return fallback
