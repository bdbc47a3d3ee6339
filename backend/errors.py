# backend/errors.py

from typing import Optional

import httpx

from .model import ErrorKind, GenerationFailure


MESSAGES = {
    ErrorKind.VALIDATION: "Please enter a prompt.",
    ErrorKind.NO_OUTPUT: "No image was generated. The prompt may have been blocked or the response was empty.",
    ErrorKind.AUTH_INVALID: "The API key is not valid. Please check the key and try again.",
    ErrorKind.AUTH_DENIED: "Permission denied. The API key is not allowed to use this model.",
    ErrorKind.QUOTA_EXCEEDED: "Quota exceeded. You have hit the request limit for this API key, please try again later.",
    ErrorKind.BAD_REQUEST: "Invalid request. The prompt may have been blocked by the safety filters, try rephrasing it.",
    ErrorKind.UNKNOWN: "An unknown error occurred while communicating with the image generation service.",
    ErrorKind.TIMEOUT: "The image generation service did not answer in time. Please try again.",
    ErrorKind.CANCELLED: "Image generation was cancelled.",
}


class GenerationError(RuntimeError):
    """Base for failures raised inside the backend before they are classified."""

    kind: Optional[ErrorKind] = None


class UnsupportedModelError(GenerationError):
    kind = ErrorKind.CONFIGURATION

    def __init__(self, model: str):
        self.model = model
        super().__init__(f"Configuration error: unsupported model '{model}'.")


class MissingApiKeyError(GenerationError):
    kind = ErrorKind.CONFIGURATION

    def __init__(self):
        super().__init__(
            "Configuration error: API key not found. Set GEMINI_API_KEY or enter a key."
        )


class NoImageError(GenerationError):
    kind = ErrorKind.NO_OUTPUT

    def __init__(self):
        super().__init__(MESSAGES[ErrorKind.NO_OUTPUT])


class GeminiAPIError(GenerationError):
    """
    Non-2xx answer from the Generative Language API.
    str() -> "<status_code> <STATUS>: <message>", e.g.
    "429 RESOURCE_EXHAUSTED: Quota exceeded for quota metric ..."
    """

    def __init__(self, status_code: int, message: str, status: str = ""):
        self.status_code = status_code
        self.status = status
        self.message = message
        prefix = f"{status_code} {status}".strip()
        super().__init__(f"{prefix}: {message}")

    @classmethod
    def from_response(cls, response: httpx.Response) -> "GeminiAPIError":
        # {"error": {"code": 400, "message": "...", "status": "INVALID_ARGUMENT"}}
        # Some proxies wrap the object in a one-element list
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, list) and len(body) == 1:
            body = body[0]
        error = (body.get("error") or {}) if isinstance(body, dict) else {}
        if not isinstance(error, dict):
            error = {"message": str(error)}
        message = error.get("message") or response.text[:500] or response.reason_phrase
        return cls(response.status_code, message, error.get("status", ""))


def classify_error(error: object) -> GenerationFailure:
    """
    Map an underlying failure onto the user-facing taxonomy.
    Order matters: an invalid key comes back from the API as a 400.
    """
    if not isinstance(error, Exception):
        return GenerationFailure(kind=ErrorKind.UNKNOWN, message=MESSAGES[ErrorKind.UNKNOWN])

    if isinstance(error, httpx.TimeoutException):
        return GenerationFailure(kind=ErrorKind.TIMEOUT, message=MESSAGES[ErrorKind.TIMEOUT])

    # Own errors already know their kind and carry a precise message
    if isinstance(error, GenerationError) and error.kind is not None:
        return GenerationFailure(kind=error.kind, message=str(error))

    text = str(error)
    lowered = text.lower()

    if "api key not valid" in lowered:
        kind = ErrorKind.AUTH_INVALID
    elif "permission denied" in lowered or "permission_denied" in lowered or "403" in text:
        kind = ErrorKind.AUTH_DENIED
    elif "quota" in lowered or "429" in text:
        kind = ErrorKind.QUOTA_EXCEEDED
    elif "400" in text:
        kind = ErrorKind.BAD_REQUEST
    else:
        return GenerationFailure(
            kind=ErrorKind.GENERIC_TRANSPORT,
            message=f"Failed to generate image: {text or type(error).__name__}",
        )

    return GenerationFailure(kind=kind, message=MESSAGES[kind])
