import logging
from typing import Any, Dict, Optional, Union

import httpx

from config.settings import settings

from .errors import GeminiAPIError, MissingApiKeyError, NoImageError, classify_error
from .model import ErrorKind, GenerationOutcome, GenerationResult, ModelId
from .request_builder import (
    build_curl_command,
    build_endpoint_url,
    get_variant,
    serialize_body,
    to_data_uri,
)

logger = logging.getLogger(__name__)

KEY_ENV_VAR = "GEMINI_API_KEY"


class GeminiImageClient:
    """
    Calls the Generative Language REST API for one image.

    generate_image() never raises for service or configuration problems: it
    returns a GenerationResult or a GenerationFailure tagged with an ErrorKind.
    Task cancellation is the only thing that propagates.
    """

    def __init__(
        self,
        api_base: str = settings.GEMINI_API_BASE,
        default_api_key: Optional[str] = settings.GEMINI_API_KEY,
        timeout: float = settings.REQUEST_TIMEOUT,
        redact_api_key: bool = settings.REDACT_API_KEY,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_base = api_base.rstrip("/")
        self.default_api_key = default_api_key
        self.timeout = timeout
        self.redact_api_key = redact_api_key
        self.transport = transport

    def resolve_api_key(self, api_key: Optional[str] = None) -> str:
        """Explicit non-blank key (trimmed) > configured default."""
        if api_key and api_key.strip():
            return api_key.strip()
        if self.default_api_key and self.default_api_key.strip():
            return self.default_api_key.strip()
        raise MissingApiKeyError()

    async def generate_image(
        self,
        prompt: str,
        model: Union[ModelId, str],
        api_key: Optional[str] = None,
    ) -> GenerationOutcome:
        try:
            variant = get_variant(model)
            model_id = ModelId(model)
            key = self.resolve_api_key(api_key)

            request = variant.build_request(prompt)
            body_json = serialize_body(request)
            url = build_endpoint_url(self.api_base, model_id, key)
            if self.redact_api_key:
                curl_command = build_curl_command(
                    build_endpoint_url(self.api_base, model_id, ""), body_json, key_env_var=KEY_ENV_VAR
                )
            else:
                curl_command = build_curl_command(url, body_json)

            logger.info(f"[GeminiClient] POST {model_id.value}:{variant.method}, prompt={prompt[:50]!r}")
            data = await self._post_json(url, body_json)

            payload = variant.extract_payload(data)
            if not payload:
                raise NoImageError()

            return GenerationResult(
                model=model_id,
                image_data_uri=to_data_uri(payload),
                curl_command=curl_command,
                api_key_used=key,
            )

        except Exception as e:
            failure = classify_error(e)
            if failure.kind in (ErrorKind.GENERIC_TRANSPORT, ErrorKind.UNKNOWN):
                logger.exception(f"[GeminiClient] Error generating image: {e}")
            else:
                logger.warning(f"[GeminiClient] Image generation failed ({failure.kind.value}): {e}")
            return failure

    async def _post_json(self, url: str, body_json: str) -> Dict[str, Any]:
        headers = {"Content-Type": "application/json"}
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            r = await client.post(url, content=body_json.encode("utf-8"), headers=headers)

        if r.status_code < 200 or r.status_code >= 300:
            raise GeminiAPIError.from_response(r)

        data = r.json()
        if not isinstance(data, dict):
            raise NoImageError()
        return data
