# backend/request_builder.py

import json
from urllib.parse import quote
from typing import Any, Callable, Dict, NamedTuple, Optional, Union

from .errors import UnsupportedModelError
from .model import (
    Content,
    ContentPart,
    GenerateContentRequest,
    GenerationRequest,
    ImagenInstance,
    ImagenRequest,
    ModelId,
)

DATA_URI_PREFIX = "data:image/jpeg;base64,"


class ModelVariant(NamedTuple):
    method: str
    build_request: Callable[[str], GenerationRequest]
    extract_payload: Callable[[Dict[str, Any]], Optional[str]]


# ==========================
# Imagen (high quality) -> :predict
# ==========================
def build_imagen_request(prompt: str) -> ImagenRequest:
    return ImagenRequest(instances=[ImagenInstance(prompt=prompt)])


def extract_imagen_payload(response: Dict[str, Any]) -> Optional[str]:
    """
    Return bytesBase64Encoded of the first prediction, or None.
    {"predictions": [{"bytesBase64Encoded": "...", "mimeType": "image/jpeg"}]}
    """
    predictions = response.get("predictions") or []
    if not predictions or not isinstance(predictions[0], dict):
        return None
    return predictions[0].get("bytesBase64Encoded") or None


# ==========================
# Gemini Flash Image (fast) -> :generateContent
# ==========================
def build_flash_request(prompt: str) -> GenerateContentRequest:
    return GenerateContentRequest(contents=[Content(parts=[ContentPart(text=prompt)])])


def extract_flash_payload(response: Dict[str, Any]) -> Optional[str]:
    """
    First part carrying inlineData in the first candidate.
    Text parts (captions, refusals) are skipped.
    """
    candidates = response.get("candidates") or []
    if not candidates or not isinstance(candidates[0], dict):
        return None

    content = candidates[0].get("content")
    parts = content.get("parts") if isinstance(content, dict) else None
    for part in parts or []:
        if not isinstance(part, dict):
            continue
        inline_data = part.get("inlineData") or part.get("inline_data")
        if not isinstance(inline_data, dict):
            continue
        return inline_data.get("data") or None
    return None


VARIANTS: Dict[ModelId, ModelVariant] = {
    ModelId.IMAGEN: ModelVariant(
        method="predict",
        build_request=build_imagen_request,
        extract_payload=extract_imagen_payload,
    ),
    ModelId.FLASH_IMAGE: ModelVariant(
        method="generateContent",
        build_request=build_flash_request,
        extract_payload=extract_flash_payload,
    ),
}


def get_variant(model: Union[ModelId, str]) -> ModelVariant:
    try:
        return VARIANTS[ModelId(model)]
    except ValueError:
        raise UnsupportedModelError(str(model)) from None


def build_endpoint_url(api_base: str, model: Union[ModelId, str], api_key: str) -> str:
    method = get_variant(model).method
    model_id = ModelId(model).value
    return f"{api_base.rstrip('/')}/models/{model_id}:{method}?key={quote(api_key, safe='')}"


def serialize_body(request: GenerationRequest) -> str:
    """Compact JSON exactly as sent on the wire (REST aliases: generationConfig, sampleCount...)."""
    return json.dumps(request.model_dump(by_alias=True), ensure_ascii=False, separators=(",", ":"))


def shell_quote(text: str) -> str:
    # 'it'\''s' -> it's
    return "'" + text.replace("'", "'\\''") + "'"


def build_curl_command(url: str, body_json: str, key_env_var: Optional[str] = None) -> str:
    """
    With key_env_var, url must end with "key=" and the key is read from that
    shell variable: '...?key='"$GEMINI_API_KEY"
    """
    quoted_url = shell_quote(url)
    if key_env_var:
        quoted_url += f'"${key_env_var}"'
    return (
        f"curl -X POST {quoted_url} "
        f"-H 'Content-Type: application/json' "
        f"-d {shell_quote(body_json)}"
    )


def to_data_uri(payload: str) -> str:
    return f"{DATA_URI_PREFIX}{payload}"
