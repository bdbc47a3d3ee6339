# backend/model.py
from enum import Enum
from typing import List, Union

from pydantic import BaseModel, ConfigDict, Field


class ModelId(str, Enum):
    IMAGEN = "imagen-4.0-generate-001"          # high quality
    FLASH_IMAGE = "gemini-2.5-flash-image"      # fast


MODEL_LABELS = {
    ModelId.IMAGEN: "Imagen 4 (high quality)",
    ModelId.FLASH_IMAGE: "Gemini 2.5 Flash Image (fast)",
}


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    CONFIGURATION = "configuration"
    NO_OUTPUT = "no-output"
    AUTH_INVALID = "auth-invalid"
    AUTH_DENIED = "auth-denied"
    QUOTA_EXCEEDED = "quota-exceeded"
    BAD_REQUEST = "bad-request"
    GENERIC_TRANSPORT = "generic-transport"
    UNKNOWN = "unknown"
    TIMEOUT = "timeout"
    CANCELLED = "cancelled"


# ==========================
# Request bodies (REST shape)
# ==========================
class ImagenInstance(BaseModel):
    prompt: str


class ImagenParameters(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    number_of_images: int = Field(default=1, alias="sampleCount")
    output_mime_type: str = Field(default="image/jpeg", alias="outputMimeType")
    aspect_ratio: str = Field(default="1:1", alias="aspectRatio")


class ImagenRequest(BaseModel):
    instances: List[ImagenInstance]
    parameters: ImagenParameters = Field(default_factory=ImagenParameters)


class ContentPart(BaseModel):
    text: str


class Content(BaseModel):
    parts: List[ContentPart]


class GenerationConfig(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    response_modalities: List[str] = Field(
        default_factory=lambda: ["IMAGE"], alias="responseModalities"
    )


class GenerateContentRequest(BaseModel):
    """
    Body for :generateContent. The options are held in ``config`` but the
    REST endpoint expects them under ``generationConfig``.
    """

    model_config = ConfigDict(populate_by_name=True)

    contents: List[Content]
    config: GenerationConfig = Field(
        default_factory=GenerationConfig, alias="generationConfig"
    )


GenerationRequest = Union[ImagenRequest, GenerateContentRequest]


# ==========================
# Outcomes
# ==========================
class GenerationResult(BaseModel):
    model: ModelId
    image_data_uri: str
    curl_command: str
    api_key_used: str


class GenerationFailure(BaseModel):
    kind: ErrorKind
    message: str


GenerationOutcome = Union[GenerationResult, GenerationFailure]
