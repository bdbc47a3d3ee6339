# backend/controller.py

import asyncio
import logging
from enum import Enum
from typing import Literal, Optional, Union

from .errors import MESSAGES
from .gemini_client import GeminiImageClient
from .model import ErrorKind, GenerationFailure, GenerationResult, ModelId

logger = logging.getLogger(__name__)

View = Literal["idle", "loading", "error", "result"]


class Status(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    FAILURE = "failure"


class ImageGeneratorController:
    """
    Holds the single pending-request / result / error slot.

    idle -> loading -> success | failure -> loading -> ...
    result and error are never set at the same time; both are cleared when a
    new submission starts. Only one request is in flight.
    """

    def __init__(
        self,
        client: GeminiImageClient,
        model: Union[ModelId, str] = ModelId.IMAGEN,
    ):
        self.client = client
        self.prompt: str = ""
        self.model: Union[ModelId, str] = model
        self.api_key: Optional[str] = None

        self.status: Status = Status.IDLE
        self.result: Optional[GenerationResult] = None
        self.error: Optional[GenerationFailure] = None
        self.validation_message: Optional[str] = None

        self._task: Optional[asyncio.Task] = None
        self._cancel_requested = False

    @property
    def is_loading(self) -> bool:
        return self.status == Status.LOADING

    def begin(self, prompt: Optional[str] = None) -> bool:
        """Validate and enter loading. Returns False when the submission is rejected."""
        if prompt is not None:
            self.prompt = prompt

        if self.is_loading:
            return False

        if not self.prompt or not self.prompt.strip():
            self.validation_message = MESSAGES[ErrorKind.VALIDATION]
            return False

        self.result = None
        self.error = None
        self.validation_message = None
        self.status = Status.LOADING
        return True

    async def complete(self) -> None:
        """Run the pending request and settle into success or failure."""
        if not self.is_loading:
            return

        try:
            self._task = asyncio.ensure_future(
                self.client.generate_image(self.prompt, self.model, self.api_key)
            )
            try:
                outcome = await self._task
            except asyncio.CancelledError:
                # Only swallow cancellations requested through cancel()
                if not self._cancel_requested:
                    raise
                logger.info("[Controller] Request cancelled")
                outcome = GenerationFailure(
                    kind=ErrorKind.CANCELLED, message=MESSAGES[ErrorKind.CANCELLED]
                )

            if isinstance(outcome, GenerationResult):
                self.result = outcome
                self.status = Status.SUCCESS
            else:
                self.error = outcome
                self.status = Status.FAILURE
        finally:
            self._task = None
            self._cancel_requested = False
            if self.status == Status.LOADING:
                self.status = Status.FAILURE
                if self.error is None:
                    self.error = GenerationFailure(
                        kind=ErrorKind.UNKNOWN, message=MESSAGES[ErrorKind.UNKNOWN]
                    )

    async def submit(self, prompt: Optional[str] = None) -> bool:
        if not self.begin(prompt):
            return False
        await self.complete()
        return True

    def cancel(self) -> bool:
        if self._task is None or self._task.done():
            return False
        self._cancel_requested = True
        return self._task.cancel()

    def view(self) -> View:
        if self.status == Status.LOADING:
            return "loading"
        if self.error is not None:
            return "error"
        if self.result is not None:
            return "result"
        return "idle"
