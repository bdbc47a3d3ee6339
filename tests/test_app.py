import base64
from io import BytesIO
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

from PIL import Image
from streamlit.testing.v1 import AppTest

from backend.controller import ImageGeneratorController, Status
from backend.errors import MESSAGES
from backend.model import ErrorKind, GenerationFailure, GenerationResult, ModelId

APP_PATH = Path(__file__).resolve().parents[1] / "frontend" / "app.py"
CURL = "curl -X POST 'https://example.test/models/imagen-4.0-generate-001:predict?key=k' -d '{}'"


def _run_app(controller: ImageGeneratorController = None) -> AppTest:
    at = AppTest.from_file(str(APP_PATH), default_timeout=30)
    if controller is not None:
        at.session_state["controller"] = controller
    return at.run()


def _controller() -> ImageGeneratorController:
    client = MagicMock()
    client.generate_image = AsyncMock()
    return ImageGeneratorController(client=client)


def _jpeg_data_uri() -> str:
    buf = BytesIO()
    Image.new("RGB", (4, 4), (0, 0, 255)).save(buf, format="JPEG")
    return "data:image/jpeg;base64," + base64.b64encode(buf.getvalue()).decode("ascii")


def test_idle_page_renders_placeholder():
    at = _run_app()

    assert not at.exception
    assert at.session_state["controller"].status == Status.IDLE
    assert "Your generated image will appear here" in at.info[0].value


def test_blank_prompt_shows_validation_message():
    at = _run_app()

    at.text_area(key="prompt").input("   ").run()
    at.button[0].click().run()

    assert not at.exception
    assert at.warning[0].value == "Please enter a prompt."
    assert at.session_state["controller"].status == Status.IDLE


def test_failure_shows_only_the_error_box():
    controller = _controller()
    controller.status = Status.FAILURE
    controller.error = GenerationFailure(
        kind=ErrorKind.QUOTA_EXCEEDED, message=MESSAGES[ErrorKind.QUOTA_EXCEEDED]
    )

    at = _run_app(controller)

    assert not at.exception
    assert [e.value for e in at.error] == [f"❌ Error: {MESSAGES[ErrorKind.QUOTA_EXCEEDED]}"]
    assert len(at.get("imgs")) == 0
    assert len(at.expander) == 0
    assert len(at.info) == 0


def test_success_shows_image_and_reproduce_command():
    controller = _controller()
    controller.prompt = "a blue square"
    controller.status = Status.SUCCESS
    controller.result = GenerationResult(
        model=ModelId.IMAGEN,
        image_data_uri=_jpeg_data_uri(),
        curl_command=CURL,
        api_key_used="AIzaSyExample1234",
    )

    at = _run_app(controller)

    assert not at.exception
    assert len(at.error) == 0
    assert len(at.get("imgs")) == 1
    assert len(at.get("download_button")) == 1
    assert at.expander[0].label == "🛠️ Reproduce this request"
    assert CURL in [c.value for c in at.code]
    captions = [c.value for c in at.caption]
    assert any("AIza*********1234" in c for c in captions)
    assert not any("AIzaSyExample1234" in c for c in captions)


def test_inputs_are_disabled_while_loading():
    controller = _controller()
    controller.prompt = "a red cube"
    controller.status = Status.LOADING
    # Keeps the request unsettled so the loading render is the last one
    controller.complete = AsyncMock(side_effect=RuntimeError("request still in flight"))

    at = _run_app(controller)

    controller.complete.assert_awaited_once()
    assert at.text_area(key="prompt").disabled
    assert at.radio(key="model").disabled
    assert at.text_input(key="api_key").disabled
    assert at.button[0].disabled
    assert at.button[0].label == "⏳ Generating..."
