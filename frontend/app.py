import asyncio
import logging

import streamlit as st

from config.settings import settings
from backend.controller import ImageGeneratorController
from backend.gemini_client import GeminiImageClient
from backend.model import MODEL_LABELS, ModelId
from backend.utils import decode_data_uri, get_timestamp, mask_api_key

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)


# ==========================
# Page config
# ==========================
st.set_page_config(
    page_title="Gemini Image Studio",
    page_icon="🎨",
    layout="centered",
)

st.title("🎨 Gemini Image Studio")
st.caption("Turn a text prompt into an image with Google Gemini 🖼️")

# ==========================
# State
# ==========================
if "controller" not in st.session_state:
    st.session_state["controller"] = ImageGeneratorController(client=GeminiImageClient())

controller: ImageGeneratorController = st.session_state["controller"]
loading = controller.is_loading

# ==========================
# Sidebar
# ==========================
with st.sidebar:
    st.header("⚙️ Settings")

    model = st.radio(
        "🎯 Model",
        list(ModelId),
        format_func=lambda m: MODEL_LABELS[m],
        help="Imagen: best quality\nFlash Image: faster answers",
        disabled=loading,
        key="model",
    )

    api_key = st.text_input(
        "🔑 API key (optional)",
        type="password",
        help="Leave empty to use the key configured on the server (GEMINI_API_KEY)",
        disabled=loading,
        key="api_key",
    )

    st.markdown("---")
    st.markdown("### 💡 Examples")
    st.code("A majestic lion wearing a crown, cinematic lighting")
    st.code("an isometric cozy cabin in the snow, digital art")

    st.markdown("---")
    st.write("🔗 API:", settings.GEMINI_API_BASE)

# ==========================
# Prompt input
# ==========================
prompt = st.text_area(
    "Describe the image you want to create",
    placeholder="e.g., A majestic lion wearing a crown, cinematic lighting, hyperrealistic",
    height=120,
    disabled=loading,
    key="prompt",
)

if st.button(
    "⏳ Generating..." if loading else "✨ Generate Image",
    disabled=loading or not prompt,
    type="primary",
    width="stretch",
):
    controller.model = model
    controller.api_key = api_key
    if controller.begin(prompt):
        st.rerun()

if controller.validation_message:
    st.warning(controller.validation_message)

# ==========================
# Output area
# ==========================
view = controller.view()

if view == "loading":
    with st.spinner("Conjuring your vision..."):
        asyncio.run(controller.complete())
    st.rerun()

elif view == "error":
    st.error(f"❌ Error: {controller.error.message}")

elif view == "result":
    result = controller.result
    image, img_bytes = decode_data_uri(result.image_data_uri)

    if image:
        st.image(image, caption=controller.prompt, width="stretch")
        st.download_button(
            "⬇️ Download image",
            data=img_bytes,
            file_name=f"gemini_image_{get_timestamp()}.jpg",
            mime="image/jpeg",
        )
    else:
        st.warning("⚠️ The service answered but the image could not be decoded")

    with st.expander("🛠️ Reproduce this request"):
        st.code(result.curl_command, language="bash")
        st.caption(f"Model: `{result.model.value}` · API key used: `{mask_api_key(result.api_key_used)}`")

else:
    st.info("🖼️ Your generated image will appear here. Describe anything you can imagine!")

st.markdown("---")
st.caption("Powered by Google Gemini")
