# ui.py
"""Defines the Gradio user interface for Chef Nano."""

import html
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

import gradio as gr

# Local Imports
from ai_gateway import AIGateway
from app_state import AppState, StateStore, Severity, IngredientsEdited, EditPromptEdited, ErrorDismissed
from config import (
    DRIVE_FOLDER_URL, EXPORT_DIR, BANNER_IMAGE_URL, FEATURED_IMAGE_URL
)
from controller import KitchenController
from logger_setup import get_logger

logger = get_logger()

RECIPE_PLACEHOLDER = "재료를 입력하고 버튼을 눌러보세요."
RECIPE_PENDING = "⏳ 레시피를 생성하고 있습니다..."
IMAGE_PLACEHOLDER_HTML = (
    '<div class="cn-image-empty"><div style="font-size:3.5rem">🍽️</div>'
    '<p>완성된 요리의 모습이 여기에 나타납니다.</p></div>'
)
IMAGE_PENDING_HTML = (
    '<div class="cn-image-empty"><p>AI가 요리 이미지를 생성하고 있습니다...</p></div>'
)

CSS = """
.gradio-container {max-width: 1100px !important}
.cn-banner {height: 16rem; border-radius: 18px; background-size: cover; background-position: center;
            display: flex; flex-direction: column; align-items: center; justify-content: center;
            box-shadow: inset 0 0 0 2000px rgba(0,0,0,0.4); text-align: center}
.cn-banner h1 {color: white; font-size: 3rem; font-weight: 900; margin: 0}
.cn-banner p {color: rgba(255,255,255,0.9); font-size: 1.2rem; margin-top: 1rem}
.cn-image-empty {min-height: 320px; display: flex; flex-direction: column; align-items: center;
                 justify-content: center; color: #9ca3af; text-align: center}
.cn-error {color: #ef4444}
.cn-featured {position: relative; border-radius: 18px; overflow: hidden}
.cn-featured img {width: 100%; height: 420px; object-fit: cover}
.cn-featured .cn-caption {position: absolute; bottom: 0; padding: 1.5rem; color: white;
                          background: linear-gradient(to top, rgba(0,0,0,0.7), transparent); width: 100%}
.cn-badge {background: #f97316; color: white; font-size: 0.75rem; font-weight: 700;
           padding: 0.2rem 0.75rem; border-radius: 999px}
@media print {.cn-noprint {display: none !important}}
"""

OPEN_FOLDER_JS = "(url) => { if (url) { window.open(url, '_blank'); } }"


@dataclass(frozen=True)
class ViewModel:
    """Everything the page shows for one `AppState`."""
    error_text: Optional[str]
    recipe_markdown: str
    image_html: str
    submit_enabled: bool
    edit_enabled: bool
    edit_button_label: str
    image_tools_visible: bool
    print_visible: bool
    edit_prompt_text: str


def build_view(state: AppState) -> ViewModel:
    inline_error = None
    if state.error is not None and state.error.severity is Severity.INLINE:
        inline_error = state.error.message

    if state.recipe_in_flight:
        recipe_markdown = RECIPE_PENDING
    elif state.recipe is not None:
        recipe_markdown = f"## {state.recipe.title}\n\n{state.recipe.content}"
    else:
        recipe_markdown = RECIPE_PLACEHOLDER

    if state.image_in_flight:
        image_html = IMAGE_PENDING_HTML
    elif state.has_image:
        image_html = f'<img src="{html.escape(state.image_data_uri)}" alt="Result" style="width:100%;height:auto;border-radius:12px" />'
    else:
        image_html = IMAGE_PLACEHOLDER_HTML

    image_ready = state.has_image and not state.image_in_flight
    return ViewModel(
        error_text=inline_error,
        recipe_markdown=recipe_markdown,
        image_html=image_html,
        submit_enabled=not state.recipe_in_flight,
        edit_enabled=image_ready and not state.image_edit_in_flight,
        edit_button_label="..." if state.image_edit_in_flight else "편집",
        image_tools_visible=image_ready,
        print_visible=state.recipe is not None and not state.recipe_in_flight,
        edit_prompt_text=state.edit_prompt_text,
    )


def show_modal_error(store: StateStore):
    """Pops up a modal-severity error once, then clears it from the store."""
    error = store.state.error
    if error is not None and error.severity is Severity.MODAL:
        gr.Warning(error.message, duration=None)
        store.dispatch(ErrorDismissed())


def session_export_dir(request: Optional[gr.Request], export_root: Union[str, Path] = EXPORT_DIR) -> Path:
    return Path(export_root) / (getattr(request, "session_hash", None) or "shared")


def save_and_notify(store: StateStore, gateway: AIGateway, export_dir: Union[str, Path]):
    """
    Runs the save flow for one session.
    Returns the download-file update and the folder URL handed to OPEN_FOLDER_JS.
    """
    result = KitchenController(store, gateway).save_image(export_dir=export_dir)
    if result is None:
        show_modal_error(store)
        return gr.update(value=None, visible=False), ""
    gr.Info(result.notice, duration=result.notice_seconds)
    download_path = str(result.path) if result.path is not None else None
    return gr.update(value=download_path, visible=download_path is not None), result.folder_url


def cleanup_session_exports(request: Optional[gr.Request], export_root: Union[str, Path] = EXPORT_DIR):
    # Only per-session folders are removed; the shared fallback may still be in use
    session_hash = getattr(request, "session_hash", None)
    if not session_hash:
        return
    session_dir = session_export_dir(request, export_root)
    if session_dir.exists():
        logger.info(f"UI: Removing exports for closed session '{session_hash}'.")
        shutil.rmtree(session_dir, ignore_errors=True)


# ==============================================================================
# Gradio Interface Creation Function
# ==============================================================================
def create_interface(gateway: AIGateway):
    """Sets up the single-page Gradio interface. Each browser session gets its own StateStore."""
    logger.info("Creating Gradio interface definition...")

    def render(state: AppState):
        # Outputs: Error, Recipe, Print Btn, Image, Image Tools, Edit Input, Edit Btn, Submit Btn
        view = build_view(state)
        return (
            gr.update(value=f'<p class="cn-error">{html.escape(view.error_text)}</p>' if view.error_text else "",
                      visible=view.error_text is not None),
            gr.update(value=view.recipe_markdown),
            gr.update(visible=view.print_visible),
            gr.update(value=view.image_html),
            gr.update(visible=view.image_tools_visible),
            gr.update(value=view.edit_prompt_text),
            gr.update(value=view.edit_button_label, interactive=view.edit_enabled),
            gr.update(interactive=view.submit_enabled),
        )

    async def ui_submit(ingredients_value, store: StateStore):
        logger.info(f"UI: Recipe requested. Ingredients='{ingredients_value}'")
        controller = KitchenController(store, gateway)
        async for state in controller.submit_ingredients(ingredients_value):
            yield render(state)

    async def ui_edit(edit_value, store: StateStore):
        logger.info(f"UI: Edit requested. Instruction='{edit_value}'")
        controller = KitchenController(store, gateway)
        rendered = False
        async for state in controller.edit_image(edit_value):
            rendered = True
            yield render(state)
        if not rendered:
            yield render(store.state)

    # --- UI Helper Functions ---
    def ui_save(store: StateStore, request: gr.Request):
        logger.info("UI: Save clicked.")
        return save_and_notify(store, gateway, session_export_dir(request))

    def ui_cleanup(request: gr.Request):
        cleanup_session_exports(request)

    def ui_ingredients_changed(value, store: StateStore):
        store.dispatch(IngredientsEdited(value or ""))

    def ui_edit_prompt_changed(value, store: StateStore):
        store.dispatch(EditPromptEdited(value or ""))

    # --- UI Layout ---
    with gr.Blocks(
        title="셰프 나노: 스마트 키친",
        theme=gr.themes.Soft(primary_hue=gr.themes.colors.orange, secondary_hue=gr.themes.colors.amber),
        css=CSS
    ) as demo:
        store = gr.State(StateStore())
        folder_url = gr.Textbox(visible=False)

        gr.HTML(
            f'<div class="cn-banner" style="background-image:url(\'{BANNER_IMAGE_URL}\')">'
            '<h1>셰프 나노: 스마트 키친</h1><p>당신의 냉장고를 미슐랭 주방으로</p></div>'
        )

        with gr.Row():
            # Left: input and results
            with gr.Column(scale=2):
                with gr.Group(elem_classes="cn-noprint"):
                    gr.Markdown("### 재료를 입력하세요")
                    with gr.Row():
                        ingredients_input = gr.Textbox(placeholder="예: 돼지고기, 대파, 마늘", show_label=False, lines=1, scale=4, container=False)
                        submit_button = gr.Button("레시피 추천받기", variant="primary", scale=1, min_width=140)
                    error_display = gr.HTML("", visible=False)

                with gr.Group():
                    with gr.Row():
                        gr.Markdown("**레시피 결과**")
                        print_button = gr.Button("프린트하기 🖨️", size="sm", variant="secondary", visible=False, elem_classes="cn-noprint")
                    recipe_display = gr.Markdown(RECIPE_PLACEHOLDER)

                with gr.Group():
                    image_display = gr.HTML(IMAGE_PLACEHOLDER_HTML)
                    with gr.Column(visible=False, elem_classes="cn-noprint") as image_tools:
                        save_button = gr.Button("📥 다운로드 후 드라이브에 저장", variant="secondary", size="sm")
                        download_file = gr.File(label="다운로드", visible=False, interactive=False)
                        gr.Markdown(f"**이미지 AI 편집** · 드라이브 폴더: [열기]({DRIVE_FOLDER_URL})")
                        with gr.Row():
                            edit_input = gr.Textbox(placeholder="예: '접시를 하얀색으로 바꿔줘', '더 밝게 해줘'", show_label=False, scale=4, container=False)
                            edit_button = gr.Button("편집", variant="primary", scale=1, min_width=100)

            # Right: featured recipe and tips
            with gr.Column(scale=1, elem_classes="cn-noprint"):
                gr.HTML(
                    f'<div class="cn-featured"><img src="{FEATURED_IMAGE_URL}" alt="Featured" />'
                    '<div class="cn-caption"><span class="cn-badge">BEST RECIPE</span>'
                    '<h4 style="color:white;margin:0.5rem 0 0">프리미엄 LA 갈비</h4>'
                    '<p style="color:rgba(255,255,255,0.8);margin:0">특제 양념으로 완성하는 정통의 맛</p></div></div>'
                )
                gr.Markdown(
                    "#### 💡 요리 팁\n"
                    "생성된 이미지가 마음에 드신다면 **'다운로드 후 드라이브에 저장'** 버튼을 눌러보세요. "
                    "이미지 파일이 다운로드되며 지정하신 구글 드라이브 폴더가 새 창으로 열립니다.\n\n"
                    f"[구글 드라이브 폴더 바로가기]({DRIVE_FOLDER_URL})"
                )

        gr.Markdown("<center>&copy; 2024 Chef Nano. All rights reserved.</center>")

        # --- Define ALL Event Listeners AFTER components ---
        render_outputs = [error_display, recipe_display, print_button, image_display,
                          image_tools, edit_input, edit_button, submit_button]

        ingredients_input.change(fn=ui_ingredients_changed, inputs=[ingredients_input, store], outputs=None, queue=False)
        edit_input.change(fn=ui_edit_prompt_changed, inputs=[edit_input, store], outputs=None, queue=False)

        submit_button.click(fn=ui_submit, inputs=[ingredients_input, store], outputs=render_outputs)
        ingredients_input.submit(fn=ui_submit, inputs=[ingredients_input, store], outputs=render_outputs)
        edit_button.click(fn=ui_edit, inputs=[edit_input, store], outputs=render_outputs)

        print_button.click(fn=None, inputs=None, outputs=None, js="() => window.print()")
        save_button.click(
            fn=ui_save, inputs=[store], outputs=[download_file, folder_url]
        ).then(fn=None, inputs=[folder_url], outputs=None, js=OPEN_FOLDER_JS)
        demo.unload(ui_cleanup)

    logger.info("Gradio Interface definition complete.")
    return demo
