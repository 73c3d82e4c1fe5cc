"""NiceGUI travel chat page with image attachments."""

import base64
import re

from nicegui import events, ui

from src.models.schemas import ImageItem, Message, TextItem
from src.ui.client import ChatApiClient
from src.ui.session import ChatSession, SessionState

_LIST_PATTERNS = (
    (r"^[-*]\s+", "ul", "list-disc"),
    (r"^\d+\.\s+", "ol", "list-decimal"),
)


def _wrap_lists(text: str, marker: str, tag: str, style: str) -> str:
    result: list[str] = []
    in_list = False
    for line in text.split("\n"):
        stripped = line.strip()
        if re.match(marker, stripped):
            if not in_list:
                result.append(f'<{tag} class="{style} list-inside my-2 space-y-1">')
                in_list = True
            result.append(f"<li>{re.sub(marker, '', stripped)}</li>")
            continue
        if in_list:
            result.append(f"</{tag}>")
            in_list = False
        result.append(line)
    if in_list:
        result.append(f"</{tag}>")
    return "\n".join(result)


def markdown_to_html(text: str) -> str:
    """Convert assistant markdown to HTML for chat display.

    Supports: bold, italic, inline code, code blocks, links, lists.
    """
    text = text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")

    text = re.sub(
        r"```(\w*)\n?([\s\S]*?)```",
        r'<pre class="bg-gray-800 text-gray-100 rounded-lg p-3 my-2 overflow-x-auto text-xs">'
        r"<code>\2</code></pre>",
        text,
    )
    text = re.sub(
        r"`([^`]+)`",
        r'<code class="bg-gray-200 text-pink-600 px-1.5 py-0.5 rounded text-xs">\1</code>',
        text,
    )
    text = re.sub(r"\*\*(.+?)\*\*", r"<strong>\1</strong>", text)
    text = re.sub(r"\*([^*\n]+)\*", r"<em>\1</em>", text)
    text = re.sub(
        r"\[([^\]]+)\]\(([^)]+)\)",
        r'<a href="\2" class="text-teal-700 underline" target="_blank">\1</a>',
        text,
    )

    for marker, tag, style in _LIST_PATTERNS:
        text = _wrap_lists(text, marker, tag, style)

    return text.replace("\n", "<br>")


def image_src(item: ImageItem) -> str:
    """Displayable ``src`` for an image item, whatever its payload encoding."""
    payload = item.image.source.data
    if isinstance(payload, bytes):
        payload = base64.b64encode(payload).decode("ascii")
    if payload.startswith("data:"):
        return payload
    return f"data:image/{item.image.format};base64,{payload}"


def stale_sections(rendered: SessionState | None, state: SessionState) -> set[str]:
    """Sections whose widgets must be rebuilt to show ``state``.

    History and preview hold large payloads, so they are rebuilt only when
    their value changes, not on every keystroke.
    """
    if rendered is None:
        return {"history", "preview"}
    stale = set()
    if state.history is not rendered.history:
        stale.add("history")
    if state.pending_image is not rendered.pending_image:
        stale.add("preview")
    return stale


CUSTOM_CSS = """
<link href="https://fonts.googleapis.com/css2?family=Inter:wght@400;500;600&display=swap"
      rel="stylesheet">
<style>
    * { font-family: 'Inter', sans-serif; }
    body { background: #eef4f3; min-height: 100vh; }

    .chat-container {
        background: white;
        border-radius: 12px;
        box-shadow: 0 2px 8px rgba(0, 0, 0, 0.1);
        overflow: hidden;
    }
    .header { background: linear-gradient(135deg, #0f766e 0%, #0e7490 100%); }

    .message-user {
        background: #0f766e;
        color: white;
        border-radius: 18px 18px 4px 18px;
    }
    .message-assistant {
        background: #f3f4f6;
        color: #1f2937;
        border-radius: 18px 18px 18px 4px;
    }
    .message-image img { max-width: 300px; max-height: 300px; border-radius: 8px; }
    .image-preview img { max-width: 200px; max-height: 200px; border-radius: 8px; }

    .error-message {
        background: #fef2f2;
        color: #b91c1c;
        border-radius: 8px;
    }
    .send-btn { background: #0f766e !important; }
</style>
"""


@ui.page("/")
def chat_page() -> None:
    """Main chat page."""
    ui.add_head_html(CUSTOM_CSS)
    api_client = ChatApiClient()

    messages_container: ui.column
    scroll_area: ui.scroll_area
    loader: ui.row
    preview_container: ui.row
    error_label: ui.label
    input_field: ui.input
    send_btn: ui.button
    rendered: SessionState | None = None

    def render_content(msg: Message) -> None:
        for item in msg.content:
            match item:
                case TextItem(text=text) if msg.role == "user":
                    ui.label(text).classes("text-sm whitespace-pre-wrap")
                case TextItem(text=text):
                    ui.html(markdown_to_html(text), sanitize=False).classes(
                        "text-sm leading-relaxed"
                    )
                case ImageItem():
                    with ui.element("div").classes("message-image"):
                        ui.image(image_src(item)).classes("w-72")

    def render_messages(history: tuple[Message, ...]) -> None:
        messages_container.clear()
        with messages_container:
            if not history:
                with ui.column().classes("w-full h-64 items-center justify-center gap-3"):
                    ui.icon("flight_takeoff").classes("text-5xl text-gray-300")
                    ui.label("Where would you like to go?").classes("text-lg text-gray-400")
            for msg in history:
                is_user = msg.role == "user"
                align = "justify-end" if is_user else "justify-start"
                bubble = "message-user" if is_user else "message-assistant"
                with ui.row().classes(f"w-full {align}"):
                    with ui.column().classes(f"max-w-[75%] gap-2 px-4 py-3 {bubble}"):
                        render_content(msg)
        scroll_area.scroll_to(percent=1.0)

    def render_preview(state: SessionState) -> None:
        preview_container.clear()
        image = state.pending_image
        preview_container.set_visibility(image is not None and image.ready)
        if image is None or not image.ready:
            return
        with preview_container:
            with ui.element("div").classes("image-preview relative"):
                ui.image(image.preview).classes("w-48")
                ui.button(icon="close", on_click=session.clear_image).props(
                    "round dense size=sm color=grey-8"
                ).classes("absolute top-1 right-1")

    def render(state: SessionState) -> None:
        nonlocal rendered
        stale = stale_sections(rendered, state)
        rendered = state
        if "history" in stale:
            render_messages(state.history)
        if "preview" in stale:
            render_preview(state)
        loader.set_visibility(state.loading)
        error_label.set_text(state.error or "")
        error_label.set_visibility(bool(state.error))
        if input_field.value != state.input_text:
            input_field.value = state.input_text
        if state.can_submit:
            send_btn.enable()
        else:
            send_btn.disable()

    session = ChatSession(exchange=api_client.exchange, on_change=render)

    async def handle_upload(e: events.UploadEventArguments) -> None:
        data = await e.file.read()
        await session.select_image(e.file.name, e.file.content_type, data)
        uploader.reset()

    # === UI Layout ===
    with (
        ui.element("div").classes("w-full min-h-screen p-4 md:p-8"),
        ui.column().classes("w-full max-w-3xl mx-auto chat-container gap-0").style(
            "height: calc(100vh - 4rem)"
        ),
    ):
        with ui.row().classes("w-full header px-5 py-4 items-center justify-between"):
            with ui.row().classes("items-center gap-3"):
                ui.icon("travel_explore").classes("text-white text-3xl")
                ui.label("Travel Assistant").classes("text-lg font-semibold text-white")
            ui.button(icon="add", on_click=session.new_chat).props("flat round color=white")

        with ui.scroll_area().classes("flex-grow w-full bg-gray-50") as scroll_area:
            messages_container = ui.column().classes("w-full gap-4 p-5")

        with ui.row().classes("w-full px-5 py-2 items-center gap-3") as loader:
            ui.spinner("dots", size="lg", color="teal")
            ui.label("Thinking...").classes("text-sm text-gray-500 italic")

        preview_container = ui.row().classes("w-full px-5 py-2")

        with ui.row().classes("w-full p-4 gap-3 items-center bg-white border-t no-wrap"):
            uploader = (
                ui.upload(on_upload=handle_upload, auto_upload=True, max_files=1)
                .props("accept=image/*")
                .classes("hidden")
            )
            ui.button(
                icon="photo_camera", on_click=lambda: uploader.run_method("pickFiles")
            ).props("flat round color=teal")
            input_field = (
                ui.input(
                    placeholder="Type your message...",
                    on_change=lambda e: session.update_text(e.value or ""),
                )
                .props("borderless dense")
                .classes("flex-grow")
                .on("keydown.enter", session.submit)
            )
            send_btn = (
                ui.button("Send", on_click=session.submit)
                .props("unelevated text-color=white")
                .classes("send-btn")
            )

        error_label = ui.label().classes("error-message w-full px-5 py-2 text-sm")

    render(session.state)


def main() -> None:
    ui.run(title="Travel Assistant", port=8080, reload=False)


if __name__ == "__main__":
    main()
