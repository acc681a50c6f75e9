"""NiceGUI chat interface with streaming replies and cited PDF previews."""

from nicegui import ui

from src.api.profile import guest_profile
from src.chat.attachments import AttachmentFetcher
from src.chat.config import get_chat_client_config
from src.chat.presets import PRESET_QUESTIONS, suggest_questions
from src.chat.session import ChatSession
from src.chat.stream import ChatStreamConsumer
from src.models.chat import AttachmentResult, ChatMessage
from src.ui.formatting import iframe_props, markdown_to_html, pdf_src, user_text_to_html

CUSTOM_CSS = """
<link href="https://fonts.googleapis.com/css2?family=Inter:wght@400;500;600&display=swap"
      rel="stylesheet">
<style>
    * { font-family: 'Inter', sans-serif; }
    body { background: linear-gradient(180deg, #eef2ff 0%, #e0e7ff 100%); min-height: 100vh; }

    .message-user {
        background: linear-gradient(135deg, #6366f1 0%, #4f46e5 100%);
        color: white;
        border-radius: 18px 18px 4px 18px;
    }
    .message-bot {
        background: white;
        color: #1f2937;
        border-radius: 18px 18px 18px 4px;
        box-shadow: 0 2px 8px rgba(0, 0, 0, 0.08);
    }
    .citation-badge {
        background: #e0e7ff;
        color: #4338ca;
        border-radius: 6px;
        padding: 0 6px;
        font-size: 0.75rem;
    }
    .pdf-preview {
        width: 350px; height: 400px;
        border-radius: 16px; overflow: hidden;
        background: white;
        box-shadow: 0 2px 8px rgba(0, 0, 0, 0.1);
    }
    .pdf-preview iframe { width: 100%; height: 100%; border: none; }
</style>
"""


@ui.page("/")
def chat_page() -> None:
    """Main chat page."""
    ui.add_head_html(CUSTOM_CSS)

    config = get_chat_client_config()
    session = ChatSession()
    fetcher = AttachmentFetcher(session, config=config)
    consumer = ChatStreamConsumer(session, fetcher, config=config)
    profile = guest_profile()

    ui.context.client.on_disconnect(session.teardown)

    input_field: ui.input
    send_btn: ui.button

    with ui.dialog().props("maximized") as fullscreen, ui.card().classes("w-full h-full p-0"):
        with ui.row().classes("w-full justify-end p-2 border-b"):
            ui.button(icon="close", on_click=fullscreen.close).props("flat round")
        fullscreen_frame = ui.element("iframe").classes("w-full flex-grow").style("border: none")

    def open_fullscreen(result: AttachmentResult) -> None:
        fullscreen_frame.props["src"] = pdf_src(result)
        fullscreen_frame.update()
        fullscreen.open()

    async def retry_citation(message: ChatMessage, name: str) -> None:
        await fetcher.fetch(name, message.id, retry=True)

    def render_avatar(is_user: bool) -> None:
        if is_user:
            ui.image(profile.image).classes("w-8 h-8 rounded-full")
        else:
            with ui.element("div").classes(
                "w-8 h-8 rounded-full bg-indigo-500 flex items-center justify-center"
            ):
                ui.icon("smart_toy").classes("text-white text-base")

    def render_attachment(result: AttachmentResult) -> None:
        with ui.element("div").classes("pdf-preview relative"):
            ui.button(icon="open_in_full", on_click=lambda r=result: open_fullscreen(r)).props(
                "flat round dense"
            ).classes("absolute top-2 right-2 bg-white/90")
            frame = ui.element("iframe")
            for key, value in iframe_props(result).items():
                frame.props[key] = value

    def render_message(message: ChatMessage) -> None:
        is_user = not message.is_bot
        align = "justify-end" if is_user else "justify-start"
        bubble = "message-user" if is_user else "message-bot"

        with ui.row().classes(f"w-full {align} gap-3 items-start no-wrap"):
            if not is_user:
                render_avatar(False)
            with ui.column().classes("max-w-[85%] gap-2"):
                with ui.element("div").classes(f"px-4 py-3 {bubble}"):
                    if is_user:
                        content = user_text_to_html(message.text)
                    else:
                        content = markdown_to_html(message.text)
                    ui.html(content, sanitize=False).classes("text-sm leading-relaxed")
                for result in message.attachments:
                    render_attachment(result)
                for name in message.failed_citations:
                    ui.button(
                        f"Retry {name}",
                        icon="refresh",
                        on_click=lambda m=message, n=name: retry_citation(m, n),
                    ).props("flat dense no-caps").classes("text-xs")
                ui.label(message.created_at.strftime("%H:%M")).classes(
                    f"text-[10px] text-gray-400 {'self-end' if is_user else 'self-start'}"
                )
            if is_user:
                render_avatar(True)

    @ui.refreshable
    def messages_view() -> None:
        if not session.messages:
            with ui.column().classes("w-full h-64 items-center justify-center gap-3"):
                ui.icon("forum").classes("text-5xl text-indigo-200")
                ui.label("Ask a question to get started").classes("text-lg text-gray-400")
        for message in session.messages:
            render_message(message)
        if session.is_streaming:
            with ui.row().classes("items-center gap-3"):
                render_avatar(False)
                ui.spinner("dots", size="lg", color="indigo")

    def on_session_change() -> None:
        messages_view.refresh()
        if session.is_streaming:
            send_btn.disable()
        else:
            send_btn.enable()

    session.on_change = on_session_change

    async def send_message() -> None:
        text = (input_field.value or "").strip()
        if not text or session.is_streaming:
            return
        input_field.value = ""
        await consumer.send(text)

    def use_question(question: str) -> None:
        input_field.value = question
        presets_panel.close()

    @ui.refreshable
    def suggestions_view() -> None:
        value = input_field.value or ""
        matches = suggest_questions(value) if not session.is_streaming else []
        if not matches:
            return
        with ui.card().classes("w-full p-2 gap-1"):
            ui.label("Suggested questions:").classes("text-xs text-gray-500 px-2")
            for q in matches:
                ui.button(q.question, on_click=lambda q=q: use_question(q.question)).props(
                    "flat dense no-caps align=left"
                ).classes("w-full text-sm text-gray-700")

    def new_chat() -> None:
        session.reset()
        input_field.value = ""

    # === UI Layout ===
    with ui.header().classes("bg-indigo-600 items-center justify-between px-5"):
        with ui.row().classes("items-center gap-3"):
            ui.icon("smart_toy").classes("text-white text-3xl")
            ui.label("Cited Chat").classes("text-lg font-semibold text-white")
        with ui.row().classes("items-center gap-3"):
            ui.label(profile.name).classes("text-white/80 text-sm")
            ui.button(icon="add", on_click=new_chat).props("flat round color=white").tooltip(
                "New chat"
            )

    with ui.column().classes("w-full max-w-4xl mx-auto p-4 gap-6"):
        messages_view()

    with ui.footer().classes("bg-white border-t"), ui.column().classes(
        "w-full max-w-4xl mx-auto gap-2 py-2"
    ):
        with ui.expansion("Frequently asked questions", icon="expand_less").classes(
            "w-full text-gray-700"
        ) as presets_panel:
            with ui.grid(columns=2).classes("w-full gap-2"):
                for q in PRESET_QUESTIONS:
                    ui.button(
                        q.question, icon="chat", on_click=lambda q=q: use_question(q.question)
                    ).props("flat no-caps align=left").classes(
                        "bg-indigo-50 text-sm text-gray-700 rounded-xl"
                    )

        suggestions_container = ui.column().classes("w-full")

        with ui.row().classes("w-full items-center gap-3 no-wrap"):
            input_field = (
                ui.input(placeholder="Type your message...")
                .props("outlined dense")
                .classes("flex-grow")
                .on("keydown.enter", send_message)
                .on_value_change(lambda _: suggestions_view.refresh())
            )
            send_btn = ui.button(icon="send", on_click=send_message).props(
                "round unelevated color=indigo"
            )

        with suggestions_container:
            suggestions_view()


def main(port: int = 8080) -> None:
    """Run the UI standalone; attachments are then served by the UI server."""
    from nicegui import app

    from src.api.attachments import router as attachments_router

    app.include_router(attachments_router)
    ui.run(title="Cited Chat", port=port, reload=False)


if __name__ == "__main__":
    main()
