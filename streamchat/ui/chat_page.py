"""NiceGUI chat page driven by the stream client."""

from nicegui import ui

from streamchat.client import ClientConfig, ConversationState, StreamClient
from streamchat.models.schemas import (
    DEFAULT_DEVELOPER_MESSAGE,
    DEFAULT_MODEL,
    ConversationTurn,
    Role,
)

MODEL_OPTIONS = {
    "gpt-4.1-nano": "gpt-4.1-nano (fastest)",
    "gpt-4.1-mini": "gpt-4.1-mini (balanced)",
    "gpt-4o-mini": "gpt-4o-mini (popular)",
}

CUSTOM_CSS = """
<style>
    body { background: #f5f5f5; min-height: 100vh; }

    .app-container {
        background: white;
        border-radius: 12px;
        box-shadow: 0 2px 8px rgba(0, 0, 0, 0.1);
        overflow: hidden;
    }

    .header { background: linear-gradient(135deg, #2563eb 0%, #7c3aed 100%); }

    .message-user {
        background: #2563eb;
        color: white;
        border-radius: 18px 18px 4px 18px;
        white-space: pre-wrap;
    }

    .message-assistant {
        background: #f3f4f6;
        color: #1f2937;
        border-radius: 18px 18px 18px 4px;
    }

    .typing-dot {
        width: 8px; height: 8px;
        background: #2563eb;
        border-radius: 50%;
        animation: bounce 1.4s infinite ease-in-out;
    }
    .typing-dot:nth-child(2) { animation-delay: 0.2s; }
    .typing-dot:nth-child(3) { animation-delay: 0.4s; }

    @keyframes bounce {
        0%, 60%, 100% { transform: translateY(0); }
        30% { transform: translateY(-6px); }
    }
</style>
"""


@ui.page("/")
def chat_page() -> None:
    """Main chat page. Each page load owns one conversation."""
    ui.add_head_html(CUSTOM_CSS)

    # Last assistant bubble, updated in place while it streams
    streaming_view: dict[str, ui.markdown | None] = {"markdown": None}
    rendered_count = {"turns": -1}

    def render_turn(turn: ConversationTurn, is_last: bool, state: ConversationState) -> None:
        is_user = turn.role is Role.USER
        align = "justify-end" if is_user else "justify-start"
        with ui.row().classes(f"w-full {align}"):
            with ui.column().classes("max-w-[80%] gap-1"):
                ui.label("You" if is_user else "Assistant").classes(
                    "text-xs text-gray-400"
                )
                if is_user:
                    ui.label(turn.content).classes("message-user px-4 py-3 text-sm")
                    return
                with ui.element("div").classes("message-assistant px-4 py-3"):
                    if is_last and state.is_streaming and not turn.content:
                        with ui.row().classes("gap-1"):
                            for _ in range(3):
                                ui.element("div").classes("typing-dot")
                    markdown = ui.markdown(turn.content).classes("text-sm")
                    if is_last:
                        streaming_view["markdown"] = markdown

    @ui.refreshable
    def messages(state: ConversationState) -> None:
        streaming_view["markdown"] = None
        rendered_count["turns"] = len(state.turns)
        if not state.turns:
            with ui.column().classes("w-full h-64 items-center justify-center gap-3"):
                ui.icon("forum").classes("text-5xl text-gray-300")
                ui.label("No messages yet. Start a conversation below!").classes(
                    "text-gray-400"
                )
            return
        for i, turn in enumerate(state.turns):
            render_turn(turn, i == len(state.turns) - 1, state)

    @ui.refreshable
    def error_banner(state: ConversationState) -> None:
        if state.last_error:
            ui.label(state.last_error).classes(
                "w-full bg-red-50 border border-red-200 text-red-700 px-4 py-3 rounded-lg"
            )

    def on_update(state: ConversationState) -> None:
        markdown = streaming_view["markdown"]
        last = state.turns[-1] if state.turns else None
        growing = (
            markdown is not None
            and last is not None
            and markdown.content
            and len(state.turns) == rendered_count["turns"]
            and state.is_active(last)
        )
        if growing:
            markdown.set_content(last.content)
        else:
            messages.refresh(state)
        error_banner.refresh(state)
        scroll_area.scroll_to(percent=1.0)
        send_btn.set_enabled(not state.is_streaming)

    stream_client = StreamClient(config=ClientConfig(), on_update=on_update)
    ui.context.client.on_disconnect(stream_client.aclose)

    async def send_message() -> None:
        text = input_field.value or ""
        if text.strip():
            input_field.value = ""
        await stream_client.submit(
            text,
            developer_message=system_prompt.value or "",
            model=model_select.value or DEFAULT_MODEL,
        )

    # === UI Layout ===
    with (
        ui.element("div").classes("w-full min-h-screen p-4 md:p-8"),
        ui.column().classes("w-full max-w-4xl mx-auto app-container").style(
            "height: calc(100vh - 4rem)"
        ),
    ):
        with ui.row().classes("w-full header px-5 py-4 items-center justify-between"):
            with ui.row().classes("items-center gap-3"):
                ui.icon("chat").classes("text-white text-3xl")
                ui.label("StreamChat").classes("text-lg font-semibold text-white")
            ui.button("Clear Chat", on_click=stream_client.clear).props(
                "flat color=white"
            )

        with ui.row().classes("w-full px-5 pt-3 gap-3 items-end"):
            model_select = ui.select(MODEL_OPTIONS, value=DEFAULT_MODEL, label="Model").classes(
                "w-56"
            )
            system_prompt = ui.input(
                "System Prompt", placeholder=DEFAULT_DEVELOPER_MESSAGE
            ).classes("flex-grow")

        with (
            ui.scroll_area().classes("flex-grow w-full bg-gray-50") as scroll_area,
            ui.column().classes("w-full p-5 gap-4"),
        ):
            messages(stream_client.state)

        with ui.column().classes("w-full px-4"):
            error_banner(stream_client.state)

        with ui.row().classes("w-full p-4 gap-3 items-end bg-white border-t"):
            input_field = (
                ui.input(placeholder="Type your message...")
                .props("outlined dense")
                .classes("flex-grow")
                .on("keydown.enter", send_message)
            )
            send_btn = ui.button("Send", on_click=send_message).props("unelevated")

