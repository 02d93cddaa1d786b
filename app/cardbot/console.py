"""Interactive console -- try the reply rules locally without Bot Framework.

Plain lines are sent as message text.  ``/submit key=value ...`` sends a form
submission, ``/event <type>`` sends a non-message activity, ``/quit`` exits.
"""

from __future__ import annotations

from botbuilder.schema import Activity, ActivityTypes
from prompt_toolkit import PromptSession
from prompt_toolkit.formatted_text import HTML
from prompt_toolkit.history import InMemoryHistory
from rich.console import Console, RenderableType
from rich.json import JSON
from rich.panel import Panel
from rich.text import Text

from .config.settings import Settings
from .errors import StartupConfigurationError
from .messaging.cards import attachment_to_dict, card_attachment, load_card_template
from .messaging.dispatcher import ReplyAction, SendAttachment, dispatch

console = Console()

_QUIT = {"/quit", "/exit"}


def activity_from_line(line: str) -> Activity:
    words = line.split()
    command = words[0] if words else ""
    if command == "/submit":
        value = dict(word.split("=", 1) for word in words[1:] if "=" in word)
        return Activity(type=ActivityTypes.message, value=value)
    if command == "/event":
        event_type = words[1] if len(words) > 1 else ActivityTypes.conversation_update
        return Activity(type=event_type)
    return Activity(type=ActivityTypes.message, text=line)


def render(action: ReplyAction) -> RenderableType:
    if isinstance(action, SendAttachment):
        payload = attachment_to_dict(card_attachment(action.card))
        return Panel(JSON.from_data(payload), title="Adaptive Card", expand=False)
    return Text(action.text)


def main() -> None:
    settings = Settings()
    try:
        card = load_card_template(settings.card_template_path)
    except StartupConfigurationError as exc:
        console.print(f"[bold red]{exc}[/bold red]")
        raise SystemExit(1) from exc

    console.print(
        "[bold green]cardbot[/bold green] console\n"
        "Type [bold]show card[/bold], [bold]/submit userName=Ann[/bold], "
        "[bold]/event <type>[/bold] or [bold]/quit[/bold].\n"
    )
    prompt_session: PromptSession[str] = PromptSession(history=InMemoryHistory())

    while True:
        try:
            line = prompt_session.prompt(HTML("<b>you &gt;</b> "))
        except (EOFError, KeyboardInterrupt):
            break

        if not line.strip():
            continue
        if line.strip().lower() in _QUIT:
            break

        console.print(render(dispatch(activity_from_line(line), card)))
        console.print()

    console.print("[dim]Goodbye.[/dim]")


if __name__ == "__main__":
    main()
