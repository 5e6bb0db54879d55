"""Single key capture in a terminal, used by ``bufferbar pick``."""

from __future__ import annotations

from prompt_toolkit.application import Application
from prompt_toolkit.formatted_text import FormattedText
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.layout import Layout
from prompt_toolkit.layout.containers import Window
from prompt_toolkit.layout.controls import FormattedTextControl
from prompt_toolkit.styles import Style

ESCAPE = "\x1b"


def read_key(message: str = "") -> str:
    """Show ``message`` and return the first key pressed.

    Escape and Ctrl+C return ``ESCAPE``, which never matches a pick letter.
    """
    kb = KeyBindings()

    @kb.add("<any>")
    def pressed(event) -> None:
        event.app.exit(result=event.key_sequence[0].data)

    # registered last so they win over "<any>"
    @kb.add("escape")
    @kb.add("c-c")
    def cancel(event) -> None:
        event.app.exit(result=ESCAPE)

    def get_text() -> FormattedText:
        return FormattedText([("", message), ("class:hint", "\n(press a letter, Esc to cancel)")])

    style = Style.from_dict({"hint": "fg:ansibrightblack italic"})

    app: Application[str] = Application(
        layout=Layout(Window(FormattedTextControl(get_text))),
        key_bindings=kb,
        style=style,
        full_screen=False,
    )
    return app.run()
