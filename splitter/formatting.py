"""HTML helpers for the dashboard's styled boxes."""

import html


def html_text(value: object) -> str:
    """Escape a value for use inside HTML, keeping line breaks."""
    return html.escape(str(value)).replace("\n", "<br>")
