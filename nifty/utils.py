from .models.config import ID_PLACEHOLDER


def render_template(template: str, token_id: int) -> str:
    """Substitute the token id into a template.

    Example: "Token #{id}" -> "Token #5"
    """
    return template.replace(ID_PLACEHOLDER, str(token_id))


def format_elapsed(seconds: float) -> str:
    """Format seconds as HH:MM:SS.mmm."""
    millis = int(round(seconds * 1000))
    hours, rest = divmod(millis, 3_600_000)
    minutes, rest = divmod(rest, 60_000)
    secs, millis = divmod(rest, 1000)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}.{millis:03d}"
