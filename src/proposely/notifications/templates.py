"""Email templates for creator notifications.

Templates are fixed text with named placeholders. Only listed params may be
substituted; rendered text lives in memory until it is handed to the
notifier and is never persisted or logged.
"""

from typing import Any

TEMPLATES: dict[str, dict[str, Any]] = {
    "acceptance": {
        "subject": "She said YES! 💘",
        "text": (
            "Congrats! {partner_name} accepted your proposal. "
            "Date: {date}, Vibe: {vibe}."
        ),
        "allowed_params": ["partner_name", "date", "vibe"],
    },
}

# Substituted when the corresponding value is missing or blank
FALLBACK_PARTNER_NAME = "Your partner"
FALLBACK_DATE = "TBD"
FALLBACK_VIBE = "Surprise!"


def render(template_key: str, params: dict[str, Any]) -> tuple[str, str]:
    """Render template with params. Validates allowed_params.

    Args:
        template_key: Template identifier.
        params: Parameters to interpolate (must be in allowed_params).

    Returns:
        (subject, text) tuple.

    Raises:
        ValueError: If template_key unknown or params contains disallowed keys.
    """
    if template_key not in TEMPLATES:
        raise ValueError(f"Unknown template: {template_key}")

    template = TEMPLATES[template_key]
    allowed = set(template["allowed_params"])
    provided = set(params.keys())

    extras = provided - allowed
    if extras:
        raise ValueError(f"Disallowed params for {template_key}: {extras}")

    missing = allowed - provided
    if missing:
        raise ValueError(f"Missing params for {template_key}: {missing}")

    return template["subject"], template["text"].format(**params)
