"""Reminder message text."""

from collections.abc import Mapping, Sequence

INSTRUCTIONS = (
    "On Desktop, activate the *More actions* menu on the image, choose *Edit file details*, "
    "and modify the *Description* field to add alt text. On Android, long press the image "
    "and select *Add description*. If adding alt is not supported on your device, simply "
    "provide alt text in a follow-up message. ❤️"
)


def _suggestion_block(
    filenames: Sequence[str], suggestions: Mapping[str, str | None] | None
) -> str:
    if not suggestions:
        return ""

    entries = [
        f"*{name}:*\n```{suggestions[name]}```"
        for name in filenames
        if suggestions.get(name)
    ]
    if not entries:
        return ""
    return "\n\n*Here's a suggestion:*\n" + "\n\n".join(entries) + "\n"


def compose_reminder(
    file_count: int,
    missing: Sequence[str],
    suggestions: Mapping[str, str | None] | None = None,
) -> str:
    """Build the ephemeral reminder for images shared without alt text.

    Files without a suggestion are still listed in the reminder but left
    out of the suggestion block. `file_count` is the number of files in the
    message and does not change the wording; phrasing follows how many
    files are missing alt text.
    """
    suggestion_text = _suggestion_block(missing, suggestions)

    if len(missing) == 1:
        return (
            "Uh oh! The image you shared is missing alt text so it won't be accessible "
            f"to your teammates who are blind or have low-vision.{suggestion_text}\n\n"
            + INSTRUCTIONS
        )

    joined = ", ".join(f"`{name}`" for name in missing)
    return (
        f"Uh oh! The following images are missing alt text: {joined}. "
        "This means it won't be accessible to your teammates who are blind or have "
        f"low-vision.{suggestion_text}\n\n" + INSTRUCTIONS
    )
