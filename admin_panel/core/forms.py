from pydantic import ValidationError
from typing import List


def form_errors(exc: ValidationError) -> List[str]:
    """Readable one-line messages for a failed form schema."""
    messages = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error.get("loc", ()))
        text = error.get("msg", "Invalid value")
        messages.append(f"{field.replace('_', ' ').capitalize()}: {text}" if field else text)
    return messages
