"""Log formatters for NCD Screen.

Patient names are the only identifying field a screening profile carries,
so redaction targets the places names show up in log lines: ``name=``
fields and "Patient: <Name>" phrases.
"""

import logging
import re

REDACTED_NAME = "[NAME-REDACTED]"

NAME_PATTERNS: tuple[tuple[re.Pattern[str], str], ...] = (
    # name="Asha Devi", name='Ravi'
    (re.compile(r'name=(["\'])[^"\']*\1'), f"name={REDACTED_NAME}"),
    # name=Ravi Kumar, stops at field separators
    (re.compile(r"name=(?!\[)[^\s|,;]+(?:\s+[A-Z][a-z]+)*"), f"name={REDACTED_NAME}"),
    # Patient: Asha Devi, Name: Ravi Kumar
    (
        re.compile(r"(Patient|Name):\s+[A-Z][a-z]+(?:\s+[A-Z][a-z]+)*"),
        rf"\1: {REDACTED_NAME}",
    ),
)


def redact_names(text: str) -> str:
    """Replace every recognised patient name in text with REDACTED_NAME."""
    for pattern, replacement in NAME_PATTERNS:
        text = pattern.sub(replacement, text)
    return text


class PIIRedactingFormatter(logging.Formatter):
    """Formatter that strips patient names from the formatted record.

    Redaction runs on the final string, so names passed as ``%s`` arguments
    are caught as well as names baked into the message.

    Example:
        >>> handler = logging.StreamHandler()
        >>> handler.setFormatter(PIIRedactingFormatter(redact_pii=True))
    """

    def __init__(
        self,
        fmt: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt: str | None = None,
        redact_pii: bool = False,
    ) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)
        self.redact_pii = redact_pii

    def format(self, record: logging.LogRecord) -> str:
        formatted = super().format(record)
        return redact_names(formatted) if self.redact_pii else formatted
