"""Generic command replies."""

from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel, ValidationError

from powerstrip.errors import ProtocolError


class CommandReply(BaseModel):
    model_config = {"frozen": True, "extra": "allow"}

    err_code: int = 0
    err_msg: str | None = None


def check_reply(text: str, module: str, method: str) -> CommandReply:
    """Extract ``module.method`` from a reply and fail on a nonzero err_code."""
    try:
        data: Any = json.loads(text)
        reply = CommandReply.model_validate(data[module][method])
    except (json.JSONDecodeError, KeyError, TypeError, ValidationError) as exc:
        raise ProtocolError(f"Malformed {module}.{method} reply: {text!r}") from exc

    if reply.err_code != 0:
        detail = f": {reply.err_msg}" if reply.err_msg else ""
        raise ProtocolError(
            f"Device rejected {module}.{method} (err_code={reply.err_code}){detail}"
        )
    return reply
