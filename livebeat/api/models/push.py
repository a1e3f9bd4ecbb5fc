"""Acknowledgement returned by a push monitoring endpoint.

Uptime Kuma style push endpoints answer a heartbeat GET with
``{"ok": true}`` or ``{"ok": false, "msg": "..."}``.

Decoding rules:
- missing or null fields keep their defaults, so ``{}``, ``null`` and
  ``{"msg": "paused"}`` are negative acknowledgements
- unknown fields are ignored
- a field of the wrong type (``{"ok": "false"}``) or a body that is not
  a JSON object is not an acknowledgement at all
"""

from pydantic import BaseModel, StrictBool, StrictStr, TypeAdapter


class PushAcknowledgement(BaseModel):
    """Remote acknowledgement of a heartbeat push.

    Attributes:
        ok: Whether the remote endpoint accepted the heartbeat.
        msg: Explanation supplied with a rejection.
    """

    ok: StrictBool | None = False
    msg: StrictStr | None = ""

    @property
    def accepted(self) -> bool:
        """Check if the endpoint accepted the heartbeat."""
        return bool(self.ok)

    @property
    def message(self) -> str:
        """Get the rejection message, empty when none was given."""
        return self.msg or ""


_acknowledgement_body: TypeAdapter[PushAcknowledgement | None] = TypeAdapter(
    PushAcknowledgement | None
)


def parse_acknowledgement(body: bytes) -> PushAcknowledgement:
    """Decode a push response body.

    Args:
        body: Raw response body.

    Returns:
        The acknowledgement. A JSON ``null`` body yields the defaults.

    Raises:
        pydantic.ValidationError: If the body is not an acknowledgement.
    """
    return _acknowledgement_body.validate_json(body) or PushAcknowledgement()
