"""Email request models.

Defines the inbound send payload accepted by POST /send-email and the
normalized outbound message handed to the delivery provider.

Author: Odiseo
Created: 2025-10-18
Version: 1.0.0
"""

from __future__ import annotations

from typing import Annotated, Any

from email_validator import EmailNotValidError, validate_email
from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
)

from mail_relay.core.exceptions import PayloadValidationError

REQUIRED_FIELDS = ("to", "subject", "html")
MISSING_FIELDS_MESSAGE = "Missing required fields (to, subject, html)"


def _check_address(value: str) -> str:
    """Validate an address and return it exactly as given."""
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError as e:
        raise ValueError(f"value is not a valid email address: {e}") from e
    return value


# Validated like EmailStr but forwarded unchanged (no case or IDN normalization)
EmailAddress = Annotated[str, AfterValidator(_check_address)]


class EmailRequest(BaseModel):
    """Validated send request.

    Attributes:
        to: One or more recipient addresses (a single string is accepted).
        subject: Email subject line.
        html: HTML email body.
        cc: CC addresses; empty when not supplied.
        from_email: Sender address override (JSON key "from").
        from_name: Sender display name override (JSON key "name").
        email_type: Free-text category label used only for logging
            (JSON key "emailType").
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    to: list[EmailAddress] = Field(..., min_length=1, description="Recipient addresses")
    subject: str = Field(..., min_length=1, description="Email subject line")
    html: str = Field(..., min_length=1, description="HTML email body")
    cc: list[EmailAddress] = Field(default_factory=list, description="CC addresses")
    from_email: EmailAddress | None = Field(
        default=None, alias="from", description="Sender address override"
    )
    from_name: str | None = Field(
        default=None, alias="name", description="Sender display name override"
    )
    email_type: str | None = Field(
        default=None, alias="emailType", description="Category label for logging"
    )

    @field_validator("to", "cc", mode="before")
    @classmethod
    def coerce_address_list(cls, v: Any) -> Any:
        """Accept a single address string in place of a list."""
        if v is None:
            return []
        if isinstance(v, str):
            return [v]
        return v

    @field_validator("from_email", "from_name", "email_type", mode="before")
    @classmethod
    def blank_as_none(cls, v: Any) -> Any:
        """Treat empty optional strings as absent so defaults apply."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @property
    def recipients_summary(self) -> str:
        return ", ".join(self.to)


class EmailContact(BaseModel):
    """One address in the provider's "one object per address" shape."""

    email: str
    name: str | None = None


class OutboundEmail(BaseModel):
    """Provider-neutral send request.

    Serialized with ``to_payload()`` into the transactional-email shape
    ``{sender, to, cc?, subject, htmlContent}``. ``cc`` is None, and thus
    omitted, whenever there are no CC recipients.
    """

    model_config = ConfigDict(populate_by_name=True)

    sender: EmailContact
    to: list[EmailContact] = Field(..., min_length=1)
    cc: list[EmailContact] | None = None
    subject: str
    html_content: str = Field(..., alias="htmlContent")

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple)):
        return len(value) == 0
    return False


def _summarize(error: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in err['loc']) or 'body'}: {err['msg']}"
        for err in error.errors()
    )


def parse_email_request(raw: Any) -> EmailRequest:
    """Validate a decoded JSON body into an EmailRequest.

    Anything that is not a JSON object is treated as an empty object, so
    a non-JSON body fails the required-field check like an empty one.

    Args:
        raw: Decoded request body.

    Returns:
        Validated EmailRequest.

    Raises:
        PayloadValidationError: If a required field is missing or empty,
            or a field has the wrong shape.
    """
    if not isinstance(raw, dict):
        raw = {}

    if any(_is_blank(raw.get(name)) for name in REQUIRED_FIELDS):
        raise PayloadValidationError(MISSING_FIELDS_MESSAGE)

    try:
        return EmailRequest.model_validate(raw)
    except ValidationError as e:
        raise PayloadValidationError(f"Invalid email request: {_summarize(e)}") from e
