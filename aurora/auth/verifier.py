"""
Telegram login widget assertion verification.

The widget redirects back with the user's claims plus a `hash` field. The
hash is checked exactly the way the provider documents it:

    data_check_string = "\n".join(f"{k}={v}" for k, v in sorted(fields))
    secret_key        = SHA256(bot_token)
    hash              = hex(HMAC_SHA256(secret_key, data_check_string))

All non-`hash` fields take part in the signature, including ones this
service does not use (photo_url, auth_date, ...).
"""

import hashlib
import hmac
import re
from typing import Mapping, Union

from .models import VerifiedIdentity
from ..utils.exceptions import ConfigError, InvalidSignature
from ..utils.logger import get_logger

logger = get_logger(__name__)

HASH_FIELD = "hash"

_ID_PATTERN = re.compile(r"-?[0-9]+")


def parse_user_id(value) -> int:
    """Parse a canonical decimal id; raises ValueError for anything else."""
    text = str(value)
    if not _ID_PATTERN.fullmatch(text):
        raise ValueError(f"Not a numeric id: {text!r}")
    return int(text)


def build_check_string(fields: Mapping[str, str]) -> str:
    """Sorted key=value lines joined by a single newline, no trailing newline."""
    return "\n".join(f"{key}={fields[key]}" for key in sorted(fields))


def derive_secret_key(bot_token: Union[str, bytes]) -> bytes:
    if isinstance(bot_token, str):
        bot_token = bot_token.encode("utf-8")
    return hashlib.sha256(bot_token).digest()


def compute_signature(fields: Mapping[str, str], bot_token: Union[str, bytes]) -> str:
    """Lowercase hex HMAC-SHA256 of the check string."""
    check_string = build_check_string(fields)
    return hmac.new(
        derive_secret_key(bot_token), check_string.encode("utf-8"), hashlib.sha256
    ).hexdigest()


class IdentityVerifier:
    """Validates login assertions against the bot's shared secret."""

    def __init__(self, bot_token: Union[str, bytes]):
        if not bot_token:
            raise ConfigError("BOT_TOKEN must be set to verify login assertions")
        self._bot_token = bot_token

    def verify(self, assertion: Mapping[str, str]) -> VerifiedIdentity:
        """
        Return the verified identity or raise InvalidSignature.

        The input mapping is not modified.
        """
        fields = {str(k): str(v) for k, v in assertion.items()}
        supplied = fields.pop(HASH_FIELD, None)
        if not supplied:
            logger.warning("Login assertion without hash", fields=sorted(fields))
            raise InvalidSignature("Missing hash")

        expected = compute_signature(fields, self._bot_token)
        if not hmac.compare_digest(expected.encode("utf-8"), supplied.encode("utf-8")):
            logger.warning("Login assertion signature mismatch", user_id=fields.get("id"))
            raise InvalidSignature("Invalid Data")

        try:
            user_id = parse_user_id(fields.get("id", ""))
        except ValueError:
            logger.warning("Login assertion with malformed id", user_id=fields.get("id"))
            raise InvalidSignature("Malformed id")

        return VerifiedIdentity(
            id=user_id,
            display_name=fields.get("first_name", ""),
            handle=fields.get("username", ""),
        )
