"""Session minting for seller codes.

Each seller code maps to one synthetic auth principal whose email is derived
from the code hash. The same plaintext therefore always logs into the same
principal, and the plaintext is never needed after hashing.
"""

import logging
import uuid

import httpx
from supabase import AuthApiError, AuthError, Client

from app.core.config import settings
from app.core.exceptions import SessionIssueFailure

logger = logging.getLogger(__name__)

# GoTrue error codes meaning "principal already exists".
_ALREADY_EXISTS_CODES = {"email_exists", "user_already_exists"}


def seller_account_handle(code_hash: str) -> str:
    return f"{code_hash}@{settings.SELLER_EMAIL_DOMAIN}"


class SessionIssuer:
    """Interface for the auth provider that backs seller logins."""

    def provision(self, account_handle: str, profile_id: uuid.UUID) -> None:
        """Create the auth principal for a first claim. Must be idempotent."""
        raise NotImplementedError

    def issue_session(self, account_handle: str, redirect_to: str) -> str:
        """Return a URL that signs the principal in."""
        raise NotImplementedError


class SupabaseSessionIssuer(SessionIssuer):
    """Seller principals in Supabase Auth, signed in through magic links."""

    def __init__(self, client: Client):
        self.client = client

    def provision(self, account_handle: str, profile_id: uuid.UUID) -> None:
        try:
            self.client.auth.admin.create_user({
                "email": account_handle,
                "email_confirm": True,
                "user_metadata": {"role": "seller", "profile_id": str(profile_id)},
            })
        except AuthApiError as e:
            if getattr(e, "code", None) in _ALREADY_EXISTS_CODES:
                logger.info("Auth principal for profile %s already exists", profile_id)
                return
            raise SessionIssueFailure(
                f"create_user failed: {e}", retryable=_is_retryable_status(e),
            ) from e
        except AuthError as e:
            raise SessionIssueFailure(f"create_user failed: {e}") from e
        except httpx.HTTPError as e:
            raise SessionIssueFailure(f"create_user transport error: {e}", retryable=True) from e

    def issue_session(self, account_handle: str, redirect_to: str) -> str:
        try:
            response = self.client.auth.admin.generate_link({
                "type": "magiclink",
                "email": account_handle,
                "options": {"redirect_to": redirect_to},
            })
        except AuthApiError as e:
            raise SessionIssueFailure(
                f"generate_link failed: {e}", retryable=_is_retryable_status(e),
            ) from e
        except AuthError as e:
            raise SessionIssueFailure(f"generate_link failed: {e}") from e
        except httpx.HTTPError as e:
            raise SessionIssueFailure(f"generate_link transport error: {e}", retryable=True) from e

        action_link = response.properties.action_link if response and response.properties else None
        if not action_link:
            raise SessionIssueFailure("generate_link returned no action link")
        return action_link


def _is_retryable_status(error: AuthApiError) -> bool:
    status = getattr(error, "status", None)
    return isinstance(status, int) and (status >= 500 or status == 429)
