"""
Auth service.

Email OTP login, profile and KYC lookups.
"""

from typing import Any

from loguru import logger

from app.models.records import KycRecord, UserProfile, unwrap_list
from app.services.api_client import ApiClient
from app.services.token_store import TokenStore
from app.utils.datetime_utils import seconds_until
from app.utils.exceptions import ApiClientError


class AuthService:
    """Account-level API operations."""

    def __init__(self, api: ApiClient) -> None:
        self.api = api

    async def request_email_otp(self, email: str) -> str | None:
        """
        Ask the API to email a one-time password.

        Args:
            email: Account email

        Returns:
            Server session id (``sid``) to send back with the OTP
        """
        logger.info(f"Requesting OTP for email: {email}")
        payload = await self.api.post("/auth/email-otp/request", json_body={"email": email})
        sid = payload.get("sid") if isinstance(payload, dict) else None
        if not sid:
            logger.warning(f"OTP request for {email} returned no sid")
        return sid

    async def authenticate(
        self,
        credentials: TokenStore,
        email: str,
        otp: str,
        sid: str,
    ) -> dict[str, Any]:
        """
        Exchange email + OTP + sid for an access token.

        The token is stored in ``credentials`` with the lifetime derived from
        ``expireAt``.

        Raises:
            ApiClientError: OTP rejected or response has no token
        """
        payload = await self.api.post(
            "/auth/email-otp/authenticate",
            json_body={"email": email, "otp": otp, "sid": sid},
        )
        access_token = payload.get("accessToken") if isinstance(payload, dict) else None
        if not access_token:
            raise ApiClientError(
                "Authentication response has no access token", payload=payload
            )

        credentials.set_token(access_token, seconds_until(payload.get("expireAt")))
        logger.info(f"Authenticated {email}")
        return payload

    async def get_profile(self, credentials: TokenStore) -> UserProfile:
        payload = await self.api.get("/auth/me", credentials)
        return UserProfile.from_payload(payload)

    async def get_kyc_records(self, credentials: TokenStore) -> list[KycRecord]:
        """Return KYC submissions, latest first."""
        payload = await self.api.get("/kycs", credentials)
        return [
            KycRecord.from_payload(item)
            for item in unwrap_list(payload)
            if isinstance(item, dict)
        ]

    async def get_latest_kyc(self, credentials: TokenStore) -> KycRecord | None:
        records = await self.get_kyc_records(credentials)
        return records[0] if records else None

    async def is_kyc_approved(self, credentials: TokenStore) -> bool:
        latest = await self.get_latest_kyc(credentials)
        return latest is not None and latest.is_approved
