from __future__ import annotations

from typing import Any

import httpx

from ..models import HealthStatus, IdentifyResponse


class IdentityServiceClient:
    """Lightweight SDK for interacting with the Identity Service."""

    def __init__(self, base_url: str, auth_token: str | None = None, timeout: float = 10.0) -> None:
        self._base_url = base_url.rstrip("/")
        self._auth_token = auth_token
        self._timeout = timeout

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self._auth_token:
            headers["Authorization"] = f"Bearer {self._auth_token}"
        return headers

    @staticmethod
    def _payload(email: str | None, phone_number: str | None) -> dict[str, Any]:
        payload: dict[str, Any] = {}
        if email is not None:
            payload["email"] = email
        if phone_number is not None:
            payload["phoneNumber"] = phone_number
        return payload

    def identify(self, email: str | None = None, phone_number: str | None = None) -> IdentifyResponse:
        response = httpx.post(
            f"{self._base_url}/identify",
            json=self._payload(email, phone_number),
            headers=self._headers(),
            timeout=self._timeout,
        )
        response.raise_for_status()
        return IdentifyResponse.model_validate(response.json())

    def health(self) -> HealthStatus:
        response = httpx.get(f"{self._base_url}/health", headers=self._headers(), timeout=self._timeout)
        response.raise_for_status()
        return HealthStatus.model_validate(response.json())

    async def aidentify(
        self, email: str | None = None, phone_number: str | None = None
    ) -> IdentifyResponse:
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            response = await client.post(
                f"{self._base_url}/identify",
                json=self._payload(email, phone_number),
                headers=self._headers(),
            )
        response.raise_for_status()
        return IdentifyResponse.model_validate(response.json())


__all__ = ["IdentityServiceClient"]
