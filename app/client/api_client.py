"""Async HTTP client for the Room API."""

import logging
from typing import Any

import httpx

from app.schemas.booking import BookingResponse, SalonServiceResponse
from app.schemas.payment import PaymentStatusResponse
from app.schemas.user import UserResponse

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Non-2xx response from the API."""

    def __init__(self, status_code: int, detail: Any):
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"{status_code}: {detail}")


class RoomApiClient:
    """Thin wrapper over ``httpx.AsyncClient``.

    The caller owns the transport. Pass an ``httpx.AsyncClient`` already
    pointed at the server (``base_url``) and the identity token to send.
    """

    def __init__(self, http: httpx.AsyncClient, token: str | None = None, api_prefix: str = "/api"):
        self.http = http
        self.token = token
        self.api_prefix = api_prefix.rstrip("/")

    def _headers(self) -> dict[str, str]:
        if not self.token:
            return {}
        return {"Authorization": f"Bearer {self.token}"}

    async def _request(self, method: str, path: str, json: dict | None = None) -> Any:
        response = await self.http.request(
            method,
            f"{self.api_prefix}{path}",
            json=json,
            headers=self._headers(),
        )
        if response.is_error:
            try:
                detail = response.json().get("detail")
            except ValueError:
                detail = response.text
            logger.debug(f"{method} {path} failed: {response.status_code} {detail}")
            raise ApiError(response.status_code, detail)
        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    # Auth

    async def register(
        self,
        name: str,
        role: str = "customer",
        bio: str = "",
        location: str | None = None,
    ) -> UserResponse:
        data = await self._request(
            "POST",
            "/auth/register",
            {"name": name, "role": role, "bio": bio, "location": location},
        )
        return UserResponse.model_validate(data["user"])

    async def me(self) -> UserResponse:
        data = await self._request("GET", "/auth/me")
        return UserResponse.model_validate(data["user"])

    async def update_profile(self, **updates: Any) -> UserResponse:
        data = await self._request("PUT", "/auth/profile", updates)
        return UserResponse.model_validate(data["user"])

    # Bookings

    async def create_booking(
        self,
        stylist_uid: str,
        service_id: str,
        date_time: str,
        service_name: str | None = None,
        price: float | None = None,
        client_notes: str = "",
        location: str | None = None,
    ) -> BookingResponse:
        payload = {
            "stylistUid": stylist_uid,
            "serviceId": service_id,
            "dateTime": date_time,
            "clientNotes": client_notes,
        }
        if service_name is not None:
            payload["serviceName"] = service_name
        if price is not None:
            payload["price"] = price
        if location is not None:
            payload["location"] = location
        data = await self._request("POST", "/bookings", payload)
        return BookingResponse.model_validate(data["booking"])

    async def update_status(self, booking_id: str, status: str) -> str:
        data = await self._request("PATCH", f"/bookings/{booking_id}/status", {"status": status})
        return data["status"]

    async def accept_booking(self, booking_id: str) -> BookingResponse:
        data = await self._request("POST", f"/bookings/{booking_id}/accept")
        return BookingResponse.model_validate(data["booking"])

    async def get_booking(self, booking_id: str) -> BookingResponse:
        data = await self._request("GET", f"/bookings/{booking_id}")
        return BookingResponse.model_validate(data["booking"])

    async def list_bookings(self, uid: str) -> list[BookingResponse]:
        data = await self._request("GET", f"/bookings/user/{uid}")
        return [BookingResponse.model_validate(b) for b in data["bookings"]]

    async def list_services(self) -> list[SalonServiceResponse]:
        data = await self._request("GET", "/services")
        return [SalonServiceResponse.model_validate(s) for s in data["services"]]

    # Payments

    async def create_payment_intent(self, booking_id: str) -> str:
        data = await self._request("POST", "/payments/create-intent", {"bookingId": booking_id})
        return data["clientSecret"]

    async def get_payment_status(self, booking_id: str) -> PaymentStatusResponse:
        data = await self._request("GET", f"/payments/status/{booking_id}")
        return PaymentStatusResponse.model_validate(data)

    # Notifications

    async def register_device(self, token: str) -> None:
        await self._request("POST", "/notifications/devices", {"token": token})

    async def unregister_device(self, token: str) -> None:
        await self._request("DELETE", f"/notifications/devices/{token}")
