#  SPDX-License-Identifier: Apache-2.0
"""Constants for the Bluelink Europe API."""

from __future__ import annotations

from typing import NamedTuple

EU_API_HOST = "prd.eu-ccapi.hyundai.com:8080"
EU_BASE_URL = f"https://{EU_API_HOST}"
EU_CLIENT_ID = "6d477c38-3ca4-4cf3-9557-2a1929a94654"
EU_BASIC_TOKEN = (
    "Basic NmQ0NzdjMzgtM2NhNC00Y2YzLTk1NTctMmExOTI5YTk0NjU0OktVeTQ5WHhQekxwTHVvSzB4aEJDNzdXNm8="
)
GCM_SENDER_ID = "199360397125"

USER_AGENT = "okhttp/3.10.0"
PUSH_TYPE = "GCM"
DEFAULT_LANGUAGE = "en"
BRAND_INDICATOR = "H"

TIMEOUT = 90

#: lifetime of a control token in seconds
CONTROL_TOKEN_TTL = 10 * 60


class Endpoints(NamedTuple):
    """URLs used by the session handshake and vehicle enumeration."""

    session: str
    language: str
    login: str
    redirect_uri: str
    token: str
    notification_register: str
    pin: str
    vehicles: str
    vehicle_profile: str

    @classmethod
    def from_base_url(cls, base_url: str, client_id: str = EU_CLIENT_ID) -> Endpoints:
        """Build the endpoint table for an API host."""
        redirect_uri = f"{base_url}/api/v1/user/oauth2/redirect"
        return cls(
            session=(
                f"{base_url}/api/v1/user/oauth2/authorize?response_type=code&state=test"
                f"&client_id={client_id}&redirect_uri={redirect_uri}"
            ),
            language=f"{base_url}/api/v1/user/language",
            login=f"{base_url}/api/v1/user/signin",
            redirect_uri=redirect_uri,
            token=f"{base_url}/api/v1/user/oauth2/token",
            notification_register=f"{base_url}/api/v1/spa/notifications/register",
            pin=f"{base_url}/api/v1/user/pin",
            vehicles=f"{base_url}/api/v1/spa/vehicles",
            vehicle_profile=f"{base_url}/api/v1/spa/vehicles/{{vehicle_id}}/profile",
        )


EU_ENDPOINTS = Endpoints.from_base_url(EU_BASE_URL)
