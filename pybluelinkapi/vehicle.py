#  SPDX-License-Identifier: Apache-2.0
"""Models a Bluelink vehicle."""

from __future__ import annotations

import logging
from typing import NamedTuple

from pybluelinkapi.connection import Connection
from pybluelinkapi.exceptions import ProtocolError

from .const import BRAND_INDICATOR

_LOGGER = logging.getLogger(__name__)


class VehicleRecord(NamedTuple):
    """Registration data of a vehicle."""

    id: str
    vin: str
    nickname: str | None
    name: str | None
    registration_date: str | None
    brand_indicator: str
    generation: str | None

    @classmethod
    def from_api(cls, entry: dict, profile: dict) -> VehicleRecord:
        """Combine a vehicle list entry with the vehicle's profile.

        VIN and model year only come from the profile.
        """
        try:
            basic = profile["vinInfo"][0]["basic"]
            return cls(
                id=entry["vehicleId"],
                vin=basic["vin"],
                nickname=entry.get("nickname"),
                name=entry.get("vehicleName"),
                registration_date=entry.get("regDate"),
                brand_indicator=BRAND_INDICATOR,
                generation=basic.get("modelYear"),
            )
        except (KeyError, IndexError, TypeError) as exc:
            msg = "Unexpected vehicle profile format"
            raise ProtocolError(msg) from exc


class BluelinkVehicle:
    """Representation of a Bluelink vehicle bound to a connection."""

    def __init__(
        self,
        connection: Connection,
        record: VehicleRecord,
    ) -> None:
        """Initialise the Bluelink Vehicle."""
        self.connection = connection
        self.record = record

    def __repr__(self) -> str:
        return f"<BluelinkVehicle {self.id} {self.vin}>"

    def get_data(self) -> dict:
        """Get the registration data as a dict."""
        return self.record._asdict()

    @property
    def id(self) -> str:
        """Get the vehicle id used in API paths."""
        return self.record.id

    @property
    def vin(self) -> str:
        """Get the VIN (vehicle identification number) of the vehicle."""
        return self.record.vin

    @property
    def nickname(self) -> str | None:
        return self.record.nickname

    @property
    def name(self) -> str | None:
        return self.record.name

    @property
    def registration_date(self) -> str | None:
        return self.record.registration_date

    @property
    def brand_indicator(self) -> str:
        return self.record.brand_indicator

    @property
    def generation(self) -> str | None:
        """Get the model year of the vehicle."""
        return self.record.generation
