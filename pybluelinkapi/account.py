#  SPDX-License-Identifier: Apache-2.0
"""Accesses a Bluelink account and retrieves connected vehicles."""

from __future__ import annotations

import logging

from pybluelinkapi.connection import Connection
from pybluelinkapi.exceptions import ProtocolError
from pybluelinkapi.push import PushRegistrar
from pybluelinkapi.vehicle import BluelinkVehicle, VehicleRecord

_LOGGER = logging.getLogger(__name__)


class BluelinkAccount:
    """Establishes a connection to a Bluelink account."""

    def __init__(
        self,
        username: str | None = None,
        password: str | None = None,
        pin: str | None = None,
        push_registrar: PushRegistrar | None = None,
        connection: Connection | None = None,
    ) -> None:
        """Initialize the account."""
        self.vehicles: list[BluelinkVehicle] = []
        if connection is None:
            self.connection = Connection(
                username,
                password,
                pin=pin,
                push_registrar=push_registrar,
            )
        else:
            self.connection = connection

    @property
    def session(self):
        """Return the session of the underlying connection."""
        return self.connection.session

    async def _init_vehicles(self) -> None:
        """Initialize vehicles from API endpoint.

        Profiles are fetched one at a time in list order. The vehicle list is
        only replaced once every request succeeded.
        """
        _LOGGER.debug("Building vehicle list")
        self.connection.session.require_access_token()
        endpoints = self.connection.endpoints

        response = await self.connection.get(endpoints.vehicles)
        try:
            entries = response["resMsg"]["vehicles"]
        except (KeyError, TypeError) as exc:
            msg = "Unexpected vehicle list format"
            raise ProtocolError(msg) from exc
        if not isinstance(entries, list) or not all(isinstance(e, dict) for e in entries):
            msg = "Unexpected vehicle list format"
            raise ProtocolError(msg)

        vehicles = []
        for entry in entries:
            _LOGGER.debug("Got vehicle %s", entry)
            if "vehicleId" not in entry:
                msg = "Vehicle list entry without vehicle id"
                raise ProtocolError(msg)
            response = await self.connection.get(
                endpoints.vehicle_profile.format(vehicle_id=entry["vehicleId"]),
            )
            profile = response.get("resMsg", {}) if isinstance(response, dict) else {}
            record = VehicleRecord.from_api(entry, profile)
            vehicles.append(BluelinkVehicle(self.connection, record))
            _LOGGER.debug("Added vehicle %s", record.id)

        self.vehicles = vehicles

    async def get_vehicles(self) -> list[BluelinkVehicle]:
        """Retrieve the vehicles bound to the account, rebuilding the list."""
        _LOGGER.debug("Retrieving vehicle list")
        await self._init_vehicles()
        return self.vehicles

    async def get_vehicle(self, vehicle_id: str) -> BluelinkVehicle | None:
        """Retrieve a vehicle by id or VIN."""
        if len(self.vehicles) == 0:
            await self._init_vehicles()
        filtered = [v for v in self.vehicles if vehicle_id in (v.id, v.vin)]
        if len(filtered) > 0:
            return filtered[0]
        return None
