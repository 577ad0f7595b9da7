"""Library to integrate with the Hyundai Bluelink Europe API.

This library provides a Python interface to the Bluelink Europe API: it logs
in, obtains the PIN protected control token needed by vehicle commands,
registers the client for push notifications and lists the vehicles bound to
the account.

NOTE: This work is not officially supported by Hyundai and functionality
can stop working at any time without warning.

"""

from .account import BluelinkAccount
from .connection import Connection
from .push import GcmPushRegistrar, PushRegistrar, StaticPushRegistrar
from .session import Session, generate_device_id
from .vehicle import BluelinkVehicle, VehicleRecord

__all__ = [
    "BluelinkAccount",
    "BluelinkVehicle",
    "Connection",
    "GcmPushRegistrar",
    "PushRegistrar",
    "Session",
    "StaticPushRegistrar",
    "VehicleRecord",
    "generate_device_id",
]
