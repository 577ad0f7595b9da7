"""Example code for using the pybluelinkapi library."""

import asyncio
import contextlib
import logging
from sys import argv

from pybluelinkapi.account import BluelinkAccount
from pybluelinkapi.connection import Connection
from pybluelinkapi.push import StaticPushRegistrar

logging.basicConfig()

# Invoke like this: python ./examples/example.py <username> <password> <pin> <push token>
# The push token has to be obtained from the push notification provider
# beforehand, the API wants a registered device before it hands out tokens.

logging.root.setLevel(logging.DEBUG)

username = argv[1]
password = argv[2]
pin = argv[3]
push_token = argv[4]


async def vehicles() -> None:
    """Log in, enter the PIN and print out vehicle id, vin and model year."""
    conn = Connection(
        username,
        password,
        pin=pin,
        push_registrar=StaticPushRegistrar(push_token),
    )
    account = BluelinkAccount(connection=conn)

    await conn.login()
    await conn.enter_pin()

    vehicles = await account.get_vehicles()
    for vehicle in vehicles:
        print(
            f"Id: {vehicle.id}, VIN: {vehicle.vin}, Name: {vehicle.name}, Year: {vehicle.generation}",
        )

    await conn.close()


if __name__ == "__main__":
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    with contextlib.suppress(KeyboardInterrupt):
        loop.run_until_complete(vehicles())
