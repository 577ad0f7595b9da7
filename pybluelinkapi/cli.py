#!/usr/bin/python

"""Command line interface for Bluelink API functions."""

import argparse
import asyncio
import configparser
import logging
import sys
from getpass import getpass
from pathlib import Path

from rich.console import Console

from pybluelinkapi.account import BluelinkAccount
from pybluelinkapi.connection import Connection
from pybluelinkapi.exceptions import BluelinkExceptionError
from pybluelinkapi.push import GcmPushRegistrar, PushRegistrar, StaticPushRegistrar

console = Console()
printc = console.print

logging.basicConfig()
logging.root.setLevel(logging.WARNING)

_LOGGER = logging.getLogger(__name__)


async def vehicles(account, _args):
    """List vehicles bound to the account."""
    return [vehicle.get_data() for vehicle in await account.get_vehicles()]


async def token(account, _args):
    """Show the session after logging in."""
    return account.session.as_dict()


async def pin(account, args):
    """Obtain a control token with the PIN."""
    await account.connection.enter_pin(args.pin)
    return account.session.as_dict()


def push_registrar(push_token: str | None) -> PushRegistrar:
    """Use the configured push token, registering with GCM when there is none."""
    if push_token:
        return StaticPushRegistrar(push_token)
    return GcmPushRegistrar()


commands = {
    "list": vehicles,
    "token": token,
    "pin": pin,
}


async def main(args):
    """Get arguments from parser and run command."""
    if args.debug:
        logging.root.setLevel(logging.DEBUG)

    username = args.username or input("Please enter Bluelink username: ")
    password = args.password or getpass()

    connection = Connection(
        username,
        password,
        pin=args.pin,
        push_registrar=push_registrar(args.push_token),
    )
    account = BluelinkAccount(connection=connection)

    try:
        await connection.login()
        response = await commands[args.command](account, args)
    except BluelinkExceptionError as e:
        sys.exit(str(e))
    else:
        printc(response)
    finally:
        await connection.close()


def cli():
    """Get configuration parameters and command line arguments and run main loop."""
    config = configparser.ConfigParser()
    config["bluelink"] = {
        "username": "",
        "password": "",
        "pin": "",
        "push_token": "",
    }
    config.read([".bluelink.cfg", Path("~/.bluelink.cfg").expanduser()])
    parser = argparse.ArgumentParser(description="Bluelink CLI")
    subparsers = parser.add_subparsers(help="command help", dest="command")

    parser.add_argument("-d", "--debug", dest="debug", action="store_true")
    parser.add_argument(
        "-u",
        "--username",
        dest="username",
        default=config.get("bluelink", "username"),
    )
    parser.add_argument(
        "-p",
        "--password",
        dest="password",
        default=config.get("bluelink", "password"),
    )
    parser.add_argument(
        "-n",
        "--pin",
        dest="pin",
        default=config.get("bluelink", "pin") or None,
    )
    parser.add_argument(
        "-t",
        "--pushtoken",
        dest="push_token",
        default=config.get("bluelink", "push_token"),
        help="Push token obtained beforehand, a new GCM registration is made when omitted",
    )

    subparsers.add_parser("list", help="List vehicles")
    subparsers.add_parser("token", help="Log in and show the session")
    subparsers.add_parser("pin", help="Log in and obtain a control token")

    args = parser.parse_args()

    if args.command:
        asyncio.run(main(args))
    else:
        parser.print_help(sys.stderr)
