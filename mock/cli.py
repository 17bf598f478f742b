#!/usr/bin/env python3
"""Mock FigureHub CLI client.

Drives the account security page against a running backend. The backend
address comes from FIGUREHUB_API_URL.
"""
import argparse
import asyncio
import json
import sys

from config.log_config import configure_logging
from core.api.base import (make_api_request, process_api_response,
                           raise_for_rejection)
from core.api.favorites import FavoritesApi
from core.components import (AccountSession, FavoriteToggle, FormController,
                             SecurityPage)
from core.error.exceptions import (AccountException, RemoteRejection,
                                   TransportFailure)
from core.messaging.service import (CollectingNotificationSink,
                                    LoggingNotificationSink)
from core.state.credential_store import CredentialStore

LOGIN_URL = "auth/login"


def login(email: str, password: str) -> str:
    """Exchange email and password for a session credential."""
    action = "login"
    response = make_api_request(
        url=LOGIN_URL,
        action=action,
        payload={"email": email, "password": password},
        authenticated=False
    )
    raise_for_rejection(response, action)
    data = process_api_response(response, action) or {}
    token = data.get("token")
    if not token:
        raise TransportFailure(message="Login response has no token", action=action)
    return token


async def open_session(args: argparse.Namespace) -> CredentialStore:
    """Sign in with the given token or login details."""
    store = CredentialStore()
    token = args.token or login(args.email, args.password)

    session = AccountSession(store)
    if not await session.sign_in(token, local_favorites=args.local_favorites):
        print("Sign-in refused by backend")
        sys.exit(1)
    return store


async def submit_form(form: FormController, values: dict, sink: CollectingNotificationSink) -> None:
    """Fill a form and submit it once."""
    form.open()
    for name, value in values.items():
        form.set_field(name, value)

    state = await form.submit()

    if sink.latest:
        print(f"[{sink.latest.severity.value}] {sink.latest.message}")
    elif state.error_message:
        print(f"[error] {state.error_message}")


async def show_status(args: argparse.Namespace) -> None:
    store = await open_session(args)
    page = SecurityPage(store)
    print(json.dumps(page.snapshot(), indent=2))


async def change_password(args: argparse.Namespace) -> None:
    store = await open_session(args)
    sink = CollectingNotificationSink(forward_to=LoggingNotificationSink())
    page = SecurityPage(store, notifications=sink)

    await submit_form(page.password_form, {
        "currentPassword": args.current,
        "newPassword": args.new,
        "confirmPassword": args.confirm if args.confirm is not None else args.new,
    }, sink)


async def change_email(args: argparse.Namespace) -> None:
    store = await open_session(args)
    sink = CollectingNotificationSink(forward_to=LoggingNotificationSink())
    page = SecurityPage(store, notifications=sink)

    await submit_form(page.email_form, {
        "newEmail": args.new_email,
        "currentPassword": args.current,
    }, sink)
    print(f"Email on record: {store.current_profile().email}")


async def toggle_favorite(args: argparse.Namespace) -> None:
    store = await open_session(args)
    toggle = FavoriteToggle(args.character_id, store, FavoritesApi(store))
    await toggle.refresh()
    print(f"Before: {toggle.label}")
    await toggle.toggle()
    print(f"After: {toggle.label}")


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Mock FigureHub CLI client")
    parser.add_argument("--email", default="collector@figurehub.com", help="Login email")
    parser.add_argument("--password", default="figures1", help="Login password")
    parser.add_argument("--token", help="Use an existing session credential instead of logging in")
    parser.add_argument(
        "--local-favorites",
        type=int,
        nargs="*",
        default=[],
        help="Favorites collected while signed out, merged on sign-in"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("status", help="Show the security page")

    password_parser = subparsers.add_parser("change-password", help="Change the account password")
    password_parser.add_argument("--current", required=True, help="Current password")
    password_parser.add_argument("--new", required=True, help="New password")
    password_parser.add_argument("--confirm", help="Confirmation (defaults to --new)")

    email_parser = subparsers.add_parser("change-email", help="Change the account email")
    email_parser.add_argument("new_email", help="New email address")
    email_parser.add_argument("--current", required=True, help="Current password")

    favorite_parser = subparsers.add_parser("favorite", help="Toggle a character favorite")
    favorite_parser.add_argument("character_id", type=int, help="Character id")

    args = parser.parse_args()
    configure_logging()

    commands = {
        "status": show_status,
        "change-password": change_password,
        "change-email": change_email,
        "favorite": toggle_favorite,
    }

    try:
        asyncio.run(commands[args.command](args))
    except RemoteRejection as e:
        print(f"Rejected ({e.status_code}): {e.message or 'no reason given'}")
        sys.exit(1)
    except AccountException as e:
        print(f"Error: {e.message}")
        sys.exit(1)


if __name__ == "__main__":
    main()
