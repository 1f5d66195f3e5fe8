#!/usr/bin/env python3
"""
Create an admin account, or promote an existing one.

Usage:
    python create_admin.py admin@example.com --name "Site Admin"
    python create_admin.py existing@example.com            # promote

The password is prompted for unless --password is given. New accounts go
through the same validation as self-registration, so the script cannot
store an email or password the API would later refuse.
"""

import argparse
import getpass
import sys
from typing import Callable, Optional

from pydantic import EmailStr, TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from rich.console import Console

from modules.auth.exceptions import EmailAlreadyRegisteredError
from modules.auth.models import Account, RegisterRequest
from modules.auth.passwords import hash_password
from modules.auth.repository import AccountRepository
from shared.database import get_connection_manager
from shared.exceptions import ConfigurationError, DriveError

console = Console()

_email_adapter = TypeAdapter(EmailStr)


class AdminSetupError(Exception):
    """Input was rejected; the message is meant for the operator."""


def _describe(error: PydanticValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in e['loc']) or 'value'}: {e['msg']}" for e in error.errors()
    )


def validate_email(email: str) -> str:
    try:
        return _email_adapter.validate_python(email.strip())
    except PydanticValidationError as e:
        raise AdminSetupError(f"Invalid email address: {_describe(e)}") from e


def prompt_password() -> str:
    password = getpass.getpass("Password: ")
    if getpass.getpass("Repeat password: ") != password:
        raise AdminSetupError("Passwords do not match")
    return password


def ensure_admin(
    accounts: AccountRepository,
    email: str,
    name: str,
    password_source: Callable[[], str],
) -> tuple[Account, bool]:
    """
    Promote ``email`` to admin, creating the account if it does not exist.

    Returns the account and whether anything changed.

    Raises:
        AdminSetupError: If the email, name or password is not acceptable.
    """
    email = validate_email(email)

    existing = accounts.get_by_email(email)
    if existing is not None:
        if existing.role == "admin" and existing.is_active:
            return existing, False
        return accounts.update_role(existing.id, "admin"), True

    try:
        request = RegisterRequest(email=email, name=name, password=password_source())
    except PydanticValidationError as e:
        raise AdminSetupError(_describe(e)) from e

    account = accounts.create(
        request.email, request.name, hash_password(request.password), role="admin"
    )
    return account, True


def main(argv: Optional[list[str]] = None):
    parser = argparse.ArgumentParser(description="Create or promote a RelayDrive admin")
    parser.add_argument("email", help="Account email")
    parser.add_argument("--name", default="Administrator", help="Display name for a new account")
    parser.add_argument("--password", help="Password for a new account (prompted if omitted)")
    args = parser.parse_args(argv)

    try:
        validate_email(args.email)
        manager = get_connection_manager()
    except (AdminSetupError, ConfigurationError) as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)
    accounts = AccountRepository(manager.get_connection)

    try:
        account, changed = ensure_admin(
            accounts,
            args.email,
            args.name,
            (lambda: args.password) if args.password else prompt_password,
        )
    except AdminSetupError as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)
    except EmailAlreadyRegisteredError:
        console.print("[red]Error:[/red] The account was created concurrently; run again to promote it")
        sys.exit(1)
    except DriveError as e:
        console.print(f"[red]Error:[/red] {e.message}")
        sys.exit(1)
    finally:
        manager.disconnect()

    if not changed:
        console.print(f"[dim]{account.email} is already an admin.[/dim]")
    else:
        console.print(f"[green]✓[/green] {account.email} is now an admin ({account.id})")


if __name__ == "__main__":
    main()
