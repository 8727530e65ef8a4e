"""Tollgate CLI application using Typer.

This module provides command-line utilities for operating the
authentication service: secret generation, schema creation, session
cleanup and user role administration.
"""

import asyncio
import secrets

import typer
from rich.console import Console
from rich.table import Table

from tollgate.presentation.api.dependencies import (
    create_tables,
    get_engine,
    get_session_maker,
)
from tollgate_auth.persistence.sqlalchemy import SessionRepositorySQLAlchemy
from tollgate_identity.domain.user import UserRole
from tollgate_identity.infrastructure.persistence.sqlalchemy import (
    UserRepositorySQLAlchemy,
)

app = typer.Typer(
    name="tollgate",
    help="Tollgate - authentication and session core CLI",
    no_args_is_help=True,
)
console = Console()


secrets_app = typer.Typer(
    name="secrets",
    help="Secret generation utilities",
    no_args_is_help=True,
)
db_app = typer.Typer(
    name="db",
    help="Database schema management",
    no_args_is_help=True,
)
sessions_app = typer.Typer(
    name="sessions",
    help="Session maintenance",
    no_args_is_help=True,
)
users_app = typer.Typer(
    name="users",
    help="User administration",
    no_args_is_help=True,
)
app.add_typer(secrets_app)
app.add_typer(db_app)
app.add_typer(sessions_app)
app.add_typer(users_app)


@secrets_app.command("generate")
def generate_secrets() -> None:
    """Generate secure secrets for Tollgate configuration.

    Copy the output to your .env file.
    """
    console.print("\n[bold green]Tollgate Secret Generation[/bold green]")
    console.print("=" * 60)
    console.print(
        "\nGenerated secrets for your [bold].env[/bold] configuration file:\n"
    )

    # 64 bytes of entropy for HS256/384/512
    jwt_secret = secrets.token_urlsafe(64)
    console.print(f"[cyan]JWT_SECRET_KEY[/cyan]={jwt_secret}")

    db_password = secrets.token_urlsafe(32)
    console.print(f"[cyan]POSTGRES_PASSWORD[/cyan]={db_password}")

    console.print("\n" + "=" * 60)
    console.print(
        "[yellow]Keep these secrets secure and never commit them "
        "to version control![/yellow]"
    )
    console.print(
        "[dim]When rotating, move the old JWT_SECRET_KEY to "
        "JWT_PREVIOUS_SECRET_KEYS so issued tokens keep working.[/dim]\n"
    )


async def _create_tables() -> None:
    try:
        await create_tables()
    finally:
        await get_engine().dispose()


@db_app.command("create-tables")
def create_tables_command() -> None:
    """Create missing tables in the configured database."""
    console.print("Creating missing tables...")
    asyncio.run(_create_tables())
    console.print("[green]Database schema is up to date.[/green]")


async def _purge_expired_sessions() -> int:
    try:
        async with get_session_maker()() as session:
            removed = await SessionRepositorySQLAlchemy(session).purge_expired()
            await session.commit()
            return removed
    finally:
        await get_engine().dispose()


@sessions_app.command("purge")
def purge_sessions() -> None:
    """Delete every expired session from the configured database."""
    removed = asyncio.run(_purge_expired_sessions())

    table = Table(title="Session cleanup")
    table.add_column("Action")
    table.add_column("Sessions", justify="right")
    table.add_row("Expired sessions deleted", str(removed))
    console.print(table)


async def _set_role(email: str, role: UserRole) -> str | None:
    try:
        async with get_session_maker()() as session:
            users = UserRepositorySQLAlchemy(session)
            user = await users.find_by_email(email)
            if user is None:
                return None
            user.change_role(role)
            await users.save(user)
            await session.commit()
            return user.id
    finally:
        await get_engine().dispose()


@users_app.command("set-role")
def set_role(email: str, role: UserRole) -> None:
    """Change the role of the user with the given email.

    Access tokens already issued keep the old role until they expire.
    The next refresh picks up the new one.
    """
    user_id = asyncio.run(_set_role(email, role))
    if user_id is None:
        console.print(f"[red]No user with email {email}[/red]")
        raise typer.Exit(1)
    console.print(f"[green]{user_id} is now {role.value}[/green]")


def cli() -> None:
    """Entry point for the CLI application."""
    app()


if __name__ == "__main__":
    cli()
