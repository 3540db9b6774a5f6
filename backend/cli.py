"""
QR Dine CLI.

Command-line interface for common operations:

    qrdine db-init
    qrdine db-seed
    qrdine create-super-admin admin@example.com
    qrdine permissions
"""

import sys
import time

import httpx
import typer
from rich.console import Console
from rich.table import Table
from sqlalchemy.exc import SQLAlchemyError

from shared.config.constants import ORDER_TRANSITIONS, ROLE_PERMISSIONS, Role
from shared.config.settings import settings

app = typer.Typer(
    name="qrdine",
    help="QR Dine restaurant ordering CLI",
    add_completion=False,
)
console = Console()


# =============================================================================
# Database Commands
# =============================================================================

@app.command()
def db_init():
    """Create all database tables."""
    from shared.infrastructure.db import engine
    from rest_api.models import Base

    console.print(f"[blue]Creating tables on: {_masked_url(settings.database_url)}[/blue]")
    try:
        Base.metadata.create_all(bind=engine)
    except SQLAlchemyError as e:
        console.print(f"[red]✗ Table creation failed: {e}[/red]")
        raise typer.Exit(1)
    console.print("[green]✓ Tables created/verified[/green]")


@app.command()
def db_seed(
    force: bool = typer.Option(False, "--force", "-f", help="Allow seeding outside development"),
):
    """Seed database with demo restaurant, menu, tables and staff."""
    from shared.infrastructure.db import SessionLocal, engine
    from rest_api.models import Base
    from rest_api.seed import seed

    console.print(f"[blue]Seeding database for: {settings.environment}[/blue]")

    if settings.environment == "production" and not force:
        console.print("[red]Cannot seed production without --force[/red]")
        raise typer.Exit(1)

    try:
        Base.metadata.create_all(bind=engine)
        with SessionLocal() as db:
            seed(db)
    except SQLAlchemyError as e:
        console.print(f"[red]✗ Seeding failed: {e}[/red]")
        raise typer.Exit(1)
    console.print("[green]✓ Seeding complete[/green]")


@app.command()
def create_super_admin(
    email: str = typer.Argument(..., help="Login email"),
    password: str = typer.Option(
        ..., prompt=True, hide_input=True, confirmation_prompt=True, help="Login password"
    ),
    name: str = typer.Option("Super Admin", help="Display name"),
):
    """Create a platform super administrator."""
    from shared.infrastructure.db import SessionLocal
    from rest_api.seed import ensure_super_admin

    if len(password) < 8:
        console.print("[red]Password must be at least 8 characters[/red]")
        raise typer.Exit(1)

    try:
        with SessionLocal() as db:
            user = ensure_super_admin(db, email=email, password=password, name=name)
            db.commit()
            user_id, role = user.id, user.role
    except SQLAlchemyError as e:
        console.print(f"[red]✗ Could not create user: {e}[/red]")
        raise typer.Exit(1)

    if role != Role.SUPER_ADMIN.value:
        console.print(f"[yellow]{email} already exists with role {role}[/yellow]")
        raise typer.Exit(1)
    console.print(f"[green]✓ Super admin ready (id={user_id})[/green]")


# =============================================================================
# Inspection Commands
# =============================================================================

@app.command()
def check_config():
    """Validate settings for the current environment."""
    table = Table(title="Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Environment", settings.environment)
    table.add_row("Database", _masked_url(settings.database_url))
    table.add_row("Public base URL", settings.public_base_url)
    table.add_row("Sign-in URL", settings.sign_in_url)
    table.add_row("Tax rate", str(settings.tax_rate))
    table.add_row("Delivery fee", str(settings.delivery_fee))
    table.add_row("Login rate limit", settings.login_rate_limit)
    console.print(table)

    errors = settings.validate_production_secrets()
    if not errors:
        console.print("[green]✓ Configuration OK[/green]")
        return
    for error in errors:
        console.print(f"[yellow]! {error}[/yellow]")
    if settings.environment == "production":
        raise typer.Exit(1)


@app.command()
def permissions():
    """Show the role capability table and the order lifecycle."""
    table = Table(title="Role Capabilities")
    table.add_column("Role", style="cyan")
    table.add_column("Capabilities", style="green")
    for role in Role:
        table.add_row(role.value, ", ".join(sorted(ROLE_PERMISSIONS.get(role, frozenset()))))
    console.print(table)

    lifecycle = Table(title="Order Status Transitions")
    lifecycle.add_column("From", style="cyan")
    lifecycle.add_column("To", style="green")
    for current, successors in ORDER_TRANSITIONS.items():
        targets = ", ".join(sorted(s.value for s in successors)) or "-"
        lifecycle.add_row(current.value, targets)
    console.print(lifecycle)


@app.command()
def health(
    url: str = typer.Option(
        f"http://localhost:{settings.rest_api_port}/api/health", help="Health endpoint"
    ),
):
    """Check REST API health."""
    table = Table(title="Service Health")
    table.add_column("Service", style="cyan")
    table.add_column("Status", style="green")
    table.add_column("Response Time", style="yellow")

    start = time.perf_counter()
    try:
        response = httpx.get(url, timeout=5.0)
    except httpx.HTTPError as e:
        table.add_row("REST API", f"✗ {type(e).__name__}", "-")
        console.print(table)
        raise typer.Exit(1)
    elapsed = (time.perf_counter() - start) * 1000

    if response.status_code == 200:
        table.add_row("REST API", "✓ Healthy", f"{elapsed:.0f}ms")
    else:
        table.add_row("REST API", f"✗ Status {response.status_code}", f"{elapsed:.0f}ms")
    console.print(table)
    if response.status_code != 200:
        raise typer.Exit(1)


@app.command()
def version():
    """Show version information."""
    table = Table(title="QR Dine Version")
    table.add_column("Component", style="cyan")
    table.add_column("Version", style="green")

    table.add_row("API", "0.1.0")
    table.add_row("Python", sys.version.split()[0])

    console.print(table)


def _masked_url(url: str) -> str:
    """Hide the password part of a database URL."""
    scheme, sep, rest = url.partition("://")
    if not sep or "@" not in rest:
        return url
    credentials, _, host = rest.rpartition("@")
    user = credentials.split(":", 1)[0]
    return f"{scheme}://{user}:***@{host}"


if __name__ == "__main__":
    app()
