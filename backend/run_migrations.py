#!/usr/bin/env python3
"""
Database migration runner for Supabase.

Connects directly to the Supabase PostgreSQL database and applies the
SQL files in migrations/ in name order, recording each one with a
checksum so it only runs once.

Usage:
    python run_migrations.py             # Apply pending migrations
    python run_migrations.py --status    # Show migration status
    python run_migrations.py --dry-run   # Show what would run

Configuration:
    Set SUPABASE_DB_URL in your .env file (Supabase Dashboard →
    Settings → Database → Connection string → URI).
"""

import argparse
import hashlib
import sys
from pathlib import Path
from typing import NamedTuple

import psycopg2
from psycopg2 import sql
from rich.console import Console
from rich.table import Table

from shared.config import get_settings

console = Console()

MIGRATIONS_DIR = Path(__file__).parent / "migrations"
MIGRATIONS_TABLE = "_migrations"


class Migration(NamedTuple):
    name: str
    path: Path
    checksum: str


def file_checksum(path: Path) -> str:
    return hashlib.sha256(path.read_bytes()).hexdigest()[:16]


def discover_migrations(directory: Path = MIGRATIONS_DIR) -> list[Migration]:
    """List migration files in the order they must run."""
    if not directory.exists():
        console.print(f"[yellow]Warning:[/yellow] Migrations directory not found: {directory}")
        return []
    return [
        Migration(path.name, path, file_checksum(path))
        for path in sorted(directory.glob("*.sql"))
    ]


def get_db_connection():
    """Get a connection to the Supabase PostgreSQL database."""
    settings = get_settings()

    if not settings.supabase_db_url:
        console.print("[red]Error:[/red] SUPABASE_DB_URL is not set.")
        sys.exit(1)

    try:
        return psycopg2.connect(settings.supabase_db_url)
    except psycopg2.Error as e:
        console.print(f"[red]Database connection failed:[/red] {e}")
        sys.exit(1)


def ensure_migrations_table(conn) -> None:
    """Create the migrations tracking table if it doesn't exist."""
    with conn.cursor() as cur:
        cur.execute(
            sql.SQL(
                """
                CREATE TABLE IF NOT EXISTS {} (
                    id SERIAL PRIMARY KEY,
                    name VARCHAR(255) NOT NULL UNIQUE,
                    checksum VARCHAR(64) NOT NULL,
                    applied_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
                )
                """
            ).format(sql.Identifier(MIGRATIONS_TABLE))
        )
    conn.commit()


def get_applied(conn) -> dict[str, tuple[str, object]]:
    """Map applied migration name to (checksum, applied_at)."""
    with conn.cursor() as cur:
        cur.execute(
            sql.SQL("SELECT name, checksum, applied_at FROM {} ORDER BY name").format(
                sql.Identifier(MIGRATIONS_TABLE)
            )
        )
        return {name: (checksum, applied_at) for name, checksum, applied_at in cur.fetchall()}


def pending_migrations(
    migrations: list[Migration],
    applied: dict[str, tuple[str, object]],
) -> list[Migration]:
    """Return migrations not yet applied, warning about edited ones."""
    pending = []
    for migration in migrations:
        if migration.name not in applied:
            pending.append(migration)
        elif applied[migration.name][0] != migration.checksum:
            console.print(
                f"[yellow]Warning:[/yellow] Migration {migration.name} has changed since it was applied!"
            )
    return pending


def apply_migration(conn, migration: Migration) -> None:
    """Run one migration and record it, in a single transaction."""
    console.print(f"[blue]Running:[/blue] {migration.name}...")
    try:
        with conn.cursor() as cur:
            cur.execute(migration.path.read_text())
            cur.execute(
                sql.SQL("INSERT INTO {} (name, checksum) VALUES (%s, %s)").format(
                    sql.Identifier(MIGRATIONS_TABLE)
                ),
                (migration.name, migration.checksum),
            )
        conn.commit()
    except psycopg2.Error as e:
        conn.rollback()
        console.print(f"[red]✗[/red] {migration.name} failed: {e}")
        raise
    console.print(f"[green]✓[/green] {migration.name} applied")


def show_status(migrations: list[Migration], applied: dict[str, tuple[str, object]]) -> None:
    table = Table(title="Migration Status")
    table.add_column("Migration", style="cyan")
    table.add_column("Status")
    table.add_column("Applied At")
    table.add_column("Checksum")

    for migration in migrations:
        if migration.name in applied:
            _, applied_at = applied[migration.name]
            when = applied_at.strftime("%Y-%m-%d %H:%M:%S") if applied_at else ""
            table.add_row(migration.name, "[green]Applied[/green]", when, migration.checksum)
        else:
            table.add_row(migration.name, "[yellow]Pending[/yellow]", "", migration.checksum)

    if migrations:
        console.print(table)
    else:
        console.print("[dim]No migrations found.[/dim]")


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Run Taskflow database migrations")
    parser.add_argument("--status", action="store_true", help="Show migration status only")
    parser.add_argument("--dry-run", action="store_true", help="List pending migrations without running them")
    args = parser.parse_args()

    console.print("[bold]Taskflow Database Migrations[/bold]\n")

    migrations = discover_migrations()
    conn = get_db_connection()
    try:
        ensure_migrations_table(conn)
        applied = get_applied(conn)

        if args.status:
            show_status(migrations, applied)
            return

        pending = pending_migrations(migrations, applied)
        if not pending:
            console.print("[green]All migrations are up to date![/green]")
            return

        for migration in pending:
            if args.dry_run:
                console.print(f"[cyan]Would run:[/cyan] {migration.name}")
            else:
                apply_migration(conn, migration)
    finally:
        conn.close()


if __name__ == "__main__":
    main()
