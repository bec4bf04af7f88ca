#!/usr/bin/env python3
from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from edutrack.core.config import settings

# -----------------------------------------------------------------------------
# Globals
# -----------------------------------------------------------------------------
console = Console()


def _run(fn: Callable[..., Awaitable[Any]], *args: Any, **kwargs: Any) -> Any:
    return asyncio.run(fn(*args, **kwargs))


async def _with_session(fn: Callable[..., Awaitable[Any]], *args: Any, **kwargs: Any) -> Any:
    from edutrack.db.session import create_all, get_engine, session_scope

    await create_all()
    try:
        async with session_scope() as db:
            return await fn(db, *args, **kwargs)
    finally:
        await get_engine().dispose()


def show_table(title: str, items: list[dict[str, Any]], columns: list[str]) -> None:
    t = Table(title=title, show_lines=False)
    for c in columns:
        t.add_column(c.replace("_", " ").title())
    for it in items:
        t.add_row(*[str(it.get(c, "")) for c in columns])
    console.print(t)


# -----------------------------------------------------------------------------
# Root group
# -----------------------------------------------------------------------------
@click.group(help=f"{settings.APP_NAME} command line")
def cli() -> None:
    pass


@cli.command("init-db", help="Create all tables in the configured database")
def init_db() -> None:
    from edutrack.seed import count_users

    users = _run(_with_session, count_users)
    console.print(f"[green]Tables ready[/] on {settings.DATABASE_URL} ({users} users)")


@cli.command("seed-users", help="Create the default admin, teacher and student logins")
def seed_users() -> None:
    from edutrack.seed import DEFAULT_USERS, seed_users as _seed_users

    rows = _run(_with_session, _seed_users)
    passwords = {u["email"]: u["password"] for u in DEFAULT_USERS}
    show_table(
        "Default users",
        [
            {"email": email, "role": role, "password": passwords[email],
             "status": "created" if created else "exists"}
            for email, role, created in rows
        ],
        ["email", "role", "password", "status"],
    )


@cli.command("seed-demo", help="Load demo subjects, teachers, students, classes and point rules")
def seed_demo() -> None:
    from edutrack.seed import seed_demo as _seed_demo

    counts = _run(_with_session, _seed_demo)
    show_table("Demo data created", [counts], list(counts))


@cli.command("calendar", help="Show Liberian holidays and cultural events for YEAR")
@click.argument("year", type=click.IntRange(1, 9999))
@click.option("--term", type=click.IntRange(1, 3), default=None, help="Only events inside this term")
def calendar_cmd(year: int, term: int | None) -> None:
    from edutrack.services import liberian_calendar as cal

    events = cal.generate_school_events(year)
    if term is not None:
        events = cal.events_in_term(events, term)
    t = Table(title=f"Liberian school calendar {year}")
    t.add_column("Date")
    t.add_column("Event")
    t.add_column("Category")
    t.add_column("Holiday")
    for ev in events:
        t.add_row(ev.date.isoformat(), ev.title, ev.category, "yes" if ev.is_national_holiday else "")
    console.print(t)

    if term is None:
        lines = [
            f"[bold]{tm.name}[/]: months {tm.start_month}-{tm.end_month}. {tm.description}"
            for tm in cal.LIBERIAN_ACADEMIC_TERMS
        ]
        console.print(Panel.fit("\n".join(lines), title="Academic terms"))


@cli.command("import-calendar", help="Store YEAR's Liberian calendar as school events")
@click.argument("year", type=click.IntRange(1, 9999))
def import_calendar(year: int) -> None:
    from edutrack.services.events import import_liberian_calendar

    created, updated = _run(_with_session, import_liberian_calendar, year)
    console.print(f"[green]Imported[/] {year}: {created} created, {updated} updated")


@cli.command("serve", help="Run the API with uvicorn")
@click.option("--host", default="127.0.0.1", show_default=True)
@click.option("--port", default=8081, show_default=True, type=int)
@click.option("--reload/--no-reload", default=False, show_default=True)
def serve(host: str, port: int, reload: bool) -> None:
    import uvicorn

    uvicorn.run("edutrack.main:app", host=host, port=port, reload=reload)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
