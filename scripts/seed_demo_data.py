#!/usr/bin/env python3
"""
Seed the database with demo data for a video production agency.

Clients, their projects, tasks and team members, so the file manager and
dashboard have something meaningful to show. Attachments are not seeded:
upload them through the API so real files exist in storage.

Usage:
    python scripts/seed_demo_data.py --dry-run   # no writes
    python scripts/seed_demo_data.py --confirm   # write to DB

Requires: migrations applied (alembic upgrade head), DB reachable.
"""

import asyncio
import sys
from pathlib import Path

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.config import settings
from src.core.database.session import async_session
from src.modules.clients.models import Client
from src.modules.projects.models import Project, ProjectStatus
from src.modules.tasks.models import Task
from src.modules.users.models import User

USERS = [
    ("Ana Souza", "ana@studio.local", "admin"),
    ("Bruno Lima", "bruno@studio.local", "editor"),
    ("Carla Mendes", "carla@studio.local", "producer"),
]

# client name -> list of (project name, status, [task titles])
CLIENTS = {
    "Acme Bebidas": [
        ("Campanha Verão", ProjectStatus.PRODUCTION, ["Roteiro", "Diária de gravação", "Trilha"]),
        ("Institucional 2026", ProjectStatus.PROPOSAL, ["Briefing"]),
    ],
    "Orion Seguros": [
        ("Vídeo Treinamento", ProjectStatus.POST_PRODUCTION, ["Edição", "Color", "Legendas"]),
    ],
    "Casa Nobre": [],
}


async def seed_users(session: AsyncSession) -> None:
    count = (await session.execute(select(func.count(User.id)))).scalar_one()
    if count:
        print("  Users already exist, skip.")
        return
    for name, email, role in USERS:
        session.add(User(name=name, email=email, role=role, is_active=True))
    await session.flush()
    print(f"  Created {len(USERS)} users.")


async def seed_clients_projects_tasks(session: AsyncSession) -> None:
    count = (await session.execute(select(func.count(Client.id)))).scalar_one()
    if count:
        print("  Clients already exist, skip.")
        return

    projects_created = tasks_created = 0
    for client_name, projects in CLIENTS.items():
        client = Client(name=client_name, active=True)
        session.add(client)
        await session.flush()
        for project_name, status, task_titles in projects:
            project = Project(name=project_name, client_id=client.id, status=status.value)
            session.add(project)
            await session.flush()
            projects_created += 1
            for title in task_titles:
                session.add(Task(title=title, project_id=project.id, priority="medium", completed=False))
                tasks_created += 1
    await session.flush()
    print(f"  Created {len(CLIENTS)} clients, {projects_created} projects, {tasks_created} tasks.")


async def run_seed(session: AsyncSession, dry_run: bool) -> None:
    await seed_users(session)
    await seed_clients_projects_tasks(session)

    if dry_run:
        await session.rollback()
        print("\n[DRY-RUN] Rolled back, no data written.")
    else:
        await session.commit()
        print("\nSeed completed successfully.")


async def main() -> None:
    import argparse
    parser = argparse.ArgumentParser(description="Seed database with production dashboard demo data")
    parser.add_argument("--dry-run", action="store_true", help="Do not commit")
    parser.add_argument("--confirm", action="store_true", help="Commit changes")
    args = parser.parse_args()
    if not args.dry_run and not args.confirm:
        print("Use --dry-run or --confirm")
        sys.exit(1)

    print("Database:", settings.database_url.split("@")[-1] if "@" in settings.database_url else "?")
    print("Mode:", "DRY-RUN" if args.dry_run else "CONFIRM")
    async with async_session() as session:
        await run_seed(session, dry_run=args.dry_run)
    print("Done.")


if __name__ == "__main__":
    asyncio.run(main())
