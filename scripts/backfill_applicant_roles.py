"""Grant the applicant role to application owners that are missing it.

One-time repair for data created before the role was granted on apply.
Every grant is logged and journaled in ``admin_actions``.
"""

from __future__ import annotations

import argparse
import asyncio
import logging

from app.core.config import get_settings
from app.core.database import SessionLocal, close_engine
from app.modules.admin.repository import AdminRepository
from app.modules.identity.repository import IdentityRepository
from app.modules.identity.service import RoleService
from app.modules.teachers.repository import TeacherApplicationRepository
from app.modules.teachers.roles import ApplicantRoleBackfill, TeacherRoleManager

logger = logging.getLogger("scripts.backfill_applicant_roles")


async def _run_backfill(*, dry_run: bool) -> int:
    async with SessionLocal() as session:
        try:
            job = ApplicantRoleBackfill(
                application_repository=TeacherApplicationRepository(session),
                role_manager=TeacherRoleManager(RoleService(IdentityRepository(session))),
                admin_repository=AdminRepository(session),
            )
            owners = await job.run(dry_run=dry_run)
            if dry_run:
                await session.rollback()
            else:
                await session.commit()
        except Exception:
            await session.rollback()
            raise
    return len(owners)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Grant teacher_applicant to application owners holding neither applicant nor teacher role.",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Only report affected owners, write nothing.",
    )
    return parser


def main() -> int:
    args = _build_parser().parse_args()
    settings = get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    try:
        count = asyncio.run(_run_backfill(dry_run=args.dry_run))
    except Exception:
        logger.exception("Applicant role backfill failed")
        return 1
    finally:
        asyncio.run(close_engine())

    verb = "would be granted" if args.dry_run else "granted"
    print(f"Applicant role backfill completed: {count} role(s) {verb}.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
