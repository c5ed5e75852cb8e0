"""Seed idempotent demo data for local/non-production environments."""

from __future__ import annotations

import argparse
import asyncio
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.database import SessionLocal, close_engine
from app.core.enums import AccountStatusEnum, RoleEnum
from app.core.security import hash_password, verify_password
from app.modules.identity.models import User
from app.modules.identity.repository import IdentityRepository
from app.modules.identity.service import RoleService
from app.modules.taxonomy.models import MainCategory, SubCategory

DEMO_PASSWORD = "DemoPass123!"

DEMO_ADMIN_EMAIL = "demo-admin@tutorly.dev"
DEMO_STUDENT_EMAIL = "demo-student@tutorly.dev"

DEMO_TAXONOMY: dict[str, tuple[str, ...]] = {
    "Music": ("Guitar", "Piano", "Vocals", "Music theory"),
    "Languages": ("English", "Spanish", "German", "Japanese"),
    "Programming": ("Python", "Web development", "Data analysis"),
}


@dataclass(slots=True)
class SeedStats:
    main_categories_created: int = 0
    sub_categories_created: int = 0
    users_created: int = 0
    users_updated: int = 0
    roles_granted: int = 0


async def _ensure_taxonomy(session: AsyncSession, stats: SeedStats) -> None:
    for main_order, (main_name, sub_names) in enumerate(DEMO_TAXONOMY.items()):
        main = await session.scalar(select(MainCategory).where(MainCategory.name == main_name))
        if main is None:
            main = MainCategory(name=main_name, display_order=main_order, is_active=True)
            session.add(main)
            await session.flush()
            stats.main_categories_created += 1

        for sub_order, sub_name in enumerate(sub_names):
            existing = await session.scalar(
                select(SubCategory).where(
                    SubCategory.main_category_id == main.id,
                    SubCategory.name == sub_name,
                ),
            )
            if existing is None:
                session.add(
                    SubCategory(
                        main_category_id=main.id,
                        name=sub_name,
                        display_order=sub_order,
                        is_active=True,
                    ),
                )
                stats.sub_categories_created += 1
    await session.flush()


async def _ensure_user(
    session: AsyncSession,
    *,
    email: str,
    roles: tuple[RoleEnum, ...],
    timezone: str,
    stats: SeedStats,
) -> User:
    user = await session.scalar(select(User).where(User.email == email))
    if user is None:
        user = User(
            email=email,
            password_hash=hash_password(DEMO_PASSWORD),
            timezone=timezone,
            account_status=AccountStatusEnum.ACTIVE,
        )
        session.add(user)
        stats.users_created += 1
    else:
        if not verify_password(DEMO_PASSWORD, user.password_hash):
            user.password_hash = hash_password(DEMO_PASSWORD)
        if user.timezone != timezone:
            user.timezone = timezone
        if user.account_status != AccountStatusEnum.ACTIVE:
            user.account_status = AccountStatusEnum.ACTIVE
        stats.users_updated += 1
    await session.flush()

    role_service = RoleService(IdentityRepository(session))
    for role in roles:
        if await role_service.add_role(user.id, role):
            stats.roles_granted += 1
    return user


async def _run_seed(*, allow_production: bool) -> SeedStats:
    settings = get_settings()
    app_env = settings.app_env.strip().lower()
    if app_env in {"production", "prod"} and not allow_production:
        raise RuntimeError(
            "Refusing to seed demo data in production. "
            "Re-run with --allow-production only if you are absolutely sure.",
        )

    stats = SeedStats()

    async with SessionLocal() as session:
        try:
            await _ensure_taxonomy(session, stats)
            await _ensure_user(
                session,
                email=DEMO_ADMIN_EMAIL,
                roles=(RoleEnum.STUDENT, RoleEnum.ADMIN),
                timezone="UTC",
                stats=stats,
            )
            await _ensure_user(
                session,
                email=DEMO_STUDENT_EMAIL,
                roles=(RoleEnum.STUDENT,),
                timezone="UTC",
                stats=stats,
            )
            await session.commit()
        except Exception:
            await session.rollback()
            raise

    return stats


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Seed idempotent demo data for Tutorly (category taxonomy, admin and student users).",
    )
    parser.add_argument(
        "--allow-production",
        action="store_true",
        help="Allow seeding even when APP_ENV is production/prod.",
    )
    return parser


def _print_summary(stats: SeedStats) -> None:
    print("Demo seed completed.")
    print(f"- Main categories created: {stats.main_categories_created}")
    print(f"- Sub categories created: {stats.sub_categories_created}")
    print(f"- Users created: {stats.users_created}")
    print(f"- Users updated: {stats.users_updated}")
    print(f"- Roles granted: {stats.roles_granted}")
    print("")
    print("Demo credentials (non-production only):")
    print(f"- admin:   {DEMO_ADMIN_EMAIL} / {DEMO_PASSWORD}")
    print(f"- student: {DEMO_STUDENT_EMAIL} / {DEMO_PASSWORD}")


def main() -> int:
    parser = _build_parser()
    args = parser.parse_args()

    try:
        stats = asyncio.run(_run_seed(allow_production=args.allow_production))
    except Exception as exc:
        print(f"Demo seed failed: {exc}")
        return 1
    finally:
        asyncio.run(close_engine())

    _print_summary(stats)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
