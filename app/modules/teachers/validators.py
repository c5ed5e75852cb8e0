"""Entry checks for the teacher onboarding workflow."""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence
from uuid import UUID

from app.core.enums import AccountStatusEnum, RoleEnum
from app.modules.identity.models import User
from app.modules.identity.repository import IdentityRepository
from app.modules.taxonomy.repository import TaxonomyRepository
from app.modules.teachers.exceptions import (
    AccountInactive,
    DuplicateSecondary,
    InvalidCategory,
    InvalidSecondaryCount,
    RoleForbidden,
    SecondaryNotInPrimary,
    UserNotFound,
)


class EligibilityValidator:
    """Confirms a user may start a teacher application."""

    def __init__(self, identity_repository: IdentityRepository) -> None:
        self.identity_repository = identity_repository

    async def validate(self, user_id: UUID) -> User:
        user = await self.identity_repository.get_user_by_id(user_id)
        if user is None:
            raise UserNotFound(user_id)
        if RoleEnum.STUDENT not in user.active_roles:
            raise RoleForbidden(RoleEnum.STUDENT.value)
        if user.account_status != AccountStatusEnum.ACTIVE:
            raise AccountInactive(str(user.account_status))
        return user


class TaxonomyValidator:
    """Checks a main category and its sub category selection.

    Sub categories are resolved in one query; a partial match fails the
    whole selection.
    """

    def __init__(self, taxonomy_repository: TaxonomyRepository, max_sub_categories: int = 3) -> None:
        self.taxonomy_repository = taxonomy_repository
        self.max_sub_categories = max_sub_categories

    async def validate(self, main_category_id: int, sub_category_ids: Sequence[int]) -> None:
        main_category = await self.taxonomy_repository.get_active_main_category(main_category_id)
        if main_category is None:
            raise InvalidCategory(main_category_id)

        count = len(sub_category_ids)
        if count < 1 or count > self.max_sub_categories:
            raise InvalidSecondaryCount(count, self.max_sub_categories)

        duplicates = [value for value, seen in Counter(sub_category_ids).items() if seen > 1]
        if duplicates:
            raise DuplicateSecondary(duplicates)

        found = await self.taxonomy_repository.list_active_sub_categories(sub_category_ids, main_category_id)
        resolved = {sub.id for sub in found}
        unresolved = [value for value in sub_category_ids if value not in resolved]
        if unresolved:
            raise SecondaryNotInPrimary(main_category_id, unresolved)
