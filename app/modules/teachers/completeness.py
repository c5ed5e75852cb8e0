"""Pre-submission check on an application's credential collections."""

from __future__ import annotations

from collections.abc import Mapping

from app.core.enums import CredentialKindEnum
from app.modules.teachers.credentials import CREDENTIAL_SPECS
from app.modules.teachers.repository import CredentialRepository

CHECK_ORDER = (
    CredentialKindEnum.WORK_EXPERIENCE,
    CredentialKindEnum.LEARNING_EXPERIENCE,
    CredentialKindEnum.CERTIFICATE,
)


class CompletenessGate:
    """Lists the credential categories an application still lacks.

    Work experience needs any row; learning experience and certificates
    need a row with a supporting document.
    """

    def __init__(self, repositories: Mapping[CredentialKindEnum, CredentialRepository]) -> None:
        self.repositories = repositories

    async def check(self, application_id: int) -> list[str]:
        missing: list[str] = []
        for kind in CHECK_ORDER:
            spec = CREDENTIAL_SPECS[kind]
            count = await self.repositories[kind].count_for_application(
                application_id,
                with_document=spec.document_required_for_submission,
            )
            if count == 0:
                missing.append(kind.value)
        return missing
