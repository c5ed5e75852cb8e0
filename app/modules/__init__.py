"""Domain modules package."""

from app.modules.admin import models as admin_models  # noqa: F401
from app.modules.identity import models as identity_models  # noqa: F401
from app.modules.taxonomy import models as taxonomy_models  # noqa: F401
from app.modules.teachers import models as teachers_models  # noqa: F401
