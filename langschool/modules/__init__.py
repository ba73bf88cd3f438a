"""Domain modules package."""

from langschool.modules.audit import models as audit_models  # noqa: F401
from langschool.modules.courses import models as courses_models  # noqa: F401
from langschool.modules.enrollments import models as enrollments_models  # noqa: F401
from langschool.modules.gallery import models as gallery_models  # noqa: F401
from langschool.modules.scheduling import models as scheduling_models  # noqa: F401
from langschool.modules.timetable import models as timetable_models  # noqa: F401
from langschool.modules.users import models as users_models  # noqa: F401
