from autoapply.models.user import User
from autoapply.models.job_application import JobApplicationRow
from autoapply.models.profile import ProfileRow

__all__ = ["User", "JobApplicationRow", "ProfileRow"]
