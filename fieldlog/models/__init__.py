from .user import User, UserRole
from .activity import Activity, ActivityType
from .log import AuditLog
