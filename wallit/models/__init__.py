# Models package init
from wallit.models.user import User

__all__ = ["User"]
