"""Pydantic schemas for request/response validation."""

from .account import *  # noqa: F403
from .booking import *  # noqa: F403
from .common import *  # noqa: F403
from .content import *  # noqa: F403
from .deal import *  # noqa: F403
from .destination import *  # noqa: F403
from .feedback import *  # noqa: F403
from .health import *  # noqa: F403
from .hotel import *  # noqa: F403
from .stats import *  # noqa: F403
from .tour import *  # noqa: F403
from .vehicle import *  # noqa: F403
