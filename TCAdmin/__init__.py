from .TCAdmin import TCAdmin
from .config import TCAdminConfig, default_config
from .models import LoginResult
from .browser import ScriptedBrowser

__all__ = [
    "TCAdmin",
    "TCAdminConfig",
    "default_config",
    "LoginResult",
    "ScriptedBrowser",
]
