"""Pre-flight check for the external tools"""

import shutil

from .config import Config
from .errors import DependencyMissing

INSTALL_HINTS = {
    "tiempo-rs": "https://gitlab.com/categulario/tiempo-rs (installed as 't')",
    "jira-cli": "https://github.com/ankitpokhrel/jira-cli (run 'jira init' once)",
}


def check_dependencies(config: Config):
    """Raise DependencyMissing unless both executables are on PATH"""
    missing = []
    if shutil.which(config.tiempo_cmd) is None:
        missing.append("tiempo-rs")
    if shutil.which(config.jira_cmd) is None:
        missing.append("jira-cli")

    if missing:
        raise DependencyMissing(missing)
