"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1
    USAGE_ERROR = 2
    UPDATES_AVAILABLE = 3


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    REGISTRY_URL_NUGET = "https://api.nuget.org/v3/registration5-gz-semver1/"
    REQUEST_TIMEOUT = 30  # Timeout in seconds for all HTTP requests
    USER_AGENT = "nugbot/0.1.0"

    UPDATE_TYPES = ["major", "minor", "patch"]
    DEFAULT_UPDATE_TYPE = "patch"
    OUTPUT_FORMATS = ["json", "csv"]

    PACKAGES_CONFIG_FILE = "packages.config"
    PROJECT_JSON_FILE = "project.json"
    DIRECTORY_BUILD_PROPS_FILE = "Directory.Build.props"
    DIRECTORY_PACKAGES_PROPS_FILE = "Directory.Packages.props"
    PROJECT_FILE_SUFFIXES = (".csproj", ".fsproj", ".vbproj")

    LOG_FORMAT = "[%(levelname)s] %(message)s"
    LOG_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

    ENV_CONFIG = "NUGBOT_CONFIG"
    ENV_LOG_LEVEL = "NUGBOT_LOG_LEVEL"
    ENV_LOG_JSON = "NUGBOT_LOG_JSON"
    ENV_REGISTRY_URL = "NUGBOT_REGISTRY_URL"
    ENV_REQUEST_TIMEOUT = "NUGBOT_REQUEST_TIMEOUT"
    ENV_UPDATE_TYPE = "NUGBOT_UPDATE_TYPE"
    DEFAULT_CONFIG_PATH = "~/.config/nugbot/nugbot.yml"
