"""Fixed values describing the Fermentrack 2 installation."""

APP_NAME = "Fermentrack 2"
APP_MARKER_TEXT = "Fermentrack 2"

GITHUB_REPOSITORY = "thorrak/fermentrack_2"
REPOSITORY_IDENTITY = "fermentrack_2"
DEFAULT_INSTALL_DIRNAME = "fermentrack_2"
DEFAULT_PORT = 80

REQUIRED_PACKAGES = ("git", "curl", "build-essential")

OS_RELEASE_PATH = "/etc/os-release"
SUPPORTED_DISTRIBUTIONS = ("debian", "raspbian")
UNTESTED_DISTRIBUTIONS = ("ubuntu",)

PORT_CONNECT_TIMEOUT = 5
PORT_READ_TIMEOUT = 10
DOWNLOAD_TIMEOUT = 60

GH_KEYRING_URL = "https://cli.github.com/packages/githubcli-archive-keyring.gpg"
GH_KEYRING_PATH = "/etc/apt/keyrings/githubcli-archive-keyring.gpg"
GH_SOURCE_LIST_PATH = "/etc/apt/sources.list.d/github-cli.list"
GH_SOURCE_LINE = (
    "deb [arch={arch} signed-by={keyring}] https://cli.github.com/packages stable main"
)

DOCKER_INSTALL_SCRIPT_URL = "https://get.docker.com"
DOCKER_GROUP = "docker"

NODE_MIN_MAJOR = 18
NODE_LTS_MAJOR = 20
NODESOURCE_SETUP_URL = "https://deb.nodesource.com/setup_{major}.x"

SUBMODULE_MARKER = "ui/package.json"
SSH_URL_PREFIX = "git@github.com:"
HTTPS_URL_PREFIX = "https://github.com/"

ENVS_DIRNAME = ".envs"
PRODUCTION_ENV_DIRNAME = ".production"
SAMPLE_ENV_DIRNAME = ".production_sample"
DJANGO_ENV_FILE = ".django"
POSTGRES_ENV_FILE = ".postgres"
POSTGRES_USER = "fermentrack"
MULTI_TENANT_SETTING = "FERMENTRACK_MULTI_TENANT_MODE"

UI_DIRNAME = "ui"
COMPOSE_FILE = "production.yml"

CONFIG_ENV_VAR = "FERMENTRACK_INSTALLER_CONFIG"
DEFAULT_CONFIG_FILENAME = ".fermentrack-installer.yml"
