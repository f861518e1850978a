STATE_DIR_NAME = ".projkit"
CONFIG_FILE = "config.yaml"
TASKS_FILE = "tasks.json"
PACKAGE_JSON_FILE = "package.json"

PROJKIT_RUN_COMMAND = "projkit run"
PROJKIT_SYNTH_COMMAND = "projkit synth"

# Standard task graph of a Node project
DEFAULT_TASK = "default"
PRE_COMPILE_TASK = "pre-compile"
COMPILE_TASK = "compile"
POST_COMPILE_TASK = "post-compile"
TEST_TASK = "test"
PACKAGE_TASK = "package"
BUILD_TASK = "build"

BUILD_PHASES = (
    PRE_COMPILE_TASK,
    COMPILE_TASK,
    POST_COMPILE_TASK,
    TEST_TASK,
    PACKAGE_TASK,
)

PACKAGE_MANAGERS = {"npm", "yarn", "pnpm"}

LICENSE_CHECKER_PACKAGE = "license-checker"
LICENSE_CHECK_TASK = "check-licenses"
