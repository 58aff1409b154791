"""kube-wizard constants."""

from pathlib import Path

KUBECTL = "kubectl"
MIN_KUBECTL_MAJOR = 1
MIN_KUBECTL_MINOR = 21

CONFIG_DIR = Path.home() / ".kube-wizard"
CONFIG_PATH = CONFIG_DIR / "config.toml"

FAVOURITES_FILE = "kube-wizard-favourites.json"
HISTORY_FILE = "kube-wizard-history.json"
HOTKEYS_FILE = "kube-wizard-hotkeys.json"
LOG_FILE = "k8s-wizard.log"

SAVED_OUTPUTS_DIR = "saved_cmd"
SAVED_OUTPUT_EXT = ".txt"
SAVED_OUTPUTS_INDEX = "index.json"

MAX_HISTORY_ENTRIES = 50

HOTKEY_KEYS = tuple(f"F{n}" for n in range(1, 13))
