from pathlib import Path

# Local data directory (override with MCLI_HOME)
DEFAULT_DATA_DIR = Path.home() / ".mcli"
LOCAL_REGISTRY_FILENAME = "registry.json"
PENDING_TOOLS_FILENAME = "pending-tools.json"
PENDING_REVIEWS_FILENAME = "pending-reviews.json"
AGENT_ID_FILENAME = "agent-id"

# Registry shipped with the package, used when no local cache exists
BUNDLED_REGISTRY_PATH = Path(__file__).parent.resolve() / "data" / "tools.json"
BUNDLED_REVIEWS_PATH = Path(__file__).parent.resolve() / "data" / "reviews.json"

# Remote registry (override with MCLI_REGISTRY_URL)
REMOTE_REGISTRY_URL = "https://raw.githubusercontent.com/askeluv/mcli/main/registry/tools.json"
REGISTRY_SCHEMA_VERSION = "1.0"

# Environment variables
ENV_HOME = "MCLI_HOME"
ENV_REGISTRY_URL = "MCLI_REGISTRY_URL"
ENV_REGISTRY_PATH = "MCLI_REGISTRY_PATH"
ENV_GITHUB_API_URL = "MCLI_GITHUB_API_URL"
ENV_GITHUB_TOKEN = "GITHUB_TOKEN"

# Provenance verification
GITHUB_HOST = "github.com"
GITHUB_API_URL = "https://api.github.com"
VERIFY_USER_AGENT = "mcli-verify"
VERIFY_TIMEOUT_SECONDS = 30.0
VERIFY_CONCURRENCY = 5
REPO_ACTIVE_DAYS = 365  # Repo counts as active if pushed within this window
DOMAIN_TLD_SUFFIXES = ("com", "org", "io", "co", "dev", "sh")  # Stripped before org matching

# Schema patterns
SLUG_PATTERN = r"^[a-z0-9-]+$"
PROOF_HASH_PATTERN = r"^[a-f0-9]{64}$"

# Score scales
DIMENSION_MIN = 1
DIMENSION_MAX = 5
AGENT_SCORE_MIN = 1
AGENT_SCORE_MAX = 10
FAVORABLE_THRESHOLD = 4  # Review values at or above this count as favorable

# Install command templates per method ({} = install argument)
INSTALL_COMMAND_TEMPLATES = {
    "brew": "brew install {}",
    "apt": "sudo apt install {}",
    "npm": "npm install -g {}",
    "cargo": "cargo install {}",
    "go": "go install {}",
    "binary": "{}",
    "script": "{}",
}

# Section headings used when printing install instructions
INSTALL_METHOD_LABELS = {
    "brew": "macOS (Homebrew)",
    "apt": "Debian/Ubuntu",
    "npm": "npm",
    "cargo": "Cargo (Rust)",
    "go": "Go",
    "binary": "Binary download",
    "script": "Install script",
}
