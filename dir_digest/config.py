"""
Process-wide defaults for dir_digest.

These values are only defaults: the traversal engine receives its
ceilings through a TraversalLimits value, so callers can run several
ingestions with different budgets side by side.
"""

MAX_FILE_SIZE = 10 * 1024 * 1024            # Largest single file to ingest (10 MB)
MAX_DIRECTORY_DEPTH = 20                    # Deepest directory level to descend into
MAX_FILES = 10_000                          # Most files admitted per ingestion
MAX_TOTAL_SIZE_BYTES = 500 * 1024 * 1024    # Most bytes admitted per ingestion (500 MB)

OUTPUT_FILE_NAME = "digest.txt"

# Optional TOML file at the traversal root: [config] ignore_patterns = [...]
CONFIG_FILE_NAME = ".dirdigest"

# Leading sample size used for text/binary classification
BINARY_SAMPLE_SIZE = 1024

# Patterns are matched against the whole root-relative path, and "*"
# also crosses directory separators.
DEFAULT_IGNORE_PATTERNS = {
    # Version control
    ".git",
    ".svn",
    ".hg",
    ".gitmodules",
    # Python
    "*.pyc",
    "*.pyo",
    "*.pyd",
    "__pycache__",
    ".pytest_cache",
    ".mypy_cache",
    ".tox",
    ".venv",
    "venv",
    ".eggs",
    "*.egg-info",
    # JavaScript
    "node_modules",
    "bower_components",
    "package-lock.json",
    "yarn.lock",
    "pnpm-lock.yaml",
    # Rust / Java / generic build output
    "target",
    "*.class",
    "*.jar",
    "*.o",
    "*.obj",
    "*.so",
    "*.dll",
    "*.dylib",
    "*.exe",
    # Editors and OS noise
    ".idea",
    ".vscode",
    "*.swp",
    ".DS_Store",
    "Thumbs.db",
    # Media and archives
    "*.png",
    "*.jpg",
    "*.jpeg",
    "*.gif",
    "*.ico",
    "*.webp",
    "*.pdf",
    "*.zip",
    "*.tar",
    "*.gz",
    "*.7z",
    "*.mp3",
    "*.mp4",
    # Logs and local databases
    "*.log",
    "*.sqlite",
    "*.db",
}
