import os, sys
import warnings
from pathlib import Path

# Add src/ to sys.path for imports
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

# Ensure required environment variables for Core validation
os.environ.setdefault("DISCORD_API_TOKEN", "test-token")
os.environ.setdefault("OPENAI_API_KEY", "test-openai")
os.environ.setdefault("MSG_MODEL_ID", "model")
os.environ.setdefault("GROUND_TRUTH_FILE", "")

# Silence deprecation warnings surfaced from third-party dependencies during tests
warnings.filterwarnings(
    "ignore", category=DeprecationWarning, module=r"^discord\\.player$"
)
warnings.filterwarnings("ignore", "'audioop' is deprecated", DeprecationWarning)


def pytest_configure(config):
    warnings.filterwarnings(
        "ignore", category=DeprecationWarning, module=r"^discord\\.player$"
    )
    warnings.filterwarnings("ignore", "'audioop' is deprecated", DeprecationWarning)
