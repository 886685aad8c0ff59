# utils.py
import logging
import os
import subprocess
import sys

from dotenv import set_key

logger = logging.getLogger(__name__)

ENV_TEMPLATE = "GEMINI_API_KEY=\nGITHUB_TOKEN=\n"


def setup_logging(debug: bool = False):
    """Configure the root logger."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def format_duration(seconds: float) -> str:
    if seconds < 1:
        return f"{int(round(seconds * 1000))}ms"
    if seconds < 60:
        return f"{seconds:.1f}s"
    minutes, rest = divmod(int(round(seconds)), 60)
    return f"{minutes}m {rest}s"


def ask_question(prompt: str) -> str:
    return input(f"{prompt} ").strip()


def is_yes(answer: str) -> bool:
    return answer.strip().lower() in ("y", "yes")


# --- .env file ---


def ensure_env_file(env_path: str) -> bool:
    """Create the .env file from the template. Returns True if it was created."""
    if os.path.exists(env_path):
        return False
    with open(env_path, "w", encoding="utf-8") as f:
        f.write(ENV_TEMPLATE)
    logger.info(f"✅ Created {env_path}. Please add your API key.")
    return True


def set_env_value(env_path: str, key: str, value: str):
    """Rewrite (or append) one KEY=VALUE line of the .env file in place."""
    set_key(env_path, key, value, quote_mode="never")
    os.environ[key] = value


def link_globally(package_dir: str):
    """Install the program in editable mode so `gitwise` works from any directory."""
    result = subprocess.run(
        [sys.executable, "-m", "pip", "install", "-e", package_dir],
        capture_output=True,
        text=True,
    )
    if result.returncode != 0:
        raise RuntimeError(f"pip install failed: {result.stderr.strip()}")
