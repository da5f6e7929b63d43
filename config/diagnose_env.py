# config/diagnose_env.py
# Prints the statement service's upstream settings (secrets redacted) and
# checks that APP_SECRETS_KEY can decrypt stored Hostkit API keys.
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from ownerportal.crypto_secrets import decode_secrets_key

ENV_PATH = Path(__file__).resolve().parent / ".env"


def load_env(path: Path = ENV_PATH) -> bool:
    """Same file the app reads; values already in the environment win."""
    if not path.exists():
        return False
    return load_dotenv(path.as_posix(), override=False, encoding="utf-8-sig")


def redacted(v, keep: int = 4) -> str:
    if not v:
        return "(unset)"
    v = v.strip()
    if len(v) <= keep * 2:
        return "*" * len(v)
    return v[:keep] + "..." + v[-keep:]


def check_secrets_key(value):
    """Returns (ok, note)."""
    if not value:
        return False, "APP_SECRETS_KEY not set (only needed if properties store encrypted API keys)"
    key = decode_secrets_key(value)
    if key is None:
        return False, "APP_SECRETS_KEY does not decode to 16/24/32 bytes"
    return True, f"AES-{len(key) * 8} key"


def main() -> int:
    print("config/.env loaded:", load_env(ENV_PATH))
    print("HOSTKIT_API_URL:", os.getenv("HOSTKIT_API_URL") or "(unset)")
    print("HOSTKIT_API_KEY:", redacted(os.getenv("HOSTKIT_API_KEY")))
    print("HOSTKIT_TIMEOUT_SECONDS:", os.getenv("HOSTKIT_TIMEOUT_SECONDS") or "(default 30)")
    print("STATEMENT_CURRENCY:", os.getenv("STATEMENT_CURRENCY") or "(default EUR)")

    ok, note = check_secrets_key(os.getenv("APP_SECRETS_KEY"))
    print("APP_SECRETS_KEY:", redacted(os.getenv("APP_SECRETS_KEY")))
    print("APP_SECRETS_KEY valid:", ok)
    print("Note:", note)

    if not os.getenv("HOSTKIT_API_URL"):
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
