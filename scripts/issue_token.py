"""Print a signed bearer token for a uid (local testing only).

    python scripts/issue_token.py <uid>
"""

from __future__ import annotations

import argparse
import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.attendance_trends.attendance_trends.users.token_verifier import SignedTokenVerifier


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("uid")
    args = parser.parse_args()

    settings = importlib.import_module(get_settings_module())
    verifier = SignedTokenVerifier(settings.SECRET_KEY, max_age_seconds=settings.TOKEN_MAX_AGE_SECONDS)
    print(verifier.issue(args.uid))


if __name__ == "__main__":
    main()
