#!/usr/bin/env python3
"""
Password generation script for cookieseal.

Prints a fresh session password, or with --rotate an updated
COOKIESEAL_PASSWORDS map that adds a new highest id.
"""

import argparse
import json
import os
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_root))

from cookieseal.core.security import generate_secure_password, normalize_password_to_map


def main():
    """Generate a password, optionally rotating an existing map"""
    parser = argparse.ArgumentParser(description="Generate a cookieseal session password")
    parser.add_argument("--length", type=int, default=64, help="password length (min 32)")
    parser.add_argument(
        "--rotate",
        action="store_true",
        help="read COOKIESEAL_PASSWORDS (or COOKIESEAL_PASSWORD) and add a new highest id",
    )
    args = parser.parse_args()

    password = generate_secure_password(args.length)

    if not args.rotate:
        print(password)
        return True

    if os.environ.get("COOKIESEAL_PASSWORDS"):
        current = normalize_password_to_map(json.loads(os.environ["COOKIESEAL_PASSWORDS"]))
    elif os.environ.get("COOKIESEAL_PASSWORD"):
        current = normalize_password_to_map(os.environ["COOKIESEAL_PASSWORD"])
    else:
        current = {}

    next_id = max(current, default=0) + 1
    current[next_id] = password
    print(json.dumps({str(key): value for key, value in sorted(current.items())}))
    print(f"New seals will use password id {next_id}", file=sys.stderr)
    return True


if __name__ == "__main__":
    success = main()
    sys.exit(0 if success else 1)
