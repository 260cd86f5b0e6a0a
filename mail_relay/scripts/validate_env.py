"""Validate environment completeness against relay configuration requirements.

Checks that the variables the relay needs in production are present and
that the shared secret is not left at its default.

Author: Odiseo
Created: 2025-10-18
"""

import os
import sys
from pathlib import Path

from mail_relay.config.settings import DEFAULT_API_SECRET_KEY

# Required configuration variables
REQUIRED_VARS = {
    "EMAIL_PROVIDER",
    "API_SECRET_KEY",
    "ALLOWED_ORIGINS",
    "ENVIRONMENT",
}

# API key required for each provider
PROVIDER_KEYS = {
    "brevo": "BREVO_API_KEY",
    "sendgrid": "SENDGRID_API_KEY",
}


def validate_env() -> tuple[bool, list[str]]:
    """Validate the environment has all required variables.

    Returns:
        Tuple of (is_valid, problems), problems being missing variable
        names or descriptions of invalid values.
    """
    problems = [var for var in REQUIRED_VARS if not os.getenv(var)]

    provider = os.getenv("EMAIL_PROVIDER", "brevo").lower()
    provider_key = PROVIDER_KEYS.get(provider)
    if provider_key is None:
        problems.append(f"EMAIL_PROVIDER (unknown provider: {provider})")
    elif not os.getenv(provider_key):
        problems.append(provider_key)

    if os.getenv("API_SECRET_KEY") == DEFAULT_API_SECRET_KEY:
        problems.append("API_SECRET_KEY (still set to the default value)")

    return len(problems) == 0, problems


def main() -> int:
    """Main entry point for validation script.

    Returns:
        Exit code (0 for success, 1 for failure).
    """
    env_file = Path.cwd() / ".env"
    if env_file.exists():
        import dotenv

        dotenv.load_dotenv(env_file)

    is_valid, problems = validate_env()

    if is_valid:
        print("✅ Environment is valid - all required variables present")
        return 0

    print("❌ Environment has problems:")
    for problem in sorted(problems):
        print(f"   - {problem}")
    print("\n📝 Please copy .env.example to .env and fill in the values")
    print("   cp .env.example .env")
    return 1


if __name__ == "__main__":
    sys.exit(main())
