"""Database configuration for Tortoise-ORM."""

import os

from dotenv import load_dotenv

load_dotenv()

# In-memory by default: readings live for the lifetime of the process.
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite://:memory:")


TORTOISE_ORM = {
    "connections": {"default": DATABASE_URL},
    "apps": {
        "models": {
            "models": ["tenantbill.core.models"],
            "default_connection": "default",
        },
    },
}
