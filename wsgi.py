#!/usr/bin/env python3
from dotenv import load_dotenv

# Load environment variables from .env before the config class reads them
load_dotenv()

from visitor_registry import create_app  # noqa: E402

# Procfile: `web: gunicorn wsgi:app`
app = create_app()
