import os

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

from visitor_registry import create_app  # noqa: E402

app = create_app()

if __name__ == "__main__":
    port = int(os.getenv("PORT", 5000))
    app.run(host="0.0.0.0", port=port, debug=app.config.get("FLASK_DEBUG", False))
