"""Development entrypoint delegating to the application package."""

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

from auth_api import database  # noqa: E402
from auth_api.main import create_app  # noqa: E402

app = create_app()


if __name__ == "__main__":
    database.create_indexes()
    app.run(host="0.0.0.0", port=8000, debug=True)
