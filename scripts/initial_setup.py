"""Create the database and apply all migrations."""
from runcoach.config import get_settings
from runcoach.database import run_migrations
from runcoach.logging_config import configure_logging


def main() -> None:
    configure_logging()
    settings = get_settings()
    run_migrations()
    print("Database ready at", settings.database_url)


if __name__ == "__main__":
    main()
