from community_platform.db.session import create_tables


def init_db() -> None:
    """Initialize the database by creating all tables."""
    create_tables()

if __name__ == "__main__":
    init_db()
    print("Database initialized.")
