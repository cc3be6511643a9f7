"""Position store implementations (SQLAlchemy and in-memory)."""
