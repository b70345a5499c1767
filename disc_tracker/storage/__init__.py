"""PostgreSQL persistence for rounds."""
