"""Schema model: column types, columns and tables."""
