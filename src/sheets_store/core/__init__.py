"""Store core: transactions, checkpoint protocol and errors."""
