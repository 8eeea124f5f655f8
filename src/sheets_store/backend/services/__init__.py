"""Transport services for the backing spreadsheet."""
