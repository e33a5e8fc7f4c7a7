"""Language server for Candid interface files."""
