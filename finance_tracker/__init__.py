"""Personal finance tracker: accounts, transactions, and balances kept in step."""
