"""Design link recognition: URL parsing and link extraction from text."""
