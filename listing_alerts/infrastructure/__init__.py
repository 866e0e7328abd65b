"""Infrastructure adapters: database, repositories and push transport."""
