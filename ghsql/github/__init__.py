"""GitHub GraphQL access."""
