"""Typed GraphQL request and response contracts."""
