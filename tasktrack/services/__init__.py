"""Core services: validation, authentication, authorization, accounts and tasks."""
