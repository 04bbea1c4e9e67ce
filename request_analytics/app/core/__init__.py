"""Configuration, logging, persistence and HTTP plumbing shared by the app."""
