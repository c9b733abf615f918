"""Configuration: profiles, constants and the TOML config manager."""
