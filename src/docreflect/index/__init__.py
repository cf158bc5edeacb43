"""Source discovery."""
