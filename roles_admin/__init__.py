"""Role administration service: roles, grant hierarchy and role search."""
