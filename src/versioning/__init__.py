"""Version resolution engine for GitLab manifest hashes."""
