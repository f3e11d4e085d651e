"""AWS provider: client, resource kinds and sweepers."""
