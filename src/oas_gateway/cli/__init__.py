"""CLI for oas_gateway: oas-gateway available | spec | base-url | schema."""
