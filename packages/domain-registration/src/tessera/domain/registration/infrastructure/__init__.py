"""DynamoDB persistence for tenant registrations."""
