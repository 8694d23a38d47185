"""Print desk service: self-service print submission with pickup slots."""
