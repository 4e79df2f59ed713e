"""Domain core: models, repositories, services and schemas."""
