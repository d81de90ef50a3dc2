"""Domain layer - enums, errors and pydantic models"""
