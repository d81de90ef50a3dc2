"""Event routing - Business events and their notification handlers"""
from .router import EventRouter, DeliveryReport
from .handlers import NotificationHandlers, register_default_handlers

__all__ = [
    "EventRouter",
    "DeliveryReport",
    "NotificationHandlers",
    "register_default_handlers",
]
