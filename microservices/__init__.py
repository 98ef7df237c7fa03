"""Microservices: user_service and order_service."""
