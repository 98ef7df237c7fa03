"""
User Service

User management microservice. Owns users and email uniqueness, and serves
a user's orders by asking order_service.

Port: 8081
"""

__version__ = "1.0.0"
__service_name__ = "user_service"
__service_port__ = 8081
