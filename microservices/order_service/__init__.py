"""
Order Service

Order management microservice. Verifies users against user_service before
writing orders and serves order aggregates.

Port: 8082
"""

__version__ = "1.0.0"
__service_name__ = "order_service"
__service_port__ = 8082
