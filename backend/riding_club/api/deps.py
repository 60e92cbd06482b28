"""
Request dependencies for the long-lived objects created in the lifespan hook.
"""

from fastapi import Request

from riding_club.gateway.base import BookingGateway
from riding_club.services.group_coordinator import GroupLifecycleCoordinator
from riding_club.services.projection import BookingProjection


def get_gateway(request: Request) -> BookingGateway:
    return request.app.state.gateway


def get_projection(request: Request) -> BookingProjection:
    return request.app.state.projection


def get_coordinator(request: Request) -> GroupLifecycleCoordinator:
    return request.app.state.coordinator
