"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from on_the_map.adapters.geocoder import Geocoder, HttpxMapboxGeocoder
from on_the_map.adapters.udacity_client import HttpxOnTheMapClient, OnTheMapClient
from on_the_map.app_logging import configure_logging
from on_the_map.config import Settings
from on_the_map.services.auth import AuthService
from on_the_map.services.location_store import LocationStore
from on_the_map.services.locations import LocationService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    client: OnTheMapClient
    geocoder: Geocoder
    location_store: LocationStore
    auth_service: AuthService
    location_service: LocationService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    configure_logging(resolved_settings.log_level)
    client = HttpxOnTheMapClient.create(
        base_url=resolved_settings.api_base_url,
        session_provider=resolved_settings.session_provider,
        timeout=resolved_settings.request_timeout_seconds,
    )
    geocoder = HttpxMapboxGeocoder.create(
        access_token=resolved_settings.mapbox_token,
        base_url=resolved_settings.mapbox_base_url,
        timeout=resolved_settings.request_timeout_seconds,
    )
    location_store = LocationStore()
    auth_service = AuthService(client)
    location_service = LocationService(
        client=client,
        store=location_store,
        geocoder=geocoder,
    )

    async def close_resources() -> None:
        await client.close()
        await geocoder.close()

    return AppContainer(
        settings=resolved_settings,
        client=client,
        geocoder=geocoder,
        location_store=location_store,
        auth_service=auth_service,
        location_service=location_service,
        close_resources=close_resources,
    )
