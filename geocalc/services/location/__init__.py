"""
Location Services Module

Geocoding, driving distances, and coordinate storage for persons and venues.
Provider: Google Maps (Geocoding API + Distance Matrix API)

Usage:
    from geocalc.services.location.geocoding import GeocodingClient, format_address
    from geocalc.services.location.distance_matrix import DistanceMatrixClient
    from geocalc.services.location.store import LocationStore
"""
