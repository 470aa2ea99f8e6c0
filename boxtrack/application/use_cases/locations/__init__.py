from boxtrack.application.use_cases.locations.location_tree import LocationTree

__all__ = ["LocationTree"]
