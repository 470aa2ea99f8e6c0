from boxtrack.application.use_cases.containers.container_store import (
    ContainerDetail, ContainerStore, DuplicateNameResult)

__all__ = ["ContainerDetail", "ContainerStore", "DuplicateNameResult"]
