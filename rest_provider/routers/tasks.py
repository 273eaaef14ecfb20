from rest_provider.config import settings
from rest_provider.routers.rest import service_router
from rest_provider.services.task_service import TaskService

# Module-level instance so tests can reset or swap its data.
tasks = TaskService(defer=True)

router = service_router(f"{settings.API_PREFIX}/tasks", tasks, tags=["tasks"])
