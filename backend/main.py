import uvicorn

from smarttask.core.config import settings
from smarttask.server import create_app

app = create_app(settings)

if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=settings.port, reload=False)
