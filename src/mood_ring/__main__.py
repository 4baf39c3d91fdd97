"""Entry point for running as a module."""
import uvicorn

from mood_ring.api import app
from mood_ring.config import Settings, configure_logging, load_local_env_file

if __name__ == "__main__":
    load_local_env_file()
    settings = Settings.from_env()
    configure_logging(settings.log_level)
    uvicorn.run(app, host="0.0.0.0", port=settings.port)
