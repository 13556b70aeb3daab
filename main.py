import uvicorn
from dotenv import load_dotenv
from edge_router.config.settings import Settings
from edge_router.core.logging_setup import configure_logging
from edge_router.app_factory import create_app

# Load environment variables from .env file
load_dotenv()
settings = Settings.from_env()
configure_logging(settings.log_level)

app = create_app(settings)

if __name__ == "__main__":
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)
