import uvicorn
from dotenv import load_dotenv

from apps.chat_room.main import create_app
from lib.config.chat_room_loader import load_room_config
from lib.telemetry.logger import configure_logging

if __name__ == "__main__":
    load_dotenv()
    config = load_room_config()
    configure_logging(config.log_level)
    uvicorn.run(create_app(config), host=config.host, port=config.port)
