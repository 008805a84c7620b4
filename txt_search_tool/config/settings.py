
from pydantic_settings import BaseSettings


class Settings(BaseSettings):

    # Search
    context_size: int = 2

    # Line source
    file_encoding: str = "utf-8"
    read_batch_size: int = 1000

    # Preferences
    preferences_path: str = "txt_search_tool_prefs.json"

    class Config:
        env_file = ".env"
        env_prefix = "TXT_SEARCH_"
        extra = "ignore"


settings = Settings()
