from __future__ import annotations
from typing import Any, Dict, Optional
from pathlib import Path

import yaml
from pydantic import BaseModel
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing_extensions import Annotated
from pydantic import Field
from dotenv import load_dotenv

load_dotenv()

class LLMConfig(BaseModel):
    # litellm model id, "provider/model"
    model: Annotated[str, Field(default="gemini/gemini-2.0-flash")]
    api_key: Annotated[Optional[str], Field(default=None)]
    api_base: Annotated[Optional[str], Field(default=None)]
    temperature: Annotated[float, Field(default=0.7)]
    timeout: Annotated[int, Field(default=60)]

    def to_litellm_params(self) -> Dict[str, Any]:
        params: Dict[str, Any] = {"model": self.model, "timeout": self.timeout}
        if self.api_key:
            params["api_key"] = self.api_key
        if self.api_base:
            params["api_base"] = self.api_base
        return params

class StorageConfig(BaseModel):
    root: Annotated[str, Field(default="cache/storage")]
    namespace: Annotated[str, Field(default="edubot")]

class SimulatorConfig(BaseModel):
    response_delay_seconds: Annotated[float, Field(default=1.0)]
    max_events: Annotated[int, Field(default=200)]

class ChatConfig(BaseModel):
    """Identity used for conversations started from the web chat panel."""
    student_id: Annotated[str, Field(default="STUD-001")]
    student_name: Annotated[str, Field(default="Demo Student")]


class Settings(BaseSettings):
    university_name: Annotated[str, Field(default="Global Tech University")]
    log_file: Annotated[str, Field(default="edubot.log")]

    llm: LLMConfig = Field(default_factory=LLMConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    simulator: SimulatorConfig = Field(default_factory=SimulatorConfig)
    chat: ChatConfig = Field(default_factory=ChatConfig)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="EDUBOT_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        def yaml_settings() -> Dict[str, Any]:
            path = Path("settings.yaml")
            if not path.exists():
                return {}
            return yaml.safe_load(path.read_text(encoding="utf-8")) or {}

        return (
            init_settings,
            env_settings,
            dotenv_settings,
            yaml_settings,
            file_secret_settings,
        )


Config = Settings()
