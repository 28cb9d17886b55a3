from pydantic import Field, model_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_prefix": "CHANNEL_EMITTER_", "env_file": ".env", "extra": "ignore"}

    # Addressing
    delimiter: str = Field(default=".", min_length=1, max_length=1)
    root_marker: str = Field(default="^", min_length=1, max_length=1)

    # Listener registry (0 = unlimited)
    max_listeners: int = Field(default=10, ge=0)

    # Remove channels left without listeners or children after a removal
    auto_prune: bool = False

    @model_validator(mode="after")
    def _markers_differ(self) -> "Settings":
        if self.delimiter == self.root_marker:
            raise ValueError("delimiter and root_marker must be different characters")
        return self


settings = Settings()
