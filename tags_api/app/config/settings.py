"""Settings for the API."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    tag_source_backend: str = Field("exiftool", validation_alias="TAG_SOURCE_BACKEND")
    exiftool_path: str = Field("exiftool", validation_alias="EXIFTOOL_PATH")
    # Whitespace separated; exiftool prints the full tag dictionary as XML with -listx.
    exiftool_args: str = Field("-listx", validation_alias="EXIFTOOL_ARGS")
    tag_source_file: str = Field("", validation_alias="TAG_SOURCE_FILE")

    read_chunk_size: int = Field(65536, gt=0, validation_alias="READ_CHUNK_SIZE")
    require_table: bool = Field(False, validation_alias="REQUIRE_TABLE")

    host: str = Field("0.0.0.0", validation_alias="HOST")
    port: int = Field(8080, validation_alias="PORT")
    log_level: str = Field("INFO", validation_alias="LOG_LEVEL")

    @property
    def exiftool_command(self) -> list[str]:
        return [self.exiftool_path, *self.exiftool_args.split()]
