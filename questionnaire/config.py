# questionnaire/config.py
from __future__ import annotations

import argparse
import os
from typing import Mapping, Optional, Sequence, Tuple

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from .errors import ConfigurationError


DATA_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "data")


class Settings(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    listen_addr: str = Field(":8081", alias="QUESTIONNAIRE_LISTEN_ADDR")
    answers_dir: str = Field("questionnaire-answers", alias="QUESTIONNAIRE_ANSWERS_DIR")
    web_root: str = Field("/", alias="QUESTIONNAIRE_WEB_ROOT")

    questions_path: str = Field(os.path.join(DATA_DIR, "questions.json"), alias="QUESTIONNAIRE_QUESTIONS_PATH")
    messages_path: str = Field(os.path.join(DATA_DIR, "messages.json"), alias="QUESTIONNAIRE_MESSAGES_PATH")

    locales: Tuple[str, ...] = Field(("en", "ar"), alias="QUESTIONNAIRE_LOCALES")
    default_locale: str = Field("en", alias="QUESTIONNAIRE_DEFAULT_LOCALE")

    # re-read sources only when they change on disk
    cache_sources: bool = Field(True, alias="QUESTIONNAIRE_CACHE_SOURCES")

    @field_validator("locales", mode="before")
    @classmethod
    def _split_locales(cls, v):
        if isinstance(v, str):
            v = [part.strip() for part in v.split(",")]
        return tuple(part for part in v if part)

    @model_validator(mode="after")
    def _check_default_locale(self) -> "Settings":
        if not self.locales:
            raise ValueError("at least one locale must be configured")
        if self.default_locale not in self.locales:
            raise ValueError(f"default locale {self.default_locale!r} is not in {list(self.locales)}")
        return self

    def host_port(self) -> Tuple[str, int]:
        host, _, port = self.listen_addr.rpartition(":")
        try:
            return (host or "0.0.0.0", int(port))
        except ValueError as e:
            raise ConfigurationError(f"Invalid listen address {self.listen_addr!r}.") from e


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Localized questionnaire server")
    parser.add_argument("-l", dest="listen_addr", help="Address to listen on (e.g. :8081)")
    parser.add_argument("-d", dest="answers_dir", help="Directory to store questionnaire answers")
    parser.add_argument("-r", dest="web_root", help="Web root for links")
    return parser


def load_settings(
    argv: Optional[Sequence[str]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Settings:
    """Settings from .env, then the environment, then command-line flags."""
    if environ is None:
        load_dotenv()
        environ = os.environ

    values = dict(environ)
    args = build_arg_parser().parse_args(list(argv) if argv is not None else [])
    for name in ("listen_addr", "answers_dir", "web_root"):
        flag = getattr(args, name)
        if flag is not None:
            values[Settings.model_fields[name].alias] = flag

    try:
        return Settings.model_validate(values)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid settings: {e}") from e
