# mantenimiento/core/config.py
from functools import lru_cache
from typing import List, Union
import json

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === Administrador ===
    # Par usuario/contraseña del proveedor de credenciales por defecto.
    # La contraseña puede ser texto plano o un hash de passlib.
    admin_username: str = "admin"
    admin_password: str = "admin"

    # === Flujo incidente -> tarea ===
    task_title_preview_length: int = 40
    default_incident_priority: str = "Media"
    admin_incident_reporter: str = "Supervisor"

    # === Incidentes ===
    # Acepta JSON (["A","B"]) o lista separada por comas ("A,B")
    incident_categories: Union[str, List[str]] = ["Mantenimiento", "Suministros", "Daño", "Otro"]

    # === Arranque ===
    seed_demo_data: bool = False
    log_level: str = "INFO"

    @field_validator("incident_categories", mode="before")
    @classmethod
    def _parse_categories(cls, v):
        if v is None:
            return []
        if isinstance(v, list):
            return [str(x).strip() for x in v if str(x).strip()]
        if isinstance(v, str):
            s = v.strip()
            if not s:
                return []
            if s.startswith("["):
                try:
                    data = json.loads(s)
                    if isinstance(data, list):
                        return [str(x).strip() for x in data if str(x).strip()]
                except ValueError:
                    # JSON mal formado: caemos al split por comas
                    pass
            return [item.strip() for item in s.split(",") if item.strip()]
        return [str(v).strip()] if str(v).strip() else []

    @field_validator("task_title_preview_length")
    @classmethod
    def _positive_preview(cls, v: int) -> int:
        if v < 1:
            raise ValueError("task_title_preview_length debe ser >= 1")
        return v


@lru_cache
def get_settings() -> Settings:
    return Settings()
