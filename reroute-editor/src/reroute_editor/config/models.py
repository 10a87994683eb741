import os
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator


class LogModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    debug: bool = False


class SnapModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    min_zoom: float = 12  # no snapping when zoomed out further
    radius_pixels: float = 10.0

    @field_validator("radius_pixels")
    @classmethod
    def _positive(cls, v: float, info: ValidationInfo) -> float:
        if v <= 0:
            raise ValueError(f"{info.field_name} must be > 0")
        return v


class EditorModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    follow_road: bool = False
    allow_extend: bool = True
    default_spacing_m: float = 400.0
    coord_epsilon: float = 1e-6  # degrees

    @field_validator("default_spacing_m", "coord_epsilon")
    @classmethod
    def _positive(cls, v: float, info: ValidationInfo) -> float:
        if v <= 0:
            raise ValueError(f"{info.field_name} must be > 0")
        return v


# ----------------- ROUTERS ---------------------


class RouterStraightModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["straight"] = "straight"


class RouterOsrmModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["osrm"] = "osrm"
    base_url: str = "http://localhost:5000"
    profile: str = "driving"
    timeout_s: float = 10.0

    @field_validator("base_url")
    @classmethod
    def _expand(cls, v: str) -> str:
        return os.path.expandvars(v).rstrip("/")


RouterUnion = Annotated[RouterStraightModel | RouterOsrmModel, Field(discriminator="kind")]


# ------------------ EXPORT -----------------------------


class ExportModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    auto_stops: bool = False  # generate placeholder stops at segment spacing
    record_path: str | None = None  # append JSONL records here; stdout when None
    record: bool = False

    @field_validator("record_path")
    @classmethod
    def _expand(cls, v: str | None) -> str | None:
        return None if v is None else os.path.expandvars(os.path.expanduser(v))


# ------------------------------------------------------------------


class EditorAppModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    name: str = "reroute"
    session_id: str = "local"
    log: LogModel = LogModel()
    snap: SnapModel = SnapModel()
    editor: EditorModel = EditorModel()
    router: RouterUnion = Field(default_factory=RouterStraightModel)
    export: ExportModel = ExportModel()
