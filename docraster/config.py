from typing import Literal
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class SkewDetectionConfig(BaseModel):
    """Configuration for Hough-based skew estimation."""

    ink_threshold: float = Field(default=140.0, gt=0, le=256, description="Pixels with luminance below this are ink")
    top_lines: int = Field(default=20, ge=1, le=1000, description="Number of strongest lines averaged into the result")
    angle_start: float = Field(default=-20.0, ge=-45.0, le=45.0, description="First candidate angle in degrees")
    angle_step: float = Field(default=0.2, gt=0, le=5.0, description="Angular resolution in degrees")
    angle_steps: int = Field(default=200, ge=1, le=4500, description="Number of candidate angles")
    chunk_size: int = Field(default=4096, ge=1, description="Candidate points voted per batch")

    @property
    def angle_stop(self) -> float:
        """Exclusive upper end of the angle domain."""
        return self.angle_start + self.angle_steps * self.angle_step


class RasterConfig(BaseModel):
    """Configuration shared by raster operations."""

    background: str = Field(default="#FFFFFFFF", description="Canvas fill for rotation, as #AARRGGBB")
    max_allocation_bytes: int = Field(
        default=2 * 1024 ** 3, gt=0, description="Largest output buffer an operation may allocate"
    )


class PreprocessingConfig(BaseModel):
    """Configuration for the OCR preprocessing pipeline."""

    enabled: bool = Field(default=True, description="Whether preprocessing is enabled")
    target_dpi: int = Field(default=300, ge=72, le=1200, description="Target DPI for scaling")
    source_dpi: int = Field(default=300, ge=1, le=2400, description="Assumed DPI of incoming buffers")
    auto_deskew: bool = Field(default=True, description="Whether to automatically deskew images")
    auto_trim: bool = Field(default=True, description="Whether to trim white margins")
    border_width: int = Field(default=0, ge=0, description="White border added after trimming (pixels)")
    binarization_method: Literal["threshold", "none"] = Field(
        default="none", description="Binarization method"
    )
    binarization_threshold: int = Field(default=50, ge=0, le=100, description="Luminance percentage cut-off")
    grayscale: bool = Field(default=False, description="Whether to convert to grayscale")

    skew_threshold: float = Field(default=0.5, ge=0.0, le=45.0, description="Above this angle (degrees), deskewing is applied")


class Settings(BaseSettings):
    """Library settings loaded from environment variables."""

    skew: SkewDetectionConfig = SkewDetectionConfig()
    raster: RasterConfig = RasterConfig()
    preprocessing: PreprocessingConfig = PreprocessingConfig()

    model_config = SettingsConfigDict(
        env_prefix="DOCRASTER_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()
