"""Engine configuration and well-known constants."""

from functools import lru_cache
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Engine settings loaded from environment."""

    # Well-known root
    root_id: str = "Q35120"

    # Depth bounds
    max_depth: int = 3
    depth_cap: int = 6

    # Horizontal tree layout
    tree_circle_radius: float = 12
    tree_node_spacing: float = 45
    tree_level_spacing: float = 200

    # Circle packing
    pack_padding: float = 7
    pack_padding_small: float = 40
    pack_padding_pair: float = 200
    pack_small_tree_threshold: int = 6

    # Colors
    depth_colorscale: str = "Viridis"
    path_up_colors: tuple[str, str] = ("#ff8d92", "#ff0000")
    path_down_colors: tuple[str, str] = ("#ff0000", "#ff8d92")
    left_mapping_color: str = "#ffd400"
    right_mapping_color: str = "#00b4ff"

    # Path strip
    path_strip_height: float = 200
    path_strip_radius: float = 25

    model_config = {"env_prefix": "ONTOVIEW_", "env_file": ".env", "env_file_encoding": "utf-8"}


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def clamp_depth(depth: int, settings: Settings | None = None) -> int:
    """Bound a requested depth to ``[0, depth_cap]``."""
    settings = settings or get_settings()
    return max(0, min(depth, settings.depth_cap))
