from .theme import apply_css
from .components import (
    header,
    metric_card,
    avatar,
    add_grid,
    provider_banners,
    render_sidebar,
    bootstrap_page,
)

__all__ = [
    "apply_css",
    "header",
    "metric_card",
    "avatar",
    "add_grid",
    "provider_banners",
    "render_sidebar",
    "bootstrap_page",
]
