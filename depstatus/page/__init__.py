"""HTML status page."""

from .renderer import Link, PageConfig, RenderError, RenderModel, ResultView, StatusPage
