# Модуль рендеринга карты
from render.map_renderer import WorldMap
from render.session import RenderSession

__all__ = [
    'RenderSession',
    'WorldMap',
]
