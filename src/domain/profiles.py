import logging
from pathlib import Path

import tomlkit

from domain.models import ViewSettings

logger = logging.getLogger(__name__)


def list_profiles(folder: str | Path) -> list[str]:
    """Список имён профилей без расширения."""
    return sorted(p.stem for p in Path(folder).glob('*.toml') if p.is_file())


def load_profile(path: str | Path) -> ViewSettings:
    """Загрузка и валидация профиля TOML -> ViewSettings."""
    p = Path(path)
    if not p.exists():
        msg = f'Профиль не найден: {p}'
        raise FileNotFoundError(msg)
    data = tomlkit.parse(p.read_text(encoding='utf-8')).unwrap()
    settings = ViewSettings.model_validate(data)
    logger.info(
        'Profile %s: host=%s center=(%s, %s) zoom=%s',
        p.name,
        settings.host,
        settings.lon,
        settings.lat,
        settings.zoom,
    )
    return settings


def save_profile(path: str | Path, settings: ViewSettings) -> Path:
    """Сохранение ViewSettings в TOML."""
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    doc = tomlkit.document()
    for key, value in settings.model_dump().items():
        doc[key] = value
    p.write_text(tomlkit.dumps(doc), encoding='utf-8')
    return p
