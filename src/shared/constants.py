# Базовый размер тайла Web Mercator (пикселей)
TILE_SIZE = 256

# Средний радиус Земли для формулы гаверсинусов (км)
EARTH_RADIUS_KM = 6371.0

# Полный и половинный охват долготы (градусы)
WORLD_LNG_SPAN_DEG = 360.0
WORLD_LNG_HALF_SPAN_DEG = 180.0

# Вид по умолчанию (Беркли, Калифорния)
DEFAULT_HOST = 'OpenStreetMap'
DEFAULT_LON = -122.257852
DEFAULT_LAT = 37.872099
DEFAULT_ZOOM = 13
DEFAULT_WIDTH_PX = 480
DEFAULT_HEIGHT_PX = 360

# Файл результата CLI по умолчанию
DEFAULT_OUTPUT_PATH = 'map.png'

# Подпись источника (attribution)
ATTRIBUTION_FONT_SIZE = 8
ATTRIBUTION_BG_ALPHA = 0.5
ATTRIBUTION_BG_COLOR = (255, 255, 255)
ATTRIBUTION_TEXT_COLOR = (0, 0, 0)
# Необязательный путь к TTF-шрифту подписи (пусто = системные шрифты)
ATTRIBUTION_FONT_PATH = ''

# Фон пустого растра (прозрачный)
RASTER_MODE = 'RGBA'
RASTER_BACKGROUND = (0, 0, 0, 0)

# HTTP
HTTP_TIMEOUT_DEFAULT = 15.0
HTTP_USER_AGENT = 'slippymap/0.1 (+https://wiki.openstreetmap.org/wiki/Tile_usage_policy)'

# Логирование
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Коды выхода CLI
EXIT_OK = 0
EXIT_CONFIG_ERROR = 2
