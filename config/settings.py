"""
Настройки проекта Card Capture.

ВАЖНО: Для распознавания текста укажите путь к Google Cloud credentials файлу!
"""

import os
from pathlib import Path
from typing import Dict, Optional

# =============================================================================
# ПУТИ ПРОЕКТА
# =============================================================================
PROJECT_ROOT = Path(__file__).parent.parent
DATA_DIR = PROJECT_ROOT / "data"
CAPTURE_OUTPUT_DIR = Path(os.getenv("CAPTURE_OUTPUT_DIR", str(DATA_DIR / "captures")))
FIELD_PROFILES_DIR = PROJECT_ROOT / "config" / "fields"


def _env_float(name: str, default: Optional[float]) -> Optional[float]:
    """Читает float из окружения. Пустое значение или "none" отключает параметр."""
    raw = os.getenv(name)
    if raw is None:
        return default
    if raw.strip().lower() in ("", "none", "off"):
        return None
    return float(raw)


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


# =============================================================================
# GOOGLE CLOUD VISION API
# =============================================================================
# Путь к JSON-файлу с ключом сервисного аккаунта
GOOGLE_APPLICATION_CREDENTIALS = os.getenv(
    "GOOGLE_APPLICATION_CREDENTIALS",
    str(PROJECT_ROOT / "config" / "google_credentials.json")
)

# Язык распознавания (для подсказки OCR)
OCR_LANGUAGE_HINTS = ["en"]

# =============================================================================
# НАСТРОЙКИ КАМЕРЫ
# =============================================================================
# Платформа камеры: от неё зависит коэффициент растяжения кропа
CAPTURE_PLATFORM = os.getenv("CAPTURE_PLATFORM", "android")

# Индекс устройства для cv2.VideoCapture
CAMERA_DEVICE_INDEX = int(os.getenv("CAMERA_DEVICE_INDEX", "0"))

# Сколько кадров пропустить после открытия камеры (автоэкспозиция)
CAMERA_WARMUP_FRAMES = 5

# =============================================================================
# НАСТРОЙКИ RESIZE (contain fit)
# =============================================================================
RESIZE_MAX_WIDTH = 1280
RESIZE_MAX_HEIGHT = 960
RESIZE_FORMAT = "JPEG"
RESIZE_QUALITY = 100           # Максимальное качество, без потерь на сжатии
RESIZE_ONLY_SCALE_DOWN = False # Маленькие фото тоже масштабируются до границ

# =============================================================================
# НАСТРОЙКИ КРОПА
# =============================================================================
# Коэффициенты растяжения высоты кропа по платформам.
# Подобраны ЭМПИРИЧЕСКИ под пайплайны камер iOS/Android, не вычисляются.
CROP_HEIGHT_INFLATION: Dict[str, float] = {
    "android": 3.1,
    "ios": 2.8,
}

# Качество JPEG для итогового кропа
CROP_JPEG_QUALITY = 100

# Сохранять ли промежуточные файлы (raw + resized) после захвата
KEEP_INTERMEDIATE_FILES = _env_bool("KEEP_INTERMEDIATE_FILES", False)

# Удалять предыдущий кроп, когда новый захват заменяет показанное изображение
DISCARD_REPLACED_CROPS = _env_bool("DISCARD_REPLACED_CROPS", True)

# =============================================================================
# ТАЙМАУТЫ
# =============================================================================
# Таймаут на каждый нативный вызов (затвор, resize, crop). None = без таймаута
NATIVE_CALL_TIMEOUT_S = _env_float("NATIVE_CALL_TIMEOUT_S", 10.0)

# Таймаут на распознавание текста
RECOGNITION_TIMEOUT_S = _env_float("RECOGNITION_TIMEOUT_S", 15.0)

# =============================================================================
# НАСТРОЙКИ ИЗВЛЕЧЕНИЯ ПОЛЕЙ
# =============================================================================
# Профиль полей (YAML в config/fields/)
FIELD_PROFILE = os.getenv("FIELD_PROFILE", "id_card")

# Стратегия поиска фрагмента по ключевому слову
FIELD_MATCH_STRATEGY = "first_match"

# =============================================================================
# ПОДПИСИ СТОРОН КАРТЫ
# =============================================================================
SIDE_PROMPT_LABELS = {
    "front": "Capture Card Front",
    "back": "Capture Card Back",
}
SIDE_IMAGE_LABELS = {
    "front": "Card Front Image",
    "back": "Card Back Image",
}


# =============================================================================
# ПРОВЕРКА КОНФИГУРАЦИИ
# =============================================================================
def validate_config(require_credentials: bool = True):
    """Проверяет корректность конфигурации."""
    errors = []

    if CAPTURE_PLATFORM not in CROP_HEIGHT_INFLATION:
        errors.append(
            f"Неизвестная платформа CAPTURE_PLATFORM='{CAPTURE_PLATFORM}'. "
            f"Доступные: {sorted(CROP_HEIGHT_INFLATION)}"
        )

    if require_credentials:
        if not GOOGLE_APPLICATION_CREDENTIALS:
            errors.append(
                "GOOGLE_APPLICATION_CREDENTIALS не указан!\n"
                "Укажите путь к JSON-ключу в config/settings.py или через переменную окружения."
            )
        elif not Path(GOOGLE_APPLICATION_CREDENTIALS).exists():
            errors.append(
                f"Файл credentials не найден: {GOOGLE_APPLICATION_CREDENTIALS}"
            )

    if errors:
        raise ValueError("\n".join(errors))

    # Создаём директории если не существуют
    CAPTURE_OUTPUT_DIR.mkdir(parents=True, exist_ok=True)

    return True
