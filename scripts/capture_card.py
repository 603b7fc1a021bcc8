#!/usr/bin/env python3
"""
Захват лицевой и обратной стороны карты с извлечением полей.

Использование:
    # Из готовых фото (front, back)
    python scripts/capture_card.py front.jpg back.jpg --screen 390x844 --guide 10,8,370,253

    # С веб-камеры, два захвата
    python scripts/capture_card.py --camera 0 --count 2 --screen 390x844 --guide 10,8,370,253

    # Без OCR
    python scripts/capture_card.py front.jpg --no-ocr
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import List, Tuple

from loguru import logger

# Добавляем корень проекта в путь
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from config.settings import (
    CAPTURE_OUTPUT_DIR, CAPTURE_PLATFORM, CROP_HEIGHT_INFLATION, validate_config,
)
from src.application import CaptureComponentFactory
from src.capture.infrastructure.adapters import FileCameraAdapter, OpenCVCameraAdapter
from src.capture.infrastructure.file_manager import CaptureFileManager


def _parse_size(value: str) -> Tuple[float, float]:
    try:
        w, h = value.lower().split("x")
        return float(w), float(h)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Ожидается WxH, получено: {value}")


def _parse_guide(value: str) -> List[float]:
    parts = value.split(",")
    if len(parts) != 4:
        raise argparse.ArgumentTypeError(f"Ожидается x,y,width,height, получено: {value}")
    return [float(p) for p in parts]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Card Capture: front/back + поля")
    parser.add_argument("photos", nargs="*", help="Фото карты (вместо камеры)")
    parser.add_argument("--camera", type=int, default=None, help="Индекс камеры cv2.VideoCapture")
    parser.add_argument("--count", type=int, default=2, help="Сколько захватов с камеры")
    parser.add_argument("--screen", type=_parse_size, default=(390.0, 844.0), help="Размер экрана WxH")
    parser.add_argument("--guide", type=_parse_guide, default=[10.0, 8.4, 370.0, 253.2],
                        help="Рамка x,y,width,height в координатах экрана")
    parser.add_argument("--platform", choices=sorted(CROP_HEIGHT_INFLATION), default=CAPTURE_PLATFORM)
    parser.add_argument("--out", type=Path, default=CAPTURE_OUTPUT_DIR, help="Директория для кропов")
    parser.add_argument("--no-ocr", action="store_true", help="Не распознавать поля")
    parser.add_argument("--credentials", default=None, help="Путь к Google credentials")
    parser.add_argument("--verbose", action="store_true", help="DEBUG логирование")
    return parser


async def run(args: argparse.Namespace) -> int:
    try:
        validate_config(require_credentials=False)
    except ValueError as e:
        logger.error(f"Ошибка конфигурации:\n{e}")
        return 2

    file_manager = CaptureFileManager(args.out)

    if args.photos:
        camera = FileCameraAdapter([Path(p) for p in args.photos], file_manager=file_manager)
        count = len(args.photos)
    elif args.camera is not None:
        camera = OpenCVCameraAdapter(device_index=args.camera, file_manager=file_manager)
        count = args.count
    else:
        logger.error("Укажите фото или --camera")
        return 2

    recognizer = None
    if not args.no_ocr:
        try:
            recognizer = CaptureComponentFactory.create_recognizer(args.credentials)
        except (ValueError, FileNotFoundError) as e:
            logger.warning(f"OCR отключён: {e}")

    controller = CaptureComponentFactory.create_controller(
        screen_width=args.screen[0],
        screen_height=args.screen[1],
        camera=camera,
        recognizer=recognizer,
        output_dir=args.out,
        platform=args.platform,
        # CLI печатает пути обеих сторон, кропы должны остаться на диске
        discard_replaced=False,
    )

    if not await controller.start():
        logger.error("Нет доступа к камере")
        return 1

    x, y, w, h = args.guide
    controller.on_guide_layout({"x": x, "y": y, "width": w, "height": h})

    failures = 0
    for _ in range(count):
        logger.info(controller.sides.prompt_label)
        outcome = await controller.capture()
        if not outcome.succeeded:
            failures += 1
        print(json.dumps(outcome.model_dump(mode="json"), ensure_ascii=False, indent=2))

    return 1 if failures else 0


def main() -> None:
    args = build_parser().parse_args()

    logger.remove()
    logger.add(
        sys.stderr,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <level>{message}</level>",
        level="DEBUG" if args.verbose else "INFO"
    )

    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
