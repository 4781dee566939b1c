import argparse
import logging
import sys
from typing import List, Optional

from PIL import Image, UnidentifiedImageError

from models.config import OutputConfig, STRATEGIES
from models.data_models import Speaker
from services.config_manager import ConfigManager
from services.logging_manager import LoggingManager
from services.message_filters import count_by_speaker, filter_messages
from services.message_parser import MessageParser, ParseOptions
from services.ocr_reader import load_recognizer_result
from services.storage_manager import StorageManager, format_labeled_transcript

logger = logging.getLogger(__name__)


def _resolve_canvas_size(args, result) -> Optional[tuple]:
    """Canvas size from --width/--height, then --image, then the OCR file itself."""
    width, height = args.width, args.height
    if (width is None or height is None) and args.image:
        with Image.open(args.image) as img:
            img_w, img_h = img.size
        width = width if width is not None else img_w
        height = height if height is not None else img_h
    width = width if width is not None else result.width
    height = height if height is not None else result.height
    if not width or not height:
        return None
    return int(width), int(height)


def _parse_speakers(value: Optional[str]) -> Optional[List[Speaker]]:
    if not value:
        return None
    return [Speaker[s.strip().upper()] for s in value.split(",") if s.strip()]


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Reconstruct a speaker-attributed chat transcript from OCR output")
    parser.add_argument("input", help="recognizer result JSON (blocks of lines with boxes)")
    parser.add_argument("--width", type=int, help="canvas width in pixels")
    parser.add_argument("--height", type=int, help="canvas height in pixels")
    parser.add_argument("--image", help="screenshot the OCR ran on; its size is used when --width/--height are missing")
    parser.add_argument("--strategy", choices=list(STRATEGIES), help="override classification strategy")
    parser.add_argument("--config", help="path to YAML/JSON configuration")
    parser.add_argument("--prefix", default="transcript", help="filename prefix for output")
    parser.add_argument("--format", choices=["json", "csv", "txt", "md"], help="override output format")
    parser.add_argument("--formats", help="multi formats output, comma-separated, e.g. json,txt")
    parser.add_argument("--outdir", help="override output directory")
    parser.add_argument("--exclude-fields", help="exclude fields for JSON/CSV output, comma-separated (e.g. reason,confidence)")
    parser.add_argument("--speaker", help="keep only these speakers, comma-separated (ME,OTHER,UNKNOWN)")
    parser.add_argument("--contains", help="filter by substring in text (case-insensitive)")
    parser.add_argument("--dry-run", action="store_true", help="print the labeled transcript without saving")
    parser.add_argument("--log-level", help="override logging level (DEBUG, INFO, ...)")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    命令行入口：读取识别结果 JSON，重建对话并导出。

    函数级注释：
    - 画布尺寸优先取 --width/--height，其次读取 --image 的图片尺寸，最后使用 JSON 自带的 width/height；
    - 策略默认取配置文件中的 app.strategy，可用 --strategy 覆盖；
    - --dry-run 时直接打印带发言者标签的文本，不写文件。
    """
    args = build_arg_parser().parse_args(argv)

    try:
        app_cfg = ConfigManager(args.config).get_config()
    except (FileNotFoundError, ValueError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    LoggingManager().setup(app_cfg, level_override=args.log_level)

    try:
        result = load_recognizer_result(args.input)
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"Failed to read recognizer result: {e}")
        return 1

    try:
        size = _resolve_canvas_size(args, result)
    except (OSError, UnidentifiedImageError) as e:
        logger.error(f"Failed to read screenshot size from --image: {e}")
        return 2
    if size is None:
        logger.error("Canvas size unknown: pass --width/--height or --image")
        return 2
    width, height = size

    parser = MessageParser(ParseOptions.from_app_config(app_cfg, strategy=args.strategy))
    messages = parser.parse(result.blocks, width, height)

    try:
        speakers = _parse_speakers(args.speaker)
    except KeyError as e:
        logger.error(f"Invalid --speaker value: {e}")
        return 2
    messages = filter_messages(messages, speakers=speakers, contains=args.contains)

    counts = count_by_speaker(messages)
    print(f"total {len(messages)} (ME: {counts['ME']}, OTHER: {counts['OTHER']}, UNKNOWN: {counts['UNKNOWN']})")

    if args.dry_run:
        print(format_labeled_transcript(messages, app_cfg.locale.speaker_labels))
        return 0

    multi_formats = [f.strip().lower() for f in args.formats.split(",") if f.strip()] if args.formats else []
    exclude_fields = [f.strip() for f in args.exclude_fields.split(",") if f.strip()] if args.exclude_fields else []
    output = OutputConfig(
        format=(args.format or app_cfg.output.format),
        directory=(args.outdir or app_cfg.output.directory),
        formats=multi_formats or list(app_cfg.output.formats),
        exclude_fields=exclude_fields or list(app_cfg.output.exclude_fields),
    )
    storage = StorageManager(output, app_cfg.locale)
    try:
        paths = storage.save_messages_multiple(messages, args.prefix, output.formats)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to save transcript: {e}")
        return 1
    for p in paths:
        print(p)
    return 0


if __name__ == "__main__":
    sys.exit(main())
