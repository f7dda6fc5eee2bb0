from __future__ import annotations

import argparse
import sys

from src.agent.pipeline import generate, make_request
from src.config.settings import Settings
from src.errors import MathTutorError
from src.media.files import read_media_file
from src.schemas import GenerationMode


def main() -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument("path", type=str, help="PNG, JPG or PDF with the math problem")
    parser.add_argument(
        "--mode",
        choices=[m.value for m in GenerationMode],
        default=GenerationMode.ORIGINAL.value,
    )
    parser.add_argument("--count", type=int, default=1)
    parser.add_argument("--prompt", type=str, default="", help="extra instruction for the model")
    args = parser.parse_args()

    cfg = Settings.load()

    try:
        media = read_media_file(args.path, max_bytes=cfg.max_upload_bytes)
        request = make_request(args.mode, args.count, media, args.prompt)
    except MathTutorError as exc:
        print(exc.user_message, file=sys.stderr)
        sys.exit(2)

    result = generate(request, cfg=cfg)
    if not result.ok:
        print(result.error, file=sys.stderr)
        sys.exit(1)

    print(result.text)


if __name__ == "__main__":
    main()

# Run when needed:
#python scripts/01_solve_problem.py data/bai_toan.png
#python scripts/01_solve_problem.py data/bai_toan.pdf --mode similar --count 3
