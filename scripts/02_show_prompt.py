from __future__ import annotations

import argparse

from src.agent.prompts import build_prompt
from src.schemas import GenerationMode


def main() -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument("mode", choices=[m.value for m in GenerationMode])
    parser.add_argument("--count", type=int, default=1)
    parser.add_argument("--prompt", type=str, default="")
    parser.add_argument("--system", action="store_true", help="also print the system instruction")
    args = parser.parse_args()

    payload = build_prompt(args.mode, args.count, args.prompt)

    if args.system:
        print(payload.system_instruction)
        print()
        print("=" * 40)
        print()

    print(payload.user_prompt)


if __name__ == "__main__":
    main()
