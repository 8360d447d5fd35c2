"""
Local CLI that runs the summary pipeline for one ad and prints the envelope.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import List, Optional

from .config import get_pipeline_config
from .pipeline import PipelineError, VideoSummaryPipeline
from .pipeline.stages import build_default_stages
from .responses import error_payload, outcome_payload
from .schema import parse_analysis_request


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Summarise a video ad into a structured breakdown.")
    parser.add_argument("--url", required=True, help="Ad URL (YouTube captions are fetched automatically).")
    parser.add_argument("--caption", default="", help="Pasted caption text used when no transcript exists.")
    parser.add_argument("--dialogue", default="", help="Pasted dialogue, used after --caption.")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=get_pipeline_config().log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    body = {
        "ad_url": args.url,
        "fallback_caption": args.caption,
        "fallback_dialogue": args.dialogue,
    }
    try:
        request = parse_analysis_request(body)
        pipeline = VideoSummaryPipeline(stages=build_default_stages())
        payload = outcome_payload(pipeline.process(request))
        exit_code = 0
    except PipelineError as e:
        payload = error_payload(e)
        exit_code = 1

    print(json.dumps(payload, ensure_ascii=False, indent=2))
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
