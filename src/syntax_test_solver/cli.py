from __future__ import annotations

import argparse
import json
import logging
import sys

from .config import SolverConfig
from .credentials import EnvCredentialSelector
from .errors import ConfigError
from .images.encoder import ACCEPTED_MIME_TYPES, MAX_UPLOAD_BYTES, load_uploaded_image
from .llm.registry import discover_clients, get_client, list_clients
from .presentation.export import save_export
from .presentation.render import ViewMode, render_view
from .session import SolverSession

logger = logging.getLogger(__name__)


def _fail(message: str):
    print(f"Error: {message}", file=sys.stderr)
    sys.exit(1)


def _load_images(paths):
    images = []
    for path in paths:
        try:
            image = load_uploaded_image(path)
        except FileNotFoundError as e:
            _fail(str(e))
        # Advisory limits only, the request is still sent
        if image.mime_type not in ACCEPTED_MIME_TYPES:
            logger.warning("%s is %s, expected PNG or JPEG", path, image.mime_type)
        if len(image.data) > MAX_UPLOAD_BYTES:
            logger.warning("%s is larger than 10MB", path)
        images.append(image)
    return images


def main():
    discover_clients()
    p = argparse.ArgumentParser(prog="syntax-test-solver")
    p.add_argument("--list-backends", action="store_true", help="List available LLM backends")
    sub = p.add_subparsers(dest="cmd", required=False)

    analyze = sub.add_parser("analyze", help="Extract, translate and solve a test from images")
    analyze.add_argument(
        "--image", action="append", required=True, help="Path to a test page image (repeatable, in page order)"
    )
    analyze.add_argument("--llm", default=None, choices=list_clients(), help="LLM backend")
    analyze.add_argument("--model", default=None, help="Model name override")
    analyze.add_argument("--timeout", type=float, default=None, help="Request timeout in seconds")
    analyze.add_argument(
        "--view", default=ViewMode.ENGLISH.value, choices=[m.value for m in ViewMode]
    )
    analyze.add_argument("--export", default=None, help="Directory to write test-review.doc into")
    analyze.add_argument("--json", action="store_true", help="Print the result as JSON")
    analyze.add_argument("-v", "--verbose", action="store_true")

    args = p.parse_args()

    if args.list_backends:
        print("Available backends:")
        for name in list_clients():
            print(f"  - {name}")
        return

    if not args.cmd:
        p.print_help()
        sys.exit(0)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    def make_config() -> SolverConfig:
        return SolverConfig.from_env(
            llm_backend=args.llm, model_name=args.model, timeout_seconds=args.timeout
        )

    try:
        config = make_config()
    except ConfigError as e:
        _fail(str(e))

    session = SolverSession(selector=EnvCredentialSelector(), config_factory=make_config)
    session.add_images(_load_images(args.image))

    client_cls = get_client(config.llm_backend)
    if getattr(client_cls, "requires_api_key", True) and not config.api_key:
        if not session.check_credential() and not session.select_credential():
            _fail(session.error)

    result = session.analyze()
    if result is None:
        _fail(session.error)

    if args.json:
        print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
    else:
        print(render_view(result, ViewMode(args.view)))

    if args.export:
        path = save_export(result, args.export)
        print(f"Exported: {path}")


if __name__ == "__main__":
    main()
