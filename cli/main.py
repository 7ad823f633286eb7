"""tweed-docs CLI.

Subcommands:
- ``build``: compile ``docs/`` into JSON fragments and ``dist/manifest.json``,
- ``serve``: run the local preview server over the build output,
- ``publish``: build, commit the dist tree and push it to ``gh-pages``.
"""

import argparse
import os
import sys
from typing import List, Optional

from sitebuild import __version__
from sitebuild.config import BuildConfig, load_config
from sitebuild.errors import BuildError
from sitebuild.manifest import build_site
from sitebuild.publish import commit_dist, push_dist
from sitebuild.writer import to_json


def _add_build_flags(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--docs-dir", help="Source tree holding `_index.yaml` (default: ./docs).")
    parser.add_argument("--dist-dir", help="Output directory (default: ./dist).")
    parser.add_argument(
        "--base-url",
        help="Public URL the dist directory is served from (used for document URLs).",
    )
    parser.add_argument("-q", "--quiet", action="store_true", default=None, help="Only print errors.")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="tweed-docs", description="Tweed documentation site compiler")
    parser.add_argument("--version", action="store_true", help="Print version and exit")

    sub = parser.add_subparsers(dest="cmd")

    p_build = sub.add_parser("build", help="Compile the docs tree into JSON fragments and a manifest")
    _add_build_flags(p_build)
    p_build.add_argument(
        "--print-manifest",
        action="store_true",
        help="Print the generated manifest JSON to stdout.",
    )

    p_serve = sub.add_parser("serve", help="Serve the build output locally")
    p_serve.add_argument("--dist-dir", help="Output directory to serve (default: ./dist).")
    p_serve.add_argument("--host", default="127.0.0.1", help="Bind address (default: 127.0.0.1).")
    p_serve.add_argument("--port", type=int, default=8000, help="Port (default: 8000).")

    p_publish = sub.add_parser("publish", help="Build, commit dist/ and push it to the pages branch")
    _add_build_flags(p_publish)
    p_publish.add_argument("--remote", help="Git remote to push to (default: origin).")
    p_publish.add_argument("--branch", help="Branch serving the site (default: gh-pages).")
    p_publish.add_argument(
        "--no-push",
        action="store_true",
        help="Commit the build output but do not push it.",
    )

    return parser


def _config_from_args(args: argparse.Namespace) -> BuildConfig:
    return load_config(
        docs_dir=getattr(args, "docs_dir", None),
        dist_dir=getattr(args, "dist_dir", None),
        base_url=getattr(args, "base_url", None),
        quiet=getattr(args, "quiet", None),
        publish_remote=getattr(args, "remote", None),
        publish_branch=getattr(args, "branch", None),
    )


def _cmd_build(cfg: BuildConfig, *, print_manifest: bool) -> int:
    manifest = build_site(cfg)
    if print_manifest:
        print(to_json(manifest, indent=cfg.json_indent))
    return 0


def _cmd_serve(cfg: BuildConfig, *, host: str, port: int) -> int:
    import uvicorn

    # The server reads its configuration from the environment.
    os.environ["TWEED_DOCS_DIST_DIR"] = str(cfg.dist_dir)
    print(f"Serving {cfg.dist_dir} on http://{host}:{port}")
    uvicorn.run("preview_server.server:app", host=host, port=port)
    return 0


def _cmd_publish(cfg: BuildConfig, *, push: bool) -> int:
    build_site(cfg)
    message = commit_dist(cfg)
    print(f"Committed: {message}")
    if push:
        split = push_dist(cfg)
        print(f"Pushed {split[:12]} to {cfg.publish_remote}/{cfg.publish_branch}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(f"tweed-docs {__version__}")
        return 0

    if args.cmd is None:
        parser.print_help()
        return 2

    try:
        cfg = _config_from_args(args)
        if args.cmd == "build":
            return _cmd_build(cfg, print_manifest=bool(getattr(args, "print_manifest", False)))
        if args.cmd == "serve":
            return _cmd_serve(cfg, host=args.host, port=int(args.port))
        if args.cmd == "publish":
            return _cmd_publish(cfg, push=not bool(getattr(args, "no_push", False)))
    except (BuildError, OSError) as exc:
        print(f"[tweed-docs] Error: {exc}", file=sys.stderr)
        return 1

    parser.print_help()
    return 2


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
