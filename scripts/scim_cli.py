"""Command-line helper for inspecting a SCIM service provider.

This module serves as a CLI wrapper around scimclient.client.ScimClient.

Required environment variables:
    SCIM_SERVICE_URL, OAUTH_TOKEN_URL, OAUTH_CLIENT_ID, OAUTH_CLIENT_SECRET
"""
from __future__ import annotations
import argparse
import json
import logging
import sys
from pathlib import Path

SCRIPT_DIR = Path(__file__).parent
PROJECT_ROOT = SCRIPT_DIR.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from scimclient.client import client_from_env
from scimclient.core.codec import dump
from scimclient.core.exceptions import ScimClientError
from scimclient.core.protocol import SearchRequest
from scimclient.core.registry import ResourceRegistry


def _print_json(obj) -> None:
    print(json.dumps(obj, indent=2, ensure_ascii=False))


def _print_list(response) -> None:
    _print_json({
        "totalResults": response.total_results,
        "Resources": [dump(r) for r in response.resources or []],
    })


def main() -> None:
    """Command-line entry point."""
    parser = argparse.ArgumentParser(description="SCIM 2.0 client helper")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    sub = parser.add_subparsers(dest="cmd")

    sg = sub.add_parser("get", help="Retrieve one resource by id")
    sg.add_argument("resource_type", help="Registered resource type name, e.g. User")
    sg.add_argument("id")

    ss = sub.add_parser("search", help="Search one resource type")
    ss.add_argument("resource_type")
    ss.add_argument("--filter", required=True)
    ss.add_argument("--count", type=int)

    su = sub.add_parser("user-by-name", help="Find users by userName")
    su.add_argument("user_name")

    sub.add_parser("discovery", help="Show service provider config and resource types")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if not args.cmd:
        parser.print_help()
        return

    registry = ResourceRegistry()
    if args.cmd in ("get", "search") and not registry.lookup(args.resource_type)[1]:
        parser.error(f"Unknown resource type {args.resource_type!r} (known: {', '.join(registry.names())})")

    try:
        client = client_from_env(registry=registry)

        if args.cmd == "get":
            resource = registry.new_resource(args.resource_type)
            client.retrieve_resource(resource, args.id)
            _print_json(dump(resource))
        elif args.cmd == "search":
            rt, _ = registry.lookup(args.resource_type)
            response = client.query_resource_type(rt, SearchRequest(filter=args.filter, count=args.count))
            _print_list(response)
        elif args.cmd == "user-by-name":
            _print_list(client.query_users_by_user_name(args.user_name))
        elif args.cmd == "discovery":
            config = client.get_service_provider_config()
            _print_json({
                "serviceProviderConfig": dump(config),
                "resourceTypes": [rt.name for rt in client.get_resource_types()],
            })
    except ScimClientError as e:
        print(f"[{args.cmd}] Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
