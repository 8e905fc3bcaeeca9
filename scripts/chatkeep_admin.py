"""
Operator commands against a running chatkeep server.

Everything goes through the HTTP API; the database file is owned by the server.
"""
import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import Optional

import requests
from dotenv import load_dotenv

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

load_dotenv()

BASE_URL = os.getenv("CHATKEEP_URL", "http://localhost:8000")
TIMEOUT = float(os.getenv("CHATKEEP_TIMEOUT", "30"))


class ApiClient:
    def __init__(self, base_url: str = BASE_URL, timeout: float = TIMEOUT):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = requests.Session()

    def request(self, method: str, path: str, **kwargs):
        response = self.session.request(method, f"{self.base_url}{path}", timeout=self.timeout, **kwargs)
        if response.status_code >= 400:
            try:
                body = response.json()
            except ValueError:
                body = {"error": response.text}
            raise RuntimeError(f"{method} {path} failed ({response.status_code}): {body.get('error')}")
        return response.json() if response.content else None


def health(client: ApiClient, args) -> int:
    status = client.request("GET", "/api/health")
    logger.info(f"Server {status['status']} (version {status['version']}, database {status['database']})")
    return 0 if status["status"] == "ok" else 1


def export(client: ApiClient, args) -> int:
    """Download the full account export to a file."""
    data = client.request("GET", "/api/export/full-data")
    out = Path(args.out)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
    stats = data["statistics"]
    logger.info(
        f"Wrote {out}: {stats['total_conversations']} conversations, "
        f"{stats['total_messages']} messages, {stats['total_artifacts']} artifacts"
    )
    return 0


def recount(client: ApiClient, args) -> int:
    params = {"conversation_id": args.conversation_id} if args.conversation_id else None
    result = client.request("POST", "/api/maintenance/recount-messages", params=params)
    if result["count"]:
        logger.warning(f"Repaired counters of conversations: {result['repaired']}")
    else:
        logger.info("All cached counters are consistent")
    return 0


def conversations(client: ApiClient, args) -> int:
    params = {"archived": "true"} if args.archived else None
    for convo in client.request("GET", "/api/conversations", params=params):
        print(f"{convo['id']:>6}  {convo['message_count']:>4} msgs  {convo['last_message_at']}  {convo['title']}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="chatkeep operator commands")
    parser.add_argument("--url", default=BASE_URL, help="Server base URL")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("health", help="Check server and database status").set_defaults(func=health)

    export_parser = sub.add_parser("export", help="Download the full account export")
    export_parser.add_argument("--out", required=True, help="Destination JSON file")
    export_parser.set_defaults(func=export)

    recount_parser = sub.add_parser("recount", help="Repair cached message counters")
    recount_parser.add_argument("--conversation-id", type=int, default=None)
    recount_parser.set_defaults(func=recount)

    list_parser = sub.add_parser("conversations", help="List conversations")
    list_parser.add_argument("--archived", action="store_true")
    list_parser.set_defaults(func=conversations)

    return parser


def main(argv: Optional[list] = None) -> int:
    args = build_parser().parse_args(argv)
    client = ApiClient(args.url)
    try:
        return args.func(client, args)
    except (requests.RequestException, RuntimeError) as e:
        logger.error(str(e))
        return 1


if __name__ == "__main__":
    sys.exit(main())
