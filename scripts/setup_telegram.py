#!/usr/bin/env python3
"""Set the bot command menu and, optionally, the webhook URL.
Usage: python scripts/setup_telegram.py [https://<public-host>]
With no argument the webhook is taken from a running ngrok (ngrok http 8010), if any.
Requires TELEGRAM_BOT_TOKEN in .env.
"""
import json
import os
import sys
import urllib.parse
import urllib.request
from pathlib import Path

from dotenv import load_dotenv

REPO_ROOT = Path(__file__).resolve().parent.parent
load_dotenv(REPO_ROOT / ".env")
token = (os.environ.get("TELEGRAM_BOT_TOKEN") or "").strip()
if not token:
    print("TELEGRAM_BOT_TOKEN not set in .env", file=sys.stderr)
    sys.exit(1)

COMMANDS = [
    {"command": "start", "description": "Start or help"},
    {"command": "list", "description": "List people"},
    {"command": "add", "description": "Add a person"},
]


def call(method: str, payload: dict) -> dict:
    req = urllib.request.Request(
        f"https://api.telegram.org/bot{token}/{method}",
        data=json.dumps(payload).encode(),
        method="POST",
        headers={"Content-Type": "application/json"},
    )
    with urllib.request.urlopen(req, timeout=10) as r:
        return json.loads(r.read().decode())


def ngrok_url() -> str | None:
    try:
        with urllib.request.urlopen("http://127.0.0.1:4040/api/tunnels", timeout=2) as r:
            tunnels = json.loads(r.read().decode()).get("tunnels", [])
    except OSError:
        return None
    for t in tunnels:
        if t.get("proto") == "https" and "public_url" in t:
            return t["public_url"].rstrip("/")
    return None


def main() -> int:
    out = call("setMyCommands", {"commands": COMMANDS})
    if not out.get("ok"):
        print(f"Telegram error: {out}", file=sys.stderr)
        return 1
    print("Command menu set: " + ", ".join(c["command"] for c in COMMANDS))

    public_url = sys.argv[1].rstrip("/") if len(sys.argv) > 1 else ngrok_url()
    if not public_url:
        print("No public URL given and no ngrok tunnel found; webhook unchanged.")
        return 0
    if urllib.parse.urlparse(public_url).scheme != "https":
        print("Webhook URL must be https", file=sys.stderr)
        return 1
    webhook_url = f"{public_url}/webhook/telegram"
    out = call("setWebhook", {"url": webhook_url})
    if not out.get("ok"):
        print(f"Telegram error: {out}", file=sys.stderr)
        return 1
    print(f"Webhook set to {webhook_url}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
