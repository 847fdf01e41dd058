import sys
import os
import argparse
from urllib.parse import quote
import requests
from requests.auth import HTTPBasicAuth
from dotenv import load_dotenv
load_dotenv()

SERVER_URL = os.getenv("LEADERBOARD_SERVER_URL", "http://localhost:3001")
TIMEOUT = 5

def _url(path: str, server: str | None = None) -> str:
    return f"{(server or SERVER_URL).rstrip('/')}{path}"

def _params(difficulty: str | None) -> dict:
    return {"difficulty": difficulty} if difficulty else {}

def _check(req: requests.Response):
    req.raise_for_status()
    return req.json()

def submit_score(name: str, score: float, difficulty: str | None = None, server: str | None = None) -> dict:
    req = requests.post(_url("/score", server), params=_params(difficulty), json={"name": name, "score": score}, timeout=TIMEOUT)
    return _check(req)

def fetch_leaderboard(difficulty: str | None = None, server: str | None = None) -> list:
    req = requests.get(_url("/leaderboard", server), params=_params(difficulty), timeout=TIMEOUT)
    return _check(req)

def admin_list(auth: HTTPBasicAuth, difficulty: str | None = None, server: str | None = None) -> list:
    req = requests.get(_url("/admin/api", server), params=_params(difficulty), auth=auth, timeout=TIMEOUT)
    return _check(req)

def admin_set_score(auth: HTTPBasicAuth, name: str, score: float, difficulty: str | None = None, server: str | None = None) -> dict:
    req = requests.put(_url(f"/admin/player/{quote(name, safe='')}", server), params=_params(difficulty), json={"score": score}, auth=auth, timeout=TIMEOUT)
    return _check(req)

def admin_delete_player(auth: HTTPBasicAuth, name: str, difficulty: str | None = None, server: str | None = None) -> dict:
    req = requests.delete(_url(f"/admin/player/{quote(name, safe='')}", server), params=_params(difficulty), auth=auth, timeout=TIMEOUT)
    return _check(req)

def admin_reset(auth: HTTPBasicAuth, difficulty: str | None = None, server: str | None = None) -> dict:
    req = requests.delete(_url("/admin/reset", server), params=_params(difficulty), auth=auth, timeout=TIMEOUT)
    return _check(req)

def admin_wipe(auth: HTTPBasicAuth, server: str | None = None) -> dict:
    req = requests.delete(_url("/admin/wipe", server), auth=auth, timeout=TIMEOUT)
    return _check(req)

def parse_score(raw: str) -> float:
    value = float(raw)
    return int(value) if value.is_integer() else value

def print_ranking(entries: list, limit: int | None = None) -> None:
    if limit is not None:
        entries = entries[:limit]
    if not entries:
        print("(no scores)")
        return
    width = max(len(e["name"]) for e in entries)
    for pos, entry in enumerate(entries, start=1):
        print(f"{pos:>3}. {entry['name']:<{width}}  {entry['score']}")

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Typing leaderboard client")
    parser.add_argument("--server", default=None, help="Base URL (default: $LEADERBOARD_SERVER_URL)")
    parser.add_argument("--difficulty", "-d", default=None)
    sub = parser.add_subparsers(dest="command", required=True)

    submit = sub.add_parser("submit", help="Submit a score")
    submit.add_argument("name")
    submit.add_argument("score", type=parse_score)

    top = sub.add_parser("top", help="Show the leaderboard")
    top.add_argument("--limit", "-n", type=int, default=10)

    admin = sub.add_parser("admin", help="Moderation commands")
    admin.add_argument("--user", default=os.getenv("ADMIN_USER"))
    admin.add_argument("--password", default=os.getenv("ADMIN_PASS"))
    admin_sub = admin.add_subparsers(dest="action", required=True)
    admin_sub.add_parser("list")
    set_p = admin_sub.add_parser("set")
    set_p.add_argument("name")
    set_p.add_argument("score", type=parse_score)
    delete_p = admin_sub.add_parser("delete")
    delete_p.add_argument("name")
    admin_sub.add_parser("reset")
    admin_sub.add_parser("wipe")
    return parser

def run(args: argparse.Namespace) -> None:
    if args.command == "submit":
        submit_score(args.name, args.score, args.difficulty, args.server)
        print(f"Submitted {args.score} for {args.name}")
    elif args.command == "top":
        print_ranking(fetch_leaderboard(args.difficulty, args.server), args.limit)
    else:
        auth = HTTPBasicAuth(args.user or "", args.password or "")
        if args.action == "list":
            print_ranking(admin_list(auth, args.difficulty, args.server))
        elif args.action == "set":
            print(admin_set_score(auth, args.name, args.score, args.difficulty, args.server)["message"])
        elif args.action == "delete":
            print(admin_delete_player(auth, args.name, args.difficulty, args.server)["message"])
        elif args.action == "reset":
            print(admin_reset(auth, args.difficulty, args.server)["message"])
        else:
            print(admin_wipe(auth, args.server)["message"])

def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        run(args)
    except requests.HTTPError as e:
        detail = e.response.text.strip() if e.response is not None else ""
        print(f"Request failed: {e} {detail}".rstrip(), file=sys.stderr)
        return 1
    except requests.RequestException as e:
        print(f"Could not reach server: {e}", file=sys.stderr)
        return 1
    return 0

if __name__ == "__main__":
    sys.exit(main())
