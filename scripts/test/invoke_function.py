# scripts/test/invoke_function.py
"""
Sign in and call a privileged function against a running backend.
Example: python scripts/test/invoke_function.py --user supervisor --password fleet123 \
             create-user --body '{"username": "testuser22", "password": "password123", "role": "driver"}'
"""

import argparse
import json
import requests

BACKEND_URL = "http://localhost:8080/api/v1"


def sign_in(base, username, password, api_key=None):
    headers = {"X-API-Key": api_key} if api_key else {}
    resp = requests.post(f"{base}/auth/sign-in", json={"username": username, "password": password},
                         headers=headers, timeout=10)
    if resp.status_code != 200:
        print(f"❌ Sign-in failed → HTTP {resp.status_code}: {resp.json()}")
        raise SystemExit(1)
    print(f"✅ Signed in as {resp.json()['profile']['full_name']} ({resp.json()['role']})")
    return resp.json()["access_token"]


def invoke(base, token, name, body, api_key=None):
    headers = {"Authorization": f"Bearer {token}"}
    if api_key:
        headers["X-API-Key"] = api_key
    resp = requests.post(f"{base}/functions/{name}", json=body, headers=headers, timeout=10)
    print(f"{'✅' if resp.ok else '❌'} {name} → HTTP {resp.status_code}:")
    print(json.dumps(resp.json(), indent=2, ensure_ascii=False))


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Invoke a FleetCheck privileged function")
    parser.add_argument("name", choices=["create-user", "update-user", "delete-user"])
    parser.add_argument("--body", default="{}", help="JSON request body")
    parser.add_argument("--user", default="supervisor")
    parser.add_argument("--password", default="fleet123")
    parser.add_argument("--url", default=BACKEND_URL)
    parser.add_argument("--api-key", default=None)
    args = parser.parse_args()

    token = sign_in(args.url, args.user, args.password, args.api_key)
    invoke(args.url, token, args.name, json.loads(args.body), args.api_key)
