"""
Smoke test against a running server: register, login, then resolve the token.

Run: python scripts/smoke_test.py [base_url]
"""
import asyncio
import sys
import uuid

import httpx


async def smoke_test(base_url: str):
    suffix = uuid.uuid4().hex[:8]
    user = {
        "name": "Smoke Test",
        "email": f"smoke-{suffix}@example.com",
        "password": "smoke-password",
        "phone": f"+1555{suffix}",
    }
    
    print(f"🧪 Testing accounts API: {base_url}\n")
    
    async with httpx.AsyncClient(base_url=base_url, timeout=10.0) as client:
        response = await client.post("/register", json=user)
        print(f"register → {response.status_code}")
        response.raise_for_status()
        
        response = await client.post("/login", json={"email": user["email"], "password": user["password"]})
        print(f"login    → {response.status_code}")
        response.raise_for_status()
        token = response.json()["token"]
        
        response = await client.get("/self", headers={"x-access-token": token})
        print(f"self     → {response.status_code}")
        response.raise_for_status()
        
        print(f"\n✅ Resolved user {response.json()['_id']}")


if __name__ == "__main__":
    url = sys.argv[1] if len(sys.argv) > 1 else "http://localhost:8000"
    asyncio.run(smoke_test(url))
