import asyncio
import httpx
import sys

BASE_URL = "http://localhost:8000"
HEADERS = {"Authorization": "Bearer dev-token-bypass:smoke-test"}

async def verify():
    async with httpx.AsyncClient(base_url=BASE_URL, timeout=30.0) as client:
        print("1. Checking Health (Public)...")
        try:
            resp = await client.get("/health")
            resp.raise_for_status()
            print(f"✅ Health OK: {resp.json()}")
        except httpx.HTTPError as e:
            print(f"❌ Health Failed: {e}")
            return 1

        print("\n2. Starting session...")
        resp = await client.post("/session/start", headers=HEADERS)
        if resp.status_code != 200:
            print(f"❌ Failed: {resp.status_code} - {resp.text}")
            print("   (Is ALLOW_DEV_TOKEN enabled on the server?)")
            return 1
        session_id = resp.json()["session_id"]
        print(f"✅ Session Started: {session_id}")

        print("\n3. Asking for a recovery key...")
        resp = await client.post("/chat", headers=HEADERS, json={
            "session_id": session_id,
            "message": "I need my BitLocker recovery key"
        })
        body = resp.json()
        print(f"ℹ️ State: {body['workflow_state']} (provider: {body['provider_used']})")
        devices = body["messages"][-1].get("devices") or []
        if not devices:
            print(f"❌ No device list: {body['messages'][-1]['text']}")
            return 1

        windows = [d for d in devices if d["os"] == "windows"]
        target = (windows or devices)[0]
        print(f"\n4. Selecting {target['device_name']}...")
        resp = await client.post("/devices/select", headers=HEADERS, json={
            "session_id": session_id,
            "device_id": target["id"]
        })
        body = resp.json()
        print(f"ℹ️ {body['messages'][-1]['text']}")
        print(f"ℹ️ Final state: {body['workflow_state']}")

        await client.post(f"/session/end?session_id={session_id}", headers=HEADERS)
        return 0 if body["workflow_state"] == "idle" else 1

if __name__ == "__main__":
    try:
        sys.exit(asyncio.run(verify()))
    except KeyboardInterrupt:
        pass
