# smoke_client.py
import pprint
import sys
import time

import requests

API_BASE = "http://127.0.0.1:3000"

payload = {
    "system": "D&D 5e",
    "players": "4",
    "experience": "beginner",
    "genre": "fantasy",
    "tone": "lighthearted",
    "concept": "a goblin wedding",
}

r = requests.post(f"{API_BASE}/generate-adventure", json=payload, timeout=300)
print("Status:", r.status_code)

if r.status_code != 202:
    # Sync deployments answer with the adventure directly.
    pprint.pprint(r.json())
    sys.exit(0 if r.ok else 1)

job_id = r.json()["jobId"]
print("Job:", job_id)

while True:
    body = requests.get(f"{API_BASE}/status/{job_id}", timeout=30).json()
    if body["status"] != "processing":
        break
    print("…still processing")
    time.sleep(3)

print("Final status:", body["status"])
print(body["data"])
