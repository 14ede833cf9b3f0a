import os
import requests
import threading
import time
import uuid

# Vuurt een hoop gelijktijdige starts af op hetzelfde voertuig; er mag er maar 1 lukken.
BASE_URL = os.environ.get("BASE_URL", "http://localhost:8000") + "/api/v1"
NUM_CONCURRENT_REQUESTS = int(os.environ.get("NUM_CONCURRENT_REQUESTS", "50"))


def register_and_get_token():
    email = f"load_{uuid.uuid4().hex[:8]}@example.com"
    password = "password123"
    response = requests.post(
        f"{BASE_URL}/auth/register",
        json={"name": "Load Tester", "email": email, "password": password, "password_confirmation": password},
        timeout=5,
    )
    response.raise_for_status()
    return response.json()["access_token"]


def create_vehicle(headers):
    response = requests.post(
        f"{BASE_URL}/vehicles",
        json={"plate_number": f"LT-{uuid.uuid4().hex[:6].upper()}"},
        headers=headers,
        timeout=5,
    )
    response.raise_for_status()
    return response.json()["id"]


def send_start(thread_id, headers, vehicle_id, zone_id, barrier, results):
    barrier.wait()
    try:
        start_time = time.time()
        response = requests.post(
            f"{BASE_URL}/parkings/start",
            json={"vehicle_id": vehicle_id, "zone_id": zone_id},
            headers=headers,
            timeout=10,
        )
        duration = (time.time() - start_time) * 1000
        results.append((response.status_code, duration))
        print(f"Thread {thread_id}: Status {response.status_code}, Time: {duration:.2f} ms")
    except requests.exceptions.RequestException as e:
        results.append((None, 0))
        print(f"Thread {thread_id}: Error - {e}")


def main():
    token = register_and_get_token()
    headers = {"Authorization": f"Bearer {token}"}
    vehicle_id = create_vehicle(headers)
    zone_id = requests.get(f"{BASE_URL}/zones", timeout=5).json()[0]["id"]

    print(f"Starting {NUM_CONCURRENT_REQUESTS} concurrent starts for vehicle {vehicle_id}")
    barrier = threading.Barrier(NUM_CONCURRENT_REQUESTS)
    threads = []
    results = []

    for i in range(NUM_CONCURRENT_REQUESTS):
        thread = threading.Thread(target=send_start, args=(i, headers, vehicle_id, zone_id, barrier, results))
        threads.append(thread)
        thread.start()

    for thread in threads:
        thread.join()

    created = [d for s, d in results if s == 201]
    conflicts = [d for s, d in results if s == 409]
    failed = [s for s, _ in results if s not in (201, 409)]

    print("\n--- Load Test Results ---")
    print(f"Total Requests: {len(results)}")
    print(f"Started: {len(created)}")
    print(f"Refused (409): {len(conflicts)}")
    print(f"Other failures: {len(failed)}")

    if len(created) == 1 and not failed:
        print("STATUS: PASSED - exactly one parking started.")
    else:
        print("STATUS: FAILED - expected exactly one started parking.")


if __name__ == "__main__":
    main()
