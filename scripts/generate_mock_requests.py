import pandas as pd
import numpy as np
import uuid
from datetime import datetime, timezone, timedelta

AID_TYPES = ["food", "medicine", "shelter", "clothing", "transportation", "other"]
PRIORITIES = ["low", "medium", "high"]

def generate_mock_requests(num_requests=200, num_sites=15, output_file="mock_requests_generated.csv"):
    """
    Generates a realistic dataset of relief requests for triage and route experiments.
    Requests cluster around a fixed number of 'sites' (shelters, camps, neighbourhoods) so a
    volunteer's route has nearby stops, and a few rows get broken coordinates on purpose.
    """
    # Center around San Francisco (the dashboard's default map center)
    CENTER_LAT = 37.7749
    CENTER_LON = -122.4194

    # 1. Generate fixed sites within roughly 10km
    sites = []
    for site_index in range(num_sites):
        sites.append({
            "name": f"Site {site_index+1}",
            "lat": CENTER_LAT + np.random.uniform(-0.09, 0.09),
            "lon": CENTER_LON + np.random.uniform(-0.09, 0.09),
        })

    data = []
    now = datetime.now(timezone.utc)

    # 2. Generate Requests
    for request_index in range(num_requests):
        site = np.random.choice(sites)

        # Requests placed within ~1-2km of their site
        lat = np.round(site["lat"] + np.random.uniform(-0.015, 0.015), 6)
        lon = np.round(site["lon"] + np.random.uniform(-0.015, 0.015), 6)

        # ~5% of rows come in without usable coordinates (free-text address only)
        if np.random.random() < 0.05:
            lat, lon = "", "unknown"

        data.append({
            "id": str(uuid.uuid4()),
            "name": f"Requester {request_index+1}",
            "contact": f"555-{np.random.randint(1000, 9999)}",
            "aid_type": np.random.choice(AID_TYPES, p=[0.3, 0.2, 0.15, 0.1, 0.1, 0.15]),
            "priority": np.random.choice(PRIORITIES, p=[0.4, 0.4, 0.2]),
            "description": "Mock relief request",
            "location": site["name"],
            "latitude": lat,
            "longitude": lon,
            "created_at": (now - timedelta(minutes=int(np.random.randint(0, 24 * 60)))).isoformat(),
            "status": np.random.choice(["open", "pending", "in-progress", "fulfilled"], p=[0.4, 0.4, 0.1, 0.1]),
            "assigned_to": "",
        })

    # 3. Save to CSV
    df = pd.DataFrame(data)
    df.to_csv(output_file, index=False)
    print(f"✅ Generated {num_requests} requests and saved to '{output_file}'")

    # Print a quick preview of request density
    print("\nTop 5 Sites (Routing Density):")
    counts = df['location'].value_counts().head(5)
    for name, count in counts.items():
        print(f"  {name}: {count} requests")

if __name__ == "__main__":
    generate_mock_requests(num_requests=200, num_sites=15)
