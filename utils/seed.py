from models.company import Company
from models.slot import Slot

INITIAL_COMPANIES = [
    {
        "id": "c1",
        "name": "Nimbus Cloud Systems",
        "industry": "Cloud Infrastructure",
        "location": "Bengaluru, India",
        "website": "nimbuscloud.example.com",
        "established": "2012",
        "description": "Managed Kubernetes and hybrid cloud platforms for mid-size enterprises.",
    },
    {
        "id": "c2",
        "name": "Verdant Analytics",
        "industry": "Data & AI",
        "location": "Hyderabad, India",
        "website": "verdant-analytics.example.com",
        "established": "2016",
        "description": "Forecasting and pricing models for retail and logistics teams.",
    },
    {
        "id": "c3",
        "name": "Quanta Fintech",
        "industry": "Financial Services",
        "location": "Mumbai, India",
        "website": "https://quanta-fintech.example.com",
        "established": "2009",
        "description": "Payment rails, lending APIs and reconciliation tooling for banks.",
    },
    {
        "id": "c4",
        "name": "Helix Health Labs",
        "industry": "Healthcare Technology",
        "location": "Pune, India",
        "website": "helixhealth.example.com",
        "established": "2018",
        "description": "Clinical workflow software and remote patient monitoring.",
    },
    {
        "id": "c5",
        "name": "Orbit Mobility",
        "industry": "Automotive Software",
        "location": "Chennai, India",
        "website": "orbitmobility.example.com",
        "established": "2014",
        "description": "Embedded telematics and fleet management dashboards.",
    },
    {
        "id": "c6",
        "name": "Lumen Retail Tech",
        "industry": "E-commerce",
        "location": "Gurugram, India",
        "website": "lumenretail.example.com",
        "established": "2020",
        "description": "Storefront search, recommendations and checkout optimisation.",
    },
]


def build_initial_companies(slot_count: int = 3):
    companies = []
    for row in INITIAL_COMPANIES:
        slots = tuple(Slot(id=f"{row['id']}-s{n}") for n in range(1, slot_count + 1))
        companies.append(Company(slots=slots, **row))
    return companies


def seed_companies(store):
    """Load the built-in directory into a store (replaces whatever it holds)."""
    return store.reset(build_initial_companies(store.slot_count))
